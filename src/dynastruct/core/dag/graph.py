# src/dynastruct/core/dag/graph.py
"""DependencyGraph class: query and traversal operations.

Construction logic lives in builder.py and checks live in validation.py;
this module contains the graph class itself.
"""

from __future__ import annotations

import networkx as nx
from networkx import DiGraph

from dynastruct.contracts.enums import FieldKind
from dynastruct.contracts.types import FieldName


class DependencyGraph:
    """Field dependency graph for one struct.

    Wraps a NetworkX DiGraph. An edge ``A -> B`` means "changing A must
    recompute B" (B lists A among its dependencies).

    Ordering guarantees (relied on by the emitter for deterministic output):
    - Nodes iterate in insertion order; the builder inserts declared fields
      in declaration order before adding any edge.
    - Successors of a node iterate in edge insertion order.
    - edges() returns edges in global insertion order.

    A node created only because an edge referenced it is marked undeclared;
    the validator reports those as unknown dependencies.
    """

    def __init__(self, struct_name: str = "") -> None:
        self.struct_name = struct_name
        self._graph: DiGraph[str] = nx.DiGraph()
        self._edge_order: list[tuple[FieldName, FieldName]] = []
        self._frozen = False

    @property
    def node_count(self) -> int:
        """Number of nodes in the graph (declared or not)."""
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        """Number of edges in the graph."""
        return self._graph.number_of_edges()

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def has_node(self, name: str) -> bool:
        return self._graph.has_node(name)

    def has_edge(self, dependency: str, dependent: str) -> bool:
        return self._graph.has_edge(dependency, dependent)

    def add_field(self, name: str, *, kind: FieldKind) -> None:
        """Add a declared field as a node."""
        self._check_mutable()
        self._graph.add_node(name, declared=True, kind=kind)

    def add_dependency(self, dependency: str, dependent: str) -> bool:
        """Add edge ``dependency -> dependent``.

        An endpoint that was never added with add_field() is created as an
        undeclared node. Adding an existing edge again is a no-op.

        Returns:
            True if a new edge was added
        """
        self._check_mutable()
        for name in (dependency, dependent):
            if not self._graph.has_node(name):
                self._graph.add_node(name, declared=False, kind=None)
        if self._graph.has_edge(dependency, dependent):
            return False
        self._graph.add_edge(dependency, dependent)
        self._edge_order.append((FieldName(dependency), FieldName(dependent)))
        return True

    def freeze(self) -> None:
        """Make the graph immutable. Called once validation has passed."""
        if not self._frozen:
            self._graph = nx.freeze(self._graph)
            self._frozen = True

    def _check_mutable(self) -> None:
        if self._frozen:
            raise nx.NetworkXError(f"DependencyGraph for '{self.struct_name}' is frozen")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_declared(self, name: str) -> bool:
        """True if ``name`` is a node added via add_field()."""
        if not self._graph.has_node(name):
            return False
        declared: bool = self._graph.nodes[name]["declared"]
        return declared

    def kind(self, name: str) -> FieldKind:
        """Return the kind of a declared field.

        Raises:
            KeyError: If the node is missing or undeclared
        """
        if not self.is_declared(name):
            raise KeyError(f"'{name}' is not a declared field of '{self.struct_name}'")
        kind: FieldKind = self._graph.nodes[name]["kind"]
        return kind

    def nodes(self) -> tuple[FieldName, ...]:
        """All nodes in insertion order, declared fields first."""
        return tuple(FieldName(n) for n in self._graph.nodes)

    def fields(self) -> tuple[FieldName, ...]:
        """Declared fields in declaration order."""
        return tuple(FieldName(n) for n, declared in self._graph.nodes(data="declared") if declared)

    def edges(self) -> tuple[tuple[FieldName, FieldName], ...]:
        """Edges in insertion order (field declaration order, then dependency order)."""
        return tuple(self._edge_order)

    def dependents(self, name: str) -> tuple[FieldName, ...]:
        """Fields that must be recomputed when ``name`` changes, in adjacency order."""
        return tuple(FieldName(n) for n in self._graph.successors(name))

    def dependencies(self, name: str) -> tuple[FieldName, ...]:
        """Fields that ``name`` is computed from, in insertion order."""
        return tuple(FieldName(n) for n in self._graph.predecessors(name))

    def is_acyclic(self) -> bool:
        """Check if the graph is acyclic (a valid DAG)."""
        return nx.is_directed_acyclic_graph(self._graph)

    def descendants(self, name: str) -> frozenset[FieldName]:
        """Every field reachable from ``name``, excluding ``name`` itself."""
        return frozenset(FieldName(n) for n in nx.descendants(self._graph, name))

    def topological_order(self) -> tuple[FieldName, ...]:
        """Nodes in dependency order, ties broken by declaration order.

        Raises:
            nx.NetworkXUnfeasible: If the graph contains a cycle
        """
        position = {name: index for index, name in enumerate(self._graph.nodes)}
        order = nx.lexicographical_topological_sort(self._graph, key=position.__getitem__)
        return tuple(FieldName(n) for n in order)

    def propagation_order(self, name: str) -> tuple[FieldName, ...]:
        """Descendants of ``name`` in topological order, each exactly once."""
        reachable = self.descendants(name)
        return tuple(n for n in self.topological_order() if n in reachable)
