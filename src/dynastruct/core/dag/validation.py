# src/dynastruct/core/dag/validation.py
"""Referential-integrity and acyclicity checks for a DependencyGraph.

Two classes of check run in a fixed order:

1. Unknown references. Every edge source must be a declared field. All
   violations are collected before failing.
2. Cycles. Only run when step 1 found nothing: a graph with invalid nodes
   cannot be meaningfully cycle-checked. The first cycle found is reported.

Traversal follows declaration and adjacency order, so the reported cycle is
identical across runs on identical input.
"""

from __future__ import annotations

from collections.abc import Iterator

from dynastruct.contracts.errors import (
    CyclicDependency,
    DependencyGraphError,
    UnknownDependency,
)
from dynastruct.contracts.schema import StructSpec
from dynastruct.core.dag.graph import DependencyGraph
from dynastruct.core.logging import get_logger

logger = get_logger(__name__)


def find_unknown_dependencies(spec: StructSpec, graph: DependencyGraph) -> list[UnknownDependency]:
    """Return one diagnostic per edge whose source is not a declared field.

    Diagnostics come out in edge insertion order. ``spec`` is the source of
    truth for which names exist; the graph's declared flags must agree.
    """
    declared = set(spec.field_names)
    return [
        UnknownDependency(field=dependent, missing=dependency)
        for dependency, dependent in graph.edges()
        if dependency not in declared or not graph.is_declared(dependency)
    ]


def find_cycle(graph: DependencyGraph) -> tuple[str, ...] | None:
    """Depth-first search for a cycle.

    Roots are tried in node order and successors in adjacency order. The
    recursion stack is kept explicitly; meeting a node already on it closes
    a cycle, returned as the stack slice from that node onwards.

    Returns:
        Field names of the first cycle found, in traversal order, or None
    """
    finished: set[str] = set()

    for root in graph.nodes():
        if root in finished:
            continue

        path: list[str] = [root]
        on_path: dict[str, int] = {root: 0}
        pending: list[Iterator[str]] = [iter(graph.dependents(root))]

        while pending:
            successor = next(pending[-1], None)
            if successor is None:
                pending.pop()
                done = path.pop()
                del on_path[done]
                finished.add(done)
                continue
            if successor in on_path:
                return tuple(path[on_path[successor] :])
            if successor in finished:
                continue
            on_path[successor] = len(path)
            path.append(successor)
            pending.append(iter(graph.dependents(successor)))

    return None


def validate_dependency_graph(spec: StructSpec, graph: DependencyGraph) -> None:
    """Validate ``graph`` for ``spec`` and freeze it on success.

    Raises:
        DependencyGraphError: With every UnknownDependency found, or with the
            first CyclicDependency found when all references are valid
    """
    unknown = find_unknown_dependencies(spec, graph)
    if unknown:
        logger.debug("dependency_graph_invalid", struct=spec.name, unknown=[d.missing for d in unknown])
        raise DependencyGraphError(spec.name, unknown)

    # networkx check is cheap; the ordered DFS only runs to name the cycle
    if not graph.is_acyclic():
        cycle = find_cycle(graph)
        if cycle is None:
            raise AssertionError(f"networkx reported a cycle in '{spec.name}' that the ordered search did not find")
        logger.debug("dependency_graph_invalid", struct=spec.name, cycle=list(cycle))
        raise DependencyGraphError(spec.name, [CyclicDependency(cycle=cycle)])

    graph.freeze()
    logger.debug("dependency_graph_validated", struct=spec.name, fields=len(spec.fields), edges=graph.edge_count)
