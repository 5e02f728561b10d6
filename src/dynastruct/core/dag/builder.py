# src/dynastruct/core/dag/builder.py
"""Dependency graph construction from a StructSpec.

The builder never fails: unknown references and cycles are left in the
graph so the validator can report them against the complete picture.
"""

from __future__ import annotations

from dynastruct.contracts.schema import StructSpec
from dynastruct.core.dag.graph import DependencyGraph
from dynastruct.core.logging import get_logger

logger = get_logger(__name__)


def build_dependency_graph(spec: StructSpec) -> DependencyGraph:
    """Build the dependency graph for ``spec``.

    Every declared field becomes a node first, in declaration order. Then,
    for each dynamic field F (declaration order) and each name D in
    F.dependencies (list order), the edge ``D -> F`` is inserted. That
    insertion order is what fixes call order in the generated functions.

    Args:
        spec: Parsed struct description

    Returns:
        Unvalidated DependencyGraph
    """
    graph = DependencyGraph(spec.name)

    for field_spec in spec.fields:
        graph.add_field(field_spec.name, kind=field_spec.kind)

    for field_spec in spec.dynamic_fields:
        for dependency in field_spec.dependencies:
            if not graph.add_dependency(dependency, field_spec.name):
                logger.debug(
                    "repeated_dependency_ignored",
                    struct=spec.name,
                    field=field_spec.name,
                    dependency=dependency,
                )

    logger.debug("dependency_graph_built", struct=spec.name, fields=len(spec.fields), edges=graph.edge_count)
    return graph
