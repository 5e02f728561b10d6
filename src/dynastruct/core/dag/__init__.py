# src/dynastruct/core/dag/__init__.py
"""Field dependency graph: construction, validation and traversal."""

from dynastruct.core.dag.builder import build_dependency_graph
from dynastruct.core.dag.graph import DependencyGraph
from dynastruct.core.dag.validation import (
    find_cycle,
    find_unknown_dependencies,
    validate_dependency_graph,
)

__all__ = [
    "DependencyGraph",
    "build_dependency_graph",
    "find_cycle",
    "find_unknown_dependencies",
    "validate_dependency_graph",
]
