# src/dynastruct/core/__init__.py
"""Core infrastructure: dependency graph, naming, emission, rendering, configuration, logging."""

from dynastruct.core.canonical import (
    canonical_json,
    compute_output_hash,
    stable_hash,
)
from dynastruct.core.config import (
    DynamicSettings,
    FieldSettings,
    GeneratorSettings,
    NamingSettings,
    SchemaDocument,
    StructSettings,
    load_schema,
    parse_schema_document,
)
from dynastruct.core.dag import (
    DependencyGraph,
    build_dependency_graph,
    validate_dependency_graph,
)
from dynastruct.core.emitter import emit_functions
from dynastruct.core.generator import GenerationResult, generate, generate_document
from dynastruct.core.logging import configure_logging, get_logger
from dynastruct.core.naming import (
    DEFAULT_NAMING,
    ResolvedNaming,
    find_name_collisions,
    resolve_naming,
)
from dynastruct.core.render import render_class, render_methods, render_module

__all__ = [
    "DEFAULT_NAMING",
    "DependencyGraph",
    "DynamicSettings",
    "FieldSettings",
    "GenerationResult",
    "GeneratorSettings",
    "NamingSettings",
    "ResolvedNaming",
    "SchemaDocument",
    "StructSettings",
    "build_dependency_graph",
    "canonical_json",
    "compute_output_hash",
    "configure_logging",
    "emit_functions",
    "find_name_collisions",
    "generate",
    "generate_document",
    "get_logger",
    "load_schema",
    "parse_schema_document",
    "render_class",
    "render_methods",
    "render_module",
    "resolve_naming",
    "stable_hash",
    "validate_dependency_graph",
]
