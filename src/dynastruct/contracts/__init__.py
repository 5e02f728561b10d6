"""Shared contracts for cross-boundary data types.

All dataclasses, enums and exceptions that cross subsystem boundaries are
defined here. This package is a LEAF MODULE with no outbound dependencies to
core, so front ends and back ends can import it without pulling in networkx,
jinja2 or pydantic.

Import patterns:
    # Contracts (lightweight, no heavy dependencies)
    from dynastruct.contracts import FieldSpec, StructSpec, NamingConfig

    # Settings classes (from core, pulls in pydantic/dynaconf)
    from dynastruct.core.config import GeneratorSettings, SchemaDocument
"""

from dynastruct.contracts.emitted import (
    AssignField,
    CallMethod,
    FunctionDef,
    Parameter,
    Statement,
)
from dynastruct.contracts.enums import (
    DiagnosticKind,
    FieldKind,
    FunctionFamily,
    PropagationMode,
)
from dynastruct.contracts.errors import (
    CyclicDependency,
    DependencyGraphError,
    Diagnostic,
    GenerationError,
    HostAttachError,
    NameCollision,
    NameCollisionError,
    RenderError,
    SchemaError,
    UnknownDependency,
)
from dynastruct.contracts.schema import FieldSpec, NamingConfig, StructSpec
from dynastruct.contracts.types import FieldName, FunctionName

__all__ = [
    # emitted
    "AssignField",
    "CallMethod",
    "FunctionDef",
    "Parameter",
    "Statement",
    # enums
    "DiagnosticKind",
    "FieldKind",
    "FunctionFamily",
    "PropagationMode",
    # errors
    "CyclicDependency",
    "DependencyGraphError",
    "Diagnostic",
    "GenerationError",
    "HostAttachError",
    "NameCollision",
    "NameCollisionError",
    "RenderError",
    "SchemaError",
    "UnknownDependency",
    # schema
    "FieldSpec",
    "NamingConfig",
    "StructSpec",
    # types
    "FieldName",
    "FunctionName",
]
