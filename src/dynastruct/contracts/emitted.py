"""Structural form of generated functions.

The emitter produces these; the renderer turns them into Python source and
the host adapter attaches them to a class. Every generated function is a
method on the owning record, so ``self`` is implicit in all statements.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from dynastruct.contracts.enums import FunctionFamily


@dataclass(frozen=True, slots=True)
class Parameter:
    """A parameter of a generated function (besides ``self``)."""

    name: str
    type_ref: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "type_ref": self.type_ref}


@dataclass(frozen=True, slots=True)
class AssignField:
    """``self.<field> = <value>`` where value names a parameter."""

    field: str
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {"op": "assign", "field": self.field, "value": self.value}


@dataclass(frozen=True, slots=True)
class CallMethod:
    """``self.<method>()``"""

    method: str

    def to_dict(self) -> dict[str, Any]:
        return {"op": "call", "method": self.method}


type Statement = AssignField | CallMethod


@dataclass(frozen=True, slots=True)
class FunctionDef:
    """One generated function.

    Attributes:
        name: Resolved function name
        family: Which of the three generated families this belongs to
        field: The field this function was generated for
        parameters: Value parameters (only setters take one)
        body: Statements in execution order; may be empty
    """

    name: str
    family: FunctionFamily
    field: str
    parameters: tuple[Parameter, ...] = ()
    body: tuple[Statement, ...] = ()

    @property
    def calls(self) -> tuple[str, ...]:
        """Names of the methods this function calls, in order."""
        return tuple(stmt.method for stmt in self.body if isinstance(stmt, CallMethod))

    @property
    def is_empty(self) -> bool:
        return not self.body

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "family": self.family.value,
            "field": self.field,
            "parameters": [p.to_dict() for p in self.parameters],
            "body": [stmt.to_dict() for stmt in self.body],
        }
