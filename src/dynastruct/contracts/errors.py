"""Diagnostics and exceptions raised while generating propagation functions.

Every diagnostic is detected at generation time. Generated code never raises
these: the dependency graph is proven acyclic before anything is emitted.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from dynastruct.contracts.enums import DiagnosticKind


class SchemaError(ValueError):
    """Raised when a schema model is malformed at construction time.

    Examples: duplicate field names, a static field declaring dependencies,
    a dynamic field without a compute method.
    """

    pass


class RenderError(ValueError):
    """Raised when emitted functions cannot be rendered as Python source."""

    pass


class HostAttachError(TypeError):
    """Raised when generated methods cannot be attached to a Python class."""

    pass


# =============================================================================
# Diagnostics
# =============================================================================


@dataclass(frozen=True, slots=True)
class UnknownDependency:
    """A dependency names a field that the struct does not declare."""

    field: str
    missing: str
    kind: DiagnosticKind = dataclasses.field(default=DiagnosticKind.UNKNOWN_DEPENDENCY, init=False)

    @property
    def message(self) -> str:
        return f"Field '{self.field}' depends on unknown field '{self.missing}'"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "field": self.field, "missing": self.missing}


@dataclass(frozen=True, slots=True)
class CyclicDependency:
    """The dependency graph contains a cycle.

    ``cycle`` lists field names in the order the traversal discovered them.
    A field depending on itself is a cycle of length one.
    """

    cycle: tuple[str, ...]
    kind: DiagnosticKind = dataclasses.field(default=DiagnosticKind.CYCLIC_DEPENDENCY, init=False)

    @property
    def message(self) -> str:
        path = " -> ".join((*self.cycle, self.cycle[0]))
        return f"Cyclic dependency: {path}"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "cycle": list(self.cycle)}


@dataclass(frozen=True, slots=True)
class NameCollision:
    """Two generated (or generated and declared) identifiers resolve to the same name.

    ``a`` and ``b`` describe the two owners, e.g. "setter of 'a'" and
    "update function of 'set_a'".
    """

    a: str
    b: str
    resolved_name: str
    kind: DiagnosticKind = dataclasses.field(default=DiagnosticKind.NAME_COLLISION, init=False)

    @property
    def message(self) -> str:
        return f"Name collision: {self.a} and {self.b} both resolve to '{self.resolved_name}'"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "a": self.a, "b": self.b, "resolved_name": self.resolved_name}


type Diagnostic = UnknownDependency | CyclicDependency | NameCollision


# =============================================================================
# Generation errors
# =============================================================================


class GenerationError(ValueError):
    """Base class for failures that abort a generation run.

    A run that fails produces no output at all. The error carries every
    diagnostic collected for the failing class of checks; ``diagnostic`` is
    the first one found.
    """

    def __init__(self, struct_name: str, diagnostics: Sequence[Diagnostic]) -> None:
        if not diagnostics:
            raise ValueError("GenerationError requires at least one diagnostic")
        self.struct_name = struct_name
        self.diagnostics: tuple[Diagnostic, ...] = tuple(diagnostics)
        lines = [d.message for d in self.diagnostics]
        if len(lines) == 1:
            summary = lines[0]
        else:
            summary = f"{len(lines)} problems:\n" + "\n".join(f"  - {line}" for line in lines)
        super().__init__(f"{struct_name}: {summary}")

    @property
    def diagnostic(self) -> Diagnostic:
        return self.diagnostics[0]

    @property
    def kind(self) -> DiagnosticKind:
        return self.diagnostic.kind


class DependencyGraphError(GenerationError):
    """Unknown dependency references or a dependency cycle."""

    pass


class NameCollisionError(GenerationError):
    """Resolved function names collide with each other or with declared names."""

    pass
