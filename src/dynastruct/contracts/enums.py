"""All kinds and modes shared across subsystem boundaries."""

from enum import StrEnum


class FieldKind(StrEnum):
    """Classification of a declared field.

    Static fields are set directly by callers through a generated setter.
    Dynamic fields are recomputed by a user-supplied compute method.
    """

    STATIC = "static"
    DYNAMIC = "dynamic"


class FunctionFamily(StrEnum):
    """The three families of generated functions."""

    UPDATED = "updated"
    SETTER = "setter"
    UPDATE = "update"


class PropagationMode(StrEnum):
    """How an updated function reaches the fields downstream of it.

    NESTED calls each direct dependent's update function, which in turn calls
    its own dependents. A field reachable along several paths is recomputed
    once per path.

    TOPOLOGICAL calls the compute method of every downstream field exactly
    once, in dependency order. Opt-in only: it changes how many times compute
    methods run.
    """

    NESTED = "nested"
    TOPOLOGICAL = "topological"


class DiagnosticKind(StrEnum):
    """Kinds of generation-time diagnostics."""

    UNKNOWN_DEPENDENCY = "unknown_dependency"
    CYCLIC_DEPENDENCY = "cyclic_dependency"
    NAME_COLLISION = "name_collision"
