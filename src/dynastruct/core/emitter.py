# src/dynastruct/core/emitter.py
"""Emission of propagation functions from a validated dependency graph.

For each field, in declaration order, two functions are emitted:

1. The updated function. It takes no value and only propagates: one call
   per outgoing edge, in adjacency order, to the dependent's update
   function. It is emitted even when the field has no dependents so callers
   can always invoke it.
2. Either a setter (static field): assign ``value``, then call the updated
   function. Or an update function (dynamic field): call the compute
   method, then call the updated function.

Propagation is by nested direct calls with no deduplication. A field
reachable from the changed field along two paths (a diamond) is recomputed
once per path, and everything downstream of it runs once per recompute.
That is the cost of zero runtime bookkeeping. PropagationMode.TOPOLOGICAL
is the opt-in alternative: each updated function calls the compute methods
of all downstream fields directly, once each, in dependency order.

The emitter assumes validation already passed and never re-checks
acyclicity. Output depends only on its inputs.
"""

from __future__ import annotations

from dynastruct.contracts.emitted import (
    AssignField,
    CallMethod,
    FunctionDef,
    Parameter,
    Statement,
)
from dynastruct.contracts.enums import FunctionFamily, PropagationMode
from dynastruct.contracts.schema import FieldSpec, StructSpec
from dynastruct.core.dag.graph import DependencyGraph
from dynastruct.core.naming import ResolvedNaming

SETTER_VALUE_PARAMETER = "value"


def _updated_body(
    field_spec: FieldSpec,
    spec: StructSpec,
    graph: DependencyGraph,
    naming: ResolvedNaming,
    mode: PropagationMode,
) -> tuple[Statement, ...]:
    if mode == PropagationMode.TOPOLOGICAL:
        # Every downstream field is dynamic: only dynamic fields have incoming edges
        return tuple(
            CallMethod(method=spec.get_field(name).compute_method)  # type: ignore[arg-type]
            for name in graph.propagation_order(field_spec.name)
        )
    return tuple(CallMethod(method=naming.update_name(dependent)) for dependent in graph.dependents(field_spec.name))


def emit_updated(
    field_spec: FieldSpec,
    spec: StructSpec,
    graph: DependencyGraph,
    naming: ResolvedNaming,
    mode: PropagationMode = PropagationMode.NESTED,
) -> FunctionDef:
    """Emit the updated (propagation-only) function for one field."""
    return FunctionDef(
        name=naming.updated_name(field_spec.name),
        family=FunctionFamily.UPDATED,
        field=field_spec.name,
        body=_updated_body(field_spec, spec, graph, naming, mode),
    )


def emit_setter(field_spec: FieldSpec, naming: ResolvedNaming) -> FunctionDef:
    """Emit the setter for a static field."""
    return FunctionDef(
        name=naming.setter_name(field_spec.name),
        family=FunctionFamily.SETTER,
        field=field_spec.name,
        parameters=(Parameter(name=SETTER_VALUE_PARAMETER, type_ref=field_spec.type_ref),),
        body=(
            AssignField(field=field_spec.name, value=SETTER_VALUE_PARAMETER),
            CallMethod(method=naming.updated_name(field_spec.name)),
        ),
    )


def emit_update(field_spec: FieldSpec, naming: ResolvedNaming) -> FunctionDef:
    """Emit the update function for a dynamic field."""
    if field_spec.compute_method is None:
        raise ValueError(f"Dynamic field '{field_spec.name}' has no compute method")
    return FunctionDef(
        name=naming.update_name(field_spec.name),
        family=FunctionFamily.UPDATE,
        field=field_spec.name,
        body=(
            CallMethod(method=field_spec.compute_method),
            CallMethod(method=naming.updated_name(field_spec.name)),
        ),
    )


def emit_functions(
    spec: StructSpec,
    graph: DependencyGraph,
    naming: ResolvedNaming,
    *,
    mode: PropagationMode = PropagationMode.NESTED,
) -> tuple[FunctionDef, ...]:
    """Emit every function for ``spec`` in declaration order.

    Args:
        spec: Struct description
        graph: Dependency graph for ``spec``, already validated
        naming: Resolved function naming
        mode: Propagation strategy for updated functions

    Returns:
        For each field: its updated function, then its setter or update function
    """
    functions: list[FunctionDef] = []
    for field_spec in spec.fields:
        functions.append(emit_updated(field_spec, spec, graph, naming, mode))
        if field_spec.is_dynamic:
            functions.append(emit_update(field_spec, naming))
        else:
            functions.append(emit_setter(field_spec, naming))
    return tuple(functions)
