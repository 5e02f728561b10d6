# src/dynastruct/core/naming.py
"""Resolution of generated function names.

Three families of functions are generated per struct:

- updated: ``{updated_prefix}{field}{updated_suffix}`` for every field
- setter:  ``{setter_prefix}{field}{setter_suffix}`` for static fields
- update:  ``{update_prefix}{field}{update_suffix}`` for dynamic fields

resolve_naming() is pure string selection: an override, when set, is used
verbatim (the empty string included), otherwise the default applies.
Override content is never validated there; find_name_collisions() is the
separate, optional check for identifiers that end up clashing.
"""

from __future__ import annotations

from dataclasses import dataclass

from dynastruct.contracts.enums import FunctionFamily
from dynastruct.contracts.errors import NameCollision
from dynastruct.contracts.schema import NamingConfig, StructSpec
from dynastruct.contracts.types import FunctionName

DEFAULT_UPDATED_PREFIX = "updated_"
DEFAULT_UPDATED_SUFFIX = ""
DEFAULT_SETTER_PREFIX = "update_"
DEFAULT_SETTER_SUFFIX = ""
DEFAULT_UPDATE_PREFIX = "update_"
DEFAULT_UPDATE_SUFFIX = ""


@dataclass(frozen=True, slots=True)
class ResolvedNaming:
    """Effective prefix/suffix for each function family."""

    updated_prefix: str = DEFAULT_UPDATED_PREFIX
    updated_suffix: str = DEFAULT_UPDATED_SUFFIX
    setter_prefix: str = DEFAULT_SETTER_PREFIX
    setter_suffix: str = DEFAULT_SETTER_SUFFIX
    update_prefix: str = DEFAULT_UPDATE_PREFIX
    update_suffix: str = DEFAULT_UPDATE_SUFFIX

    def updated_name(self, field: str) -> FunctionName:
        return FunctionName(f"{self.updated_prefix}{field}{self.updated_suffix}")

    def setter_name(self, field: str) -> FunctionName:
        return FunctionName(f"{self.setter_prefix}{field}{self.setter_suffix}")

    def update_name(self, field: str) -> FunctionName:
        return FunctionName(f"{self.update_prefix}{field}{self.update_suffix}")

    def name_for(self, family: FunctionFamily, field: str) -> FunctionName:
        if family == FunctionFamily.UPDATED:
            return self.updated_name(field)
        if family == FunctionFamily.SETTER:
            return self.setter_name(field)
        return self.update_name(field)


DEFAULT_NAMING = ResolvedNaming()


def _pick(override: str | None, default: str) -> str:
    return default if override is None else override


def resolve_naming(config: NamingConfig) -> ResolvedNaming:
    """Resolve each of the six slots from ``config`` and the defaults."""
    return ResolvedNaming(
        updated_prefix=_pick(config.updated_prefix, DEFAULT_UPDATED_PREFIX),
        updated_suffix=_pick(config.updated_suffix, DEFAULT_UPDATED_SUFFIX),
        setter_prefix=_pick(config.setter_prefix, DEFAULT_SETTER_PREFIX),
        setter_suffix=_pick(config.setter_suffix, DEFAULT_SETTER_SUFFIX),
        update_prefix=_pick(config.update_prefix, DEFAULT_UPDATE_PREFIX),
        update_suffix=_pick(config.update_suffix, DEFAULT_UPDATE_SUFFIX),
    )


_FAMILY_LABELS = {
    FunctionFamily.UPDATED: "updated function",
    FunctionFamily.SETTER: "setter",
    FunctionFamily.UPDATE: "update function",
}


def planned_names(spec: StructSpec, naming: ResolvedNaming) -> list[tuple[FunctionName, FunctionFamily, str]]:
    """Every function name the emitter will produce, in emission order."""
    planned: list[tuple[FunctionName, FunctionFamily, str]] = []
    for field_spec in spec.fields:
        entry = FunctionFamily.UPDATE if field_spec.is_dynamic else FunctionFamily.SETTER
        for family in (FunctionFamily.UPDATED, entry):
            planned.append((naming.name_for(family, field_spec.name), family, field_spec.name))
    return planned


def find_name_collisions(spec: StructSpec, naming: ResolvedNaming) -> list[NameCollision]:
    """Find generated names that clash with each other or with declared names.

    Declared names are the struct's field names and compute-method names. In
    a Python class, methods and attributes share one namespace, so a setter
    named like a field would be replaced by the field value, and an update
    function named like its own compute method would recurse forever.

    Two fields sharing a compute method is legitimate and not reported. A
    compute method named like a field is, since ``self.<method>()`` would
    then call the field value.
    """
    owners: dict[str, str] = {}
    for field_spec in spec.fields:
        owners.setdefault(field_spec.name, f"field '{field_spec.name}'")
    field_names = set(owners)

    collisions: list[NameCollision] = []
    for field_spec in spec.dynamic_fields:
        method = field_spec.compute_method
        if method is None:
            continue
        label = f"compute method of '{field_spec.name}'"
        if method in field_names:
            collisions.append(NameCollision(a=owners[method], b=label, resolved_name=method))
        else:
            owners.setdefault(method, label)

    for name, family, field in planned_names(spec, naming):
        label = f"{_FAMILY_LABELS[family]} of '{field}'"
        if name in owners:
            collisions.append(NameCollision(a=owners[name], b=label, resolved_name=name))
        else:
            owners[name] = label
    return collisions
