"""Schema model: the parsed description of a record under generation.

Passive, frozen data structures. A host front end (see dynastruct.runtime
for Python dataclasses, dynastruct.core.config for YAML documents) produces
these; the generator core consumes them and never parses source text itself.

Construction enforces shape-level invariants only (unique names, static
fields have no dependencies, dynamic fields name a compute method).
Whether each dependency refers to a declared field is checked later by the
validator so that every bad reference can be reported together.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, fields

from dynastruct.contracts.enums import FieldKind
from dynastruct.contracts.errors import SchemaError


@dataclass(frozen=True, slots=True)
class NamingConfig:
    """Per-family prefix/suffix overrides for generated function names.

    ``None`` means "not set, use the default". Any string, including the
    empty string, replaces the default wholesale.
    """

    updated_prefix: str | None = None
    updated_suffix: str | None = None
    setter_prefix: str | None = None
    setter_suffix: str | None = None
    update_prefix: str | None = None
    update_suffix: str | None = None

    def merged_over(self, base: NamingConfig) -> NamingConfig:
        """Layer these overrides on top of ``base``, slot by slot."""
        return NamingConfig(**{**base.overrides(), **self.overrides()})

    def overrides(self) -> dict[str, str]:
        """Return only the slots that are set."""
        return {slot.name: getattr(self, slot.name) for slot in fields(self) if getattr(self, slot.name) is not None}


def _dependency_names(field: str, dependencies: Iterable[str]) -> tuple[str, ...]:
    # A bare string is iterable too; "ab" would silently become ("a", "b")
    if isinstance(dependencies, str):
        raise SchemaError(
            f"Dependencies of field '{field}' must be a sequence of field names, got the string {dependencies!r}"
        )
    return tuple(dependencies)


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One declared field of a record.

    ``type_ref`` is an opaque token; the core passes it through to the
    setter's parameter annotation without looking at it.
    """

    name: str
    type_ref: str | None = None
    kind: FieldKind = FieldKind.STATIC
    dependencies: tuple[str, ...] = ()
    compute_method: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise SchemaError("Field name must not be empty")
        if not isinstance(self.dependencies, tuple):
            object.__setattr__(self, "dependencies", _dependency_names(self.name, self.dependencies))

        if self.kind == FieldKind.STATIC:
            if self.dependencies:
                raise SchemaError(
                    f"Static field '{self.name}' cannot declare dependencies {list(self.dependencies)}; "
                    "only dynamic fields are computed from other fields"
                )
            if self.compute_method is not None:
                raise SchemaError(f"Static field '{self.name}' cannot have a compute method ('{self.compute_method}')")
        elif not self.compute_method:
            raise SchemaError(f"Dynamic field '{self.name}' requires a compute method")

    @classmethod
    def static(cls, name: str, type_ref: str | None = None) -> FieldSpec:
        return cls(name=name, type_ref=type_ref)

    @classmethod
    def dynamic(
        cls,
        name: str,
        dependencies: Iterable[str],
        compute_method: str,
        type_ref: str | None = None,
    ) -> FieldSpec:
        return cls(
            name=name,
            type_ref=type_ref,
            kind=FieldKind.DYNAMIC,
            dependencies=_dependency_names(name, dependencies),
            compute_method=compute_method,
        )

    @property
    def is_dynamic(self) -> bool:
        return self.kind == FieldKind.DYNAMIC


@dataclass(frozen=True, slots=True)
class StructSpec:
    """The record under generation.

    Field order is declaration order. It is semantically significant: it
    fixes the order functions are emitted in and the order dependents are
    called in.
    """

    name: str
    fields: tuple[FieldSpec, ...]
    naming: NamingConfig = NamingConfig()

    def __post_init__(self) -> None:
        if not isinstance(self.fields, tuple):
            object.__setattr__(self, "fields", tuple(self.fields))

        seen: set[str] = set()
        duplicates: list[str] = []
        for spec in self.fields:
            if spec.name in seen and spec.name not in duplicates:
                duplicates.append(spec.name)
            seen.add(spec.name)
        if duplicates:
            raise SchemaError(f"Struct '{self.name}' declares duplicate field name(s): {duplicates}")

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    def has_field(self, name: str) -> bool:
        return any(spec.name == name for spec in self.fields)

    def get_field(self, name: str) -> FieldSpec:
        """Look up a field by name.

        Raises:
            KeyError: If the struct declares no such field
        """
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(f"Struct '{self.name}' has no field '{name}'")

    @property
    def dynamic_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.fields if spec.is_dynamic)
