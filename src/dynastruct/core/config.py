# src/dynastruct/core/config.py
"""
Schema documents: structs described in YAML instead of Python classes.

The pydantic models below mirror the document layout and convert to the
contracts schema model (StructSpec) that the generator consumes. Dynaconf
reads the file so DYNASTRUCT_* environment variables can override any key.

Example document:

    generator:
      propagation: nested
      detect_name_collisions: true
    naming:
      setter_prefix: set_
    structs:
      - name: Demo
        naming:
          setter_suffix: _value
        fields:
          - {name: a, type: int}
          - {name: b, type: int}
          - name: c
            type: int
            dynamic: {depends_on: [a, b], compute: calc_c}
"""

import os
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from dynastruct.contracts.enums import PropagationMode
from dynastruct.contracts.schema import FieldSpec, NamingConfig, StructSpec


class NamingSettings(BaseModel):
    """Prefix/suffix overrides for generated function names.

    Unset options fall back to the next layer (struct -> document -> built-in
    defaults). An empty string is a real override, not "unset".
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    updated_prefix: str | None = Field(default=None, description="Prefix of updated functions (default 'updated_')")
    updated_suffix: str | None = Field(default=None, description="Suffix of updated functions (default '')")
    setter_prefix: str | None = Field(default=None, description="Prefix of setters for static fields (default 'update_')")
    setter_suffix: str | None = Field(default=None, description="Suffix of setters for static fields (default '')")
    update_prefix: str | None = Field(default=None, description="Prefix of update functions for dynamic fields (default 'update_')")
    update_suffix: str | None = Field(default=None, description="Suffix of update functions for dynamic fields (default '')")

    def to_naming_config(self) -> NamingConfig:
        return NamingConfig(**self.model_dump())


class DynamicSettings(BaseModel):
    """Marks a field as dynamic: recomputed by ``compute`` when a dependency changes."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    depends_on: list[str] = Field(
        default_factory=list,
        description="Fields this one is computed from, in call order",
    )
    compute: str = Field(description="Method on the record that assigns this field")

    @field_validator("compute")
    @classmethod
    def validate_compute_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("compute method name must not be empty")
        return v


class FieldSettings(BaseModel):
    """One field of a struct."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    name: str = Field(min_length=1, description="Field name")
    type_ref: str | None = Field(default=None, alias="type", description="Type annotation for the setter parameter")
    dynamic: DynamicSettings | None = Field(default=None, description="Present for dynamic fields")

    def to_field_spec(self) -> FieldSpec:
        if self.dynamic is None:
            return FieldSpec.static(self.name, type_ref=self.type_ref)
        return FieldSpec.dynamic(
            self.name,
            self.dynamic.depends_on,
            self.dynamic.compute,
            type_ref=self.type_ref,
        )


class StructSettings(BaseModel):
    """A struct to generate propagation functions for."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1, description="Struct name")
    fields: list[FieldSettings] = Field(description="Fields in declaration order")
    naming: NamingSettings = Field(default_factory=NamingSettings, description="Struct-level naming overrides")

    @field_validator("fields")
    @classmethod
    def validate_unique_field_names(cls, v: list[FieldSettings]) -> list[FieldSettings]:
        """Ensure field names are unique within the struct."""
        names = [f.name for f in v]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate field name(s): {duplicates}")
        return v

    def to_struct_spec(self, document_naming: NamingConfig | None = None) -> StructSpec:
        """Convert to the schema model, layering struct naming over document naming."""
        naming = self.naming.to_naming_config()
        if document_naming is not None:
            naming = naming.merged_over(document_naming)
        return StructSpec(
            name=self.name,
            fields=tuple(f.to_field_spec() for f in self.fields),
            naming=naming,
        )


class GeneratorSettings(BaseModel):
    """Options that change how functions are generated, not what fields exist."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    propagation: PropagationMode = Field(
        default=PropagationMode.NESTED,
        description="nested: direct calls, diamonds recompute per path; topological: each downstream field once",
    )
    detect_name_collisions: bool = Field(
        default=True,
        description="Fail generation when generated names collide with each other or with declared names",
    )


class SchemaDocument(BaseModel):
    """Top-level schema document: structs plus document-wide naming and generator options."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    structs: list[StructSettings] = Field(description="Structs to generate, in output order")
    naming: NamingSettings = Field(default_factory=NamingSettings, description="Document-level naming overrides")
    generator: GeneratorSettings = Field(default_factory=GeneratorSettings, description="Generator options")

    @field_validator("structs")
    @classmethod
    def validate_structs_not_empty(cls, v: list[StructSettings]) -> list[StructSettings]:
        """At least one struct is required."""
        if not v:
            raise ValueError("At least one struct is required")
        return v

    @model_validator(mode="after")
    def validate_unique_struct_names(self) -> "SchemaDocument":
        """Ensure struct names are unique."""
        names = [s.name for s in self.structs]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate struct name(s): {duplicates}")
        return self

    def get_struct(self, name: str) -> StructSettings:
        """Look up a struct by name.

        Raises:
            KeyError: If no struct has that name
        """
        for struct in self.structs:
            if struct.name == name:
                return struct
        raise KeyError(f"Struct '{name}' not found. Available structs: {[s.name for s in self.structs]}")

    def struct_specs(self) -> list[StructSpec]:
        """All structs as schema models, in document order."""
        document_naming = self.naming.to_naming_config()
        return [struct.to_struct_spec(document_naming) for struct in self.structs]


# ${VAR} or ${VAR:-default}; an unset variable without a default is left as written
_ENV_REFERENCE = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")

# Dynaconf's own settings, present in as_dict() but not part of a document
_DYNACONF_KEYS = frozenset({"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"})


def _env_value(match: re.Match[str]) -> str:
    name, default = match.group(1), match.group(2)
    return os.environ.get(name, match.group(0) if default is None else default)


def _expand_env_references(value: Any) -> Any:
    """Substitute ${VAR} references in every string of a parsed document.

    Naming overrides and type annotations are the usual targets, e.g.
    ``setter_prefix: ${SETTER_PREFIX:-set_}``.
    """
    if isinstance(value, str):
        return _ENV_REFERENCE.sub(_env_value, value)
    if isinstance(value, dict):
        return {key: _expand_env_references(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env_references(item) for item in value]
    return value


def parse_schema_document(data: dict[str, Any]) -> SchemaDocument:
    """Validate an already-parsed schema document.

    ${VAR} references are expanded first. DYNASTRUCT_* overrides are not
    applied here; load_schema() merges those while reading the file.

    Raises:
        ValidationError: If the document does not describe valid structs
    """
    return SchemaDocument.model_validate(_expand_env_references(data))


def load_schema(schema_path: Path) -> SchemaDocument:
    """Read a YAML schema document, apply environment overrides, validate it.

    Any document key can be overridden with a DYNASTRUCT_-prefixed variable,
    ``__`` separating nesting levels, e.g.
    ``DYNASTRUCT_GENERATOR__PROPAGATION=topological``. Overrides win over
    the file; pydantic defaults fill whatever neither sets.

    Raises:
        FileNotFoundError: If ``schema_path`` does not exist
        ValidationError: If the merged document fails validation
    """
    from dynaconf import Dynaconf

    # Dynaconf treats a missing settings file as empty
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_path}")

    merged = Dynaconf(
        envvar_prefix="DYNASTRUCT",
        settings_files=[str(schema_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )
    document = {key.lower(): value for key, value in merged.as_dict().items() if key not in _DYNACONF_KEYS}
    return parse_schema_document(document)
