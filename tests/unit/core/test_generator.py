"""Tests for the generation run and its result."""

from __future__ import annotations

import logging

import pytest

from dynastruct.contracts import (
    DependencyGraphError,
    DiagnosticKind,
    FieldSpec,
    FunctionFamily,
    NameCollisionError,
    NamingConfig,
    PropagationMode,
    StructSpec,
)
from dynastruct.core.config import GeneratorSettings, parse_schema_document
from dynastruct.core.generator import generate, generate_document


def _document(*struct_names: str) -> dict[str, object]:
    return {
        "structs": [
            {
                "name": name,
                "fields": [
                    {"name": "x", "type": "int"},
                    {"name": "y", "type": "int", "dynamic": {"depends_on": ["x"], "compute": "calc_y"}},
                ],
            }
            for name in struct_names
        ]
    }


class TestGenerate:
    def test_result_contents(self, demo_spec: StructSpec) -> None:
        result = generate(demo_spec)

        assert len(result) == 8
        assert result.mode == PropagationMode.NESTED
        assert result.graph.is_frozen
        assert result.names[:2] == ("updated_a", "update_a")

    def test_lookups(self, demo_spec: StructSpec) -> None:
        result = generate(demo_spec)

        assert result.function("update_c").family == FunctionFamily.UPDATE
        assert result.for_field("a", FunctionFamily.UPDATED).name == "updated_a"
        assert result.entry_point("a").name == "update_a"
        assert result.entry_point("c").family == FunctionFamily.UPDATE

    def test_missing_lookups_raise_key_error(self, demo_spec: StructSpec) -> None:
        result = generate(demo_spec)

        with pytest.raises(KeyError):
            result.function("nope")
        with pytest.raises(KeyError):
            result.for_field("a", FunctionFamily.UPDATE)

    def test_fingerprint_stable_across_runs(self, demo_spec: StructSpec) -> None:
        assert generate(demo_spec).fingerprint == generate(demo_spec).fingerprint

    def test_fingerprint_changes_with_mode(self, diamond_spec: StructSpec) -> None:
        nested = generate(diamond_spec)
        topo = generate(diamond_spec, GeneratorSettings(propagation=PropagationMode.TOPOLOGICAL))

        assert nested.fingerprint != topo.fingerprint

    def test_unknown_dependency_fails(self) -> None:
        spec = StructSpec(name="S", fields=(FieldSpec.dynamic("c", ("ghost",), "calc_c"),))

        with pytest.raises(DependencyGraphError) as exc_info:
            generate(spec)

        assert exc_info.value.kind == DiagnosticKind.UNKNOWN_DEPENDENCY

    def test_cycle_fails(self) -> None:
        spec = StructSpec(
            name="S",
            fields=(
                FieldSpec.dynamic("b", ("c",), "calc_b"),
                FieldSpec.dynamic("c", ("b",), "calc_c"),
            ),
        )

        with pytest.raises(DependencyGraphError) as exc_info:
            generate(spec)

        assert exc_info.value.kind == DiagnosticKind.CYCLIC_DEPENDENCY

    def test_name_collision_fails_by_default(self, demo_spec: StructSpec) -> None:
        spec = StructSpec(name="Demo", fields=demo_spec.fields, naming=NamingConfig(setter_prefix=""))

        with pytest.raises(NameCollisionError) as exc_info:
            generate(spec)

        assert exc_info.value.struct_name == "Demo"
        assert exc_info.value.diagnostic.resolved_name == "a"  # type: ignore[union-attr]

    def test_name_collision_check_can_be_disabled(self, demo_spec: StructSpec) -> None:
        spec = StructSpec(name="Demo", fields=demo_spec.fields, naming=NamingConfig(setter_prefix=""))

        result = generate(spec, GeneratorSettings(detect_name_collisions=False))

        assert result.entry_point("a").name == "a"

    def test_logs_at_debug(self, demo_spec: StructSpec, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="dynastruct.core.generator"):
            generate(demo_spec)

        [record] = [r for r in caplog.records if r.getMessage() == "functions_emitted"]
        assert record.struct == "Demo"  # type: ignore[attr-defined]
        assert record.functions == 8  # type: ignore[attr-defined]
        assert record.mode == "nested"  # type: ignore[attr-defined]


class TestGenerateDocument:
    def test_all_structs_in_document_order(self) -> None:
        document = parse_schema_document(_document("B", "A"))

        results = generate_document(document)

        assert [r.spec.name for r in results] == ["B", "A"]

    def test_only_selected_structs(self) -> None:
        document = parse_schema_document(_document("A", "B", "C"))

        results = generate_document(document, only=["C", "A"])

        # Document order, not selection order
        assert [r.spec.name for r in results] == ["A", "C"]

    def test_unknown_struct_selection(self) -> None:
        document = parse_schema_document(_document("A"))

        with pytest.raises(KeyError, match=r"Struct\(s\) not found: \['Z'\]"):
            generate_document(document, only=["Z"])

    def test_document_generator_settings_apply(self) -> None:
        data = _document("A")
        data["generator"] = {"propagation": "topological"}

        [result] = generate_document(parse_schema_document(data))

        assert result.mode == PropagationMode.TOPOLOGICAL
        assert result.function("updated_x").calls == ("calc_y",)

    def test_first_failure_aborts(self) -> None:
        data = {
            "structs": [
                {"name": "Good", "fields": [{"name": "x"}]},
                {"name": "Bad", "fields": [{"name": "y", "dynamic": {"depends_on": ["y"], "compute": "calc_y"}}]},
            ]
        }

        with pytest.raises(DependencyGraphError, match="Bad: Cyclic dependency: y -> y"):
            generate_document(parse_schema_document(data))
