"""Tests for unknown-reference and cycle validation."""

from __future__ import annotations

import pytest

from dynastruct.contracts import (
    CyclicDependency,
    DependencyGraphError,
    DiagnosticKind,
    FieldSpec,
    StructSpec,
    UnknownDependency,
)
from dynastruct.core.dag import build_dependency_graph, find_cycle, validate_dependency_graph


def _validate(*fields: FieldSpec) -> None:
    spec = StructSpec(name="S", fields=fields)
    validate_dependency_graph(spec, build_dependency_graph(spec))


class TestUnknownDependencies:
    def test_missing_name_reported(self) -> None:
        with pytest.raises(DependencyGraphError) as exc_info:
            _validate(
                FieldSpec.static("a"),
                FieldSpec.dynamic("c", ("a", "ghost"), "calc_c"),
            )

        assert exc_info.value.kind == DiagnosticKind.UNKNOWN_DEPENDENCY
        assert exc_info.value.diagnostics == (UnknownDependency(field="c", missing="ghost"),)

    def test_all_unknown_references_collected(self) -> None:
        with pytest.raises(DependencyGraphError) as exc_info:
            _validate(
                FieldSpec.dynamic("c", ("x",), "calc_c"),
                FieldSpec.dynamic("d", ("c", "y", "x"), "calc_d"),
            )

        assert exc_info.value.diagnostics == (
            UnknownDependency(field="c", missing="x"),
            UnknownDependency(field="d", missing="y"),
            UnknownDependency(field="d", missing="x"),
        )

    def test_unknown_references_skip_cycle_check(self) -> None:
        """A struct with both problems reports only the unknown reference."""
        with pytest.raises(DependencyGraphError) as exc_info:
            _validate(
                FieldSpec.dynamic("c", ("d",), "calc_c"),
                FieldSpec.dynamic("d", ("c", "ghost"), "calc_d"),
            )

        kinds = {d.kind for d in exc_info.value.diagnostics}
        assert kinds == {DiagnosticKind.UNKNOWN_DEPENDENCY}


class TestCycles:
    def test_self_reference_is_length_one_cycle(self) -> None:
        with pytest.raises(DependencyGraphError) as exc_info:
            _validate(FieldSpec.dynamic("c", ("c",), "calc_c"))

        assert exc_info.value.diagnostic == CyclicDependency(cycle=("c",))

    def test_two_field_cycle(self) -> None:
        with pytest.raises(DependencyGraphError) as exc_info:
            _validate(
                FieldSpec.dynamic("b", ("c",), "calc_b"),
                FieldSpec.dynamic("c", ("b",), "calc_c"),
            )

        assert exc_info.value.diagnostic == CyclicDependency(cycle=("b", "c"))

    def test_cycle_reported_in_traversal_order(self) -> None:
        """Traversal starts from the first declared node and follows adjacency."""
        with pytest.raises(DependencyGraphError) as exc_info:
            _validate(
                FieldSpec.static("a"),
                FieldSpec.dynamic("b", ("a", "d"), "calc_b"),
                FieldSpec.dynamic("c", ("b",), "calc_c"),
                FieldSpec.dynamic("d", ("c",), "calc_d"),
            )

        # a -> b -> c -> d -> b: the cycle starts where the stack is re-entered
        assert exc_info.value.diagnostic == CyclicDependency(cycle=("b", "c", "d"))

    def test_only_first_cycle_reported(self) -> None:
        with pytest.raises(DependencyGraphError) as exc_info:
            _validate(
                FieldSpec.dynamic("p", ("p",), "calc_p"),
                FieldSpec.dynamic("q", ("q",), "calc_q"),
            )

        assert exc_info.value.diagnostics == (CyclicDependency(cycle=("p",)),)

    def test_cycle_report_is_deterministic(self) -> None:
        fields = (
            FieldSpec.dynamic("x", ("z",), "calc_x"),
            FieldSpec.dynamic("y", ("x",), "calc_y"),
            FieldSpec.dynamic("z", ("y",), "calc_z"),
        )
        reports = []
        for _ in range(5):
            with pytest.raises(DependencyGraphError) as exc_info:
                _validate(*fields)
            reports.append(exc_info.value.diagnostic)

        assert len(set(reports)) == 1
        assert reports[0] == CyclicDependency(cycle=("x", "y", "z"))

    def test_diamond_is_not_a_cycle(self, diamond_spec: StructSpec) -> None:
        graph = build_dependency_graph(diamond_spec)

        validate_dependency_graph(diamond_spec, graph)

        assert find_cycle(graph) is None


class TestValidateFreezes:
    def test_graph_frozen_after_success(self, demo_spec: StructSpec) -> None:
        graph = build_dependency_graph(demo_spec)

        validate_dependency_graph(demo_spec, graph)

        assert graph.is_frozen

    def test_graph_not_frozen_after_failure(self) -> None:
        spec = StructSpec(name="S", fields=(FieldSpec.dynamic("c", ("c",), "calc_c"),))
        graph = build_dependency_graph(spec)

        with pytest.raises(DependencyGraphError):
            validate_dependency_graph(spec, graph)

        assert not graph.is_frozen
