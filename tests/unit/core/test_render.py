"""Tests for rendering emitted functions as Python source."""

from __future__ import annotations

from typing import Any

import pytest

from dynastruct import __version__
from dynastruct.contracts import (
    AssignField,
    CallMethod,
    FunctionDef,
    FunctionFamily,
    NamingConfig,
    Parameter,
    RenderError,
    StructSpec,
)
from dynastruct.core.generator import generate
from dynastruct.core.render import (
    propagation_class_name,
    render_class,
    render_function,
    render_methods,
    render_module,
)


def _setter() -> FunctionDef:
    return FunctionDef(
        name="update_a",
        family=FunctionFamily.SETTER,
        field="a",
        parameters=(Parameter("value", "int"),),
        body=(AssignField("a", "value"), CallMethod("updated_a")),
    )


def _empty_updated() -> FunctionDef:
    return FunctionDef(name="updated_d", family=FunctionFamily.UPDATED, field="d")


class TestRenderFunction:
    def test_setter(self) -> None:
        assert render_function(_setter()) == (
            "def update_a(self, value: int) -> None:\n    self.a = value\n    self.updated_a()\n"
        )

    def test_untyped_parameter(self) -> None:
        fn = FunctionDef(
            name="set_x",
            family=FunctionFamily.SETTER,
            field="x",
            parameters=(Parameter("value"),),
            body=(AssignField("x", "value"),),
        )

        assert render_function(fn).startswith("def set_x(self, value) -> None:\n")

    def test_empty_body_renders_pass(self) -> None:
        assert render_function(_empty_updated()) == "def updated_d(self) -> None:\n    pass\n"

    @pytest.mark.parametrize("bad_name", ["set-a", "1st", "class", ""])
    def test_invalid_function_name_rejected(self, bad_name: str) -> None:
        fn = FunctionDef(name=bad_name, family=FunctionFamily.UPDATED, field="a")

        with pytest.raises(RenderError, match="not a valid Python identifier"):
            render_function(fn)

    def test_invalid_called_method_rejected(self) -> None:
        fn = FunctionDef(
            name="updated_a",
            family=FunctionFamily.UPDATED,
            field="a",
            body=(CallMethod("re-c"),),
        )

        with pytest.raises(RenderError, match="'re-c'"):
            render_function(fn)


class TestRenderMethods:
    def test_indented_and_separated(self) -> None:
        source = render_methods([_setter(), _empty_updated()])

        assert source == (
            "    def update_a(self, value: int) -> None:\n"
            "        self.a = value\n"
            "        self.updated_a()\n"
            "\n"
            "    def updated_d(self) -> None:\n"
            "        pass\n"
        )

    def test_custom_indent(self) -> None:
        assert render_methods([_empty_updated()], indent=0) == render_function(_empty_updated())


class TestRenderClass:
    def test_class_layout(self) -> None:
        source = render_class("DemoPropagation", [_setter(), _empty_updated()], docstring="Mixin.")

        assert source == (
            "class DemoPropagation:\n"
            '    """Mixin."""\n'
            "\n"
            "    def update_a(self, value: int) -> None:\n"
            "        self.a = value\n"
            "        self.updated_a()\n"
            "\n"
            "    def updated_d(self) -> None:\n"
            "        pass\n"
        )

    def test_default_docstring(self) -> None:
        assert '"""Propagation methods for X."""' in render_class("X", [])

    def test_invalid_class_name_rejected(self) -> None:
        with pytest.raises(RenderError):
            render_class("Not A Class", [])


class TestRenderModule:
    def test_module_compiles_and_defines_mixins(self, demo_spec: StructSpec, diamond_spec: StructSpec) -> None:
        source = render_module([generate(demo_spec), generate(diamond_spec)])
        namespace: dict[str, Any] = {}

        exec(compile(source, "<generated>", "exec"), namespace)

        assert set(namespace) >= {"DemoPropagation", "DiamondPropagation"}
        assert "update_c" in vars(namespace["DemoPropagation"])

    def test_header_and_trailing_newline(self, demo_spec: StructSpec) -> None:
        source = render_module([generate(demo_spec)])

        assert source.startswith(f'"""Propagation methods generated by dynastruct {__version__}. Do not edit."""\n')
        assert "from __future__ import annotations\n" in source
        assert source.endswith("\n")
        assert not source.endswith("\n\n")

    def test_classes_separated_by_two_blank_lines(self, demo_spec: StructSpec, diamond_spec: StructSpec) -> None:
        source = render_module([generate(demo_spec), generate(diamond_spec)])

        assert "\n\n\nclass DiamondPropagation:\n" in source
        assert "\n\n\n\nclass" not in source

    def test_mode_in_class_docstring(self, demo_spec: StructSpec) -> None:
        assert "Propagation methods for Demo (nested mode)." in render_module([generate(demo_spec)])

    def test_deterministic(self, demo_spec: StructSpec) -> None:
        assert render_module([generate(demo_spec)]) == render_module([generate(demo_spec)])

    def test_bad_naming_override_fails_at_render(self, demo_spec: StructSpec) -> None:
        spec = StructSpec(name=demo_spec.name, fields=demo_spec.fields, naming=NamingConfig(setter_prefix="set-"))

        result = generate(spec)

        with pytest.raises(RenderError, match="'set-a'"):
            render_module([result])


def test_propagation_class_name() -> None:
    assert propagation_class_name("Demo") == "DemoPropagation"
