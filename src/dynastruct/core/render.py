# src/dynastruct/core/render.py
"""Rendering of emitted functions as Python source.

Three granularities, each built on the previous:

- render_methods(): method definitions ready to splice into a class body
- render_class(): a mixin class holding the methods for one struct
- render_module(): a module with one mixin class per generated struct

Rendering is deterministic: no timestamps, no unordered containers, and the
output always ends with exactly one newline.

Usage:
    from dynastruct.core.generator import generate
    from dynastruct.core.render import render_module

    source = render_module([generate(spec)])
    # class DemoPropagation:
    #     def updated_a(self) -> None:
    #         self.update_c()
    #     ...
"""

from __future__ import annotations

import keyword
import textwrap
from collections.abc import Sequence
from typing import TYPE_CHECKING

import jinja2

from dynastruct import __version__
from dynastruct.contracts.emitted import AssignField, CallMethod, FunctionDef, Statement
from dynastruct.contracts.errors import RenderError

if TYPE_CHECKING:
    from dynastruct.core.generator import GenerationResult

__all__ = [
    "propagation_class_name",
    "render_class",
    "render_function",
    "render_methods",
    "render_module",
]

_METHOD_TEMPLATE = """\
def {{ name }}({{ parameters }}) -> None:
{% for line in body %}
    {{ line }}
{% endfor %}"""

_CLASS_TEMPLATE = '''\
class {{ class_name }}:
    """{{ docstring }}"""
{% for method in methods %}

{{ method | indent(4, first=True) }}
{%- endfor %}'''

_MODULE_TEMPLATE = '''\
"""Propagation methods generated by dynastruct {{ version }}. Do not edit."""

from __future__ import annotations
{% for cls in classes %}


{{ cls }}
{%- endfor %}'''


def _create_jinja_env() -> jinja2.Environment:
    return jinja2.Environment(
        autoescape=False,  # We're generating Python, not HTML
        undefined=jinja2.StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


_ENV = _create_jinja_env()
_METHOD = _ENV.from_string(_METHOD_TEMPLATE)
_CLASS = _ENV.from_string(_CLASS_TEMPLATE)
_MODULE = _ENV.from_string(_MODULE_TEMPLATE)


def _check_identifier(name: str, what: str) -> str:
    if not name.isidentifier() or keyword.iskeyword(name):
        raise RenderError(f"{what} {name!r} is not a valid Python identifier")
    return name


def _render_statement(stmt: Statement) -> str:
    if isinstance(stmt, AssignField):
        field = _check_identifier(stmt.field, "Field name")
        value = _check_identifier(stmt.value, "Parameter name")
        return f"self.{field} = {value}"
    if isinstance(stmt, CallMethod):
        return f"self.{_check_identifier(stmt.method, 'Method name')}()"
    raise TypeError(f"Unknown statement type: {type(stmt).__name__}")


def render_function(fn: FunctionDef) -> str:
    """Render one function as an unindented method definition.

    Raises:
        RenderError: If any name in the function is not a valid identifier
    """
    parameters = ["self"]
    for param in fn.parameters:
        name = _check_identifier(param.name, "Parameter name")
        parameters.append(f"{name}: {param.type_ref}" if param.type_ref else name)

    body = ["pass"] if fn.is_empty else [_render_statement(stmt) for stmt in fn.body]
    return _METHOD.render(
        name=_check_identifier(fn.name, "Function name"),
        parameters=", ".join(parameters),
        body=body,
    )


def render_methods(functions: Sequence[FunctionDef], indent: int = 4) -> str:
    """Render functions as methods separated by blank lines, indented for a class body."""
    rendered = "\n".join(render_function(fn) for fn in functions)
    return textwrap.indent(rendered, " " * indent)


def render_class(class_name: str, functions: Sequence[FunctionDef], docstring: str | None = None) -> str:
    """Render a mixin class holding ``functions`` as methods."""
    return _CLASS.render(
        class_name=_check_identifier(class_name, "Class name"),
        docstring=docstring or f"Propagation methods for {class_name}.",
        methods=[render_function(fn) for fn in functions],
    )


def propagation_class_name(struct_name: str) -> str:
    """Name of the mixin class rendered for a struct."""
    return f"{struct_name}Propagation"


def render_module(results: Sequence[GenerationResult]) -> str:
    """Render a module with one mixin class per generation result, in order."""
    classes = [
        render_class(
            propagation_class_name(result.spec.name),
            result.functions,
            docstring=f"Propagation methods for {result.spec.name} ({result.mode.value} mode).",
        )
        for result in results
    ]
    return _MODULE.render(version=__version__, classes=classes).rstrip("\n") + "\n"
