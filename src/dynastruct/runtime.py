# src/dynastruct/runtime.py
"""Python host adapters: dataclass front end and class back end.

The generator core consumes a StructSpec and produces FunctionDefs; it has
no idea what a Python class is. This module plays both host roles:

- Front end: struct_spec_from_class() reads dataclass fields, in declaration
  order, into a StructSpec. Fields created with dynamic() are dynamic.
- Back end: attach() renders the generated functions as Python source,
  executes it in an isolated namespace and sets the resulting functions on
  the class as ordinary methods.

Usage:
    from dataclasses import dataclass
    from dynastruct.runtime import dynamic, dynamic_struct

    @dynamic_struct
    @dataclass
    class Demo:
        a: int = 0
        b: int = 0
        c: int = dynamic(("a", "b"), "calc_c", default=0)

        def calc_c(self) -> None:
            self.c = self.a + self.b

    demo = Demo(1, 2)
    demo.update_a(7)    # recomputes c
    assert demo.c == 9

Generated methods mutate the instance in place with no locking. One
propagation chain must have exclusive access to the instance while it runs.
"""

from __future__ import annotations

import ast
import dataclasses
from collections.abc import Callable, Iterable
from typing import Any, TypeVar, overload

from dynastruct.contracts.errors import HostAttachError
from dynastruct.contracts.schema import FieldSpec, NamingConfig, StructSpec
from dynastruct.core.config import GeneratorSettings
from dynastruct.core.generator import GenerationResult, generate
from dynastruct.core.render import propagation_class_name, render_class

__all__ = [
    "DYNAMIC_METADATA_KEY",
    "DynamicMarker",
    "attach",
    "dynamic",
    "dynamic_struct",
    "generation_result",
    "refresh",
    "struct_spec_from_class",
]

DYNAMIC_METADATA_KEY = "dynastruct"

# Attribute set on every attached function so regenerating a subclass may
# replace methods generated for its base
_GENERATED_MARKER = "__dynastruct_generated__"

# Class attribute holding the GenerationResult
_RESULT_ATTR = "__dynastruct__"

_MISSING = object()

T = TypeVar("T", bound=type)


@dataclasses.dataclass(frozen=True, slots=True)
class DynamicMarker:
    """Dataclass field metadata marking a field as dynamic."""

    depends_on: tuple[str, ...]
    compute: str


def dynamic(depends_on: str | Iterable[str], compute: str, **field_kwargs: Any) -> Any:
    """Declare a dynamic dataclass field.

    Args:
        depends_on: Field name(s) this field is computed from, in call order
        compute: Name of the method that assigns this field (called as ``self.compute()``)
        **field_kwargs: Passed through to dataclasses.field(); ``default``
            is None unless a default or default_factory is given

    Returns:
        A dataclasses.Field carrying a DynamicMarker in its metadata
    """
    names = (depends_on,) if isinstance(depends_on, str) else tuple(depends_on)
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[DYNAMIC_METADATA_KEY] = DynamicMarker(depends_on=names, compute=compute)
    if "default" not in field_kwargs and "default_factory" not in field_kwargs:
        field_kwargs["default"] = None
    return dataclasses.field(metadata=metadata, **field_kwargs)


def _type_ref(annotation: Any) -> str | None:
    """Annotation text for a setter parameter, or None to leave it unannotated.

    Class objects are spelled by qualified name and typing aliases by repr.
    The generated source is compiled apart from the defining module, so text
    that does not parse as an expression (``make.<locals>.Point``) is dropped.
    """
    if annotation is dataclasses.MISSING:
        return None
    if isinstance(annotation, str):
        text = annotation
    elif isinstance(annotation, type):
        text = annotation.__qualname__
    else:
        text = repr(annotation)
    if "<locals>" in text:
        return None
    try:
        ast.parse(text, mode="eval")
    except SyntaxError:
        return None
    return text


def struct_spec_from_class(cls: type, naming: NamingConfig | None = None) -> StructSpec:
    """Build a StructSpec from a dataclass.

    Raises:
        HostAttachError: If ``cls`` is not a dataclass, or is frozen (setters
            could not assign)
    """
    if not isinstance(cls, type) or not dataclasses.is_dataclass(cls):
        raise HostAttachError(f"Only dataclasses are currently supported, got {cls!r}")
    if cls.__dataclass_params__.frozen:  # type: ignore[attr-defined]
        raise HostAttachError(f"{cls.__qualname__} is a frozen dataclass; generated setters assign in place")

    specs: list[FieldSpec] = []
    for f in dataclasses.fields(cls):
        marker = f.metadata.get(DYNAMIC_METADATA_KEY)
        if marker is None:
            specs.append(FieldSpec.static(f.name, type_ref=_type_ref(f.type)))
        else:
            specs.append(FieldSpec.dynamic(f.name, marker.depends_on, marker.compute, type_ref=_type_ref(f.type)))
    return StructSpec(name=cls.__name__, fields=tuple(specs), naming=naming or NamingConfig())


def _compile_functions(result: GenerationResult, filename: str) -> dict[str, Callable[..., None]]:
    class_name = propagation_class_name(result.spec.name)
    source = "from __future__ import annotations\n\n\n" + render_class(class_name, result.functions)
    namespace: dict[str, Any] = {}
    try:
        code = compile(source, filename, "exec")
    except SyntaxError as e:
        raise HostAttachError(f"Generated methods for {result.spec.name} do not compile: {e.msg} ({e.text!r})") from e
    exec(code, namespace)
    mixin = namespace[class_name]
    return {fn.name: mixin.__dict__[fn.name] for fn in result.functions}


def attach(cls: T, result: GenerationResult) -> T:
    """Set the generated functions on ``cls`` as methods.

    Raises:
        HostAttachError: If a generated name is already taken on ``cls`` by
            something dynastruct did not generate
    """
    for fn in result.functions:
        existing = getattr(cls, fn.name, _MISSING)
        if existing is not _MISSING and not getattr(existing, _GENERATED_MARKER, False):
            raise HostAttachError(
                f"Cannot attach {fn.family.value} function '{fn.name}' for field '{fn.field}': "
                f"{cls.__qualname__} already defines '{fn.name}'"
            )

    functions = _compile_functions(result, filename=f"<dynastruct {cls.__module__}.{cls.__qualname__}>")
    for name, function in functions.items():
        function.__qualname__ = f"{cls.__qualname__}.{name}"
        function.__module__ = cls.__module__
        setattr(function, _GENERATED_MARKER, True)
        setattr(cls, name, function)

    setattr(cls, _RESULT_ATTR, result)
    return cls


@overload
def dynamic_struct(cls: T, /) -> T: ...


@overload
def dynamic_struct(
    cls: None = None,
    /,
    *,
    naming: NamingConfig | None = None,
    settings: GeneratorSettings | None = None,
) -> Callable[[T], T]: ...


def dynamic_struct(
    cls: T | None = None,
    /,
    *,
    naming: NamingConfig | None = None,
    settings: GeneratorSettings | None = None,
) -> T | Callable[[T], T]:
    """Class decorator: generate and attach propagation methods to a dataclass.

    Apply it above @dataclass. Usable bare or with options:

        @dynamic_struct(naming=NamingConfig(setter_prefix="set_"))
        @dataclass
        class Demo: ...

    Raises:
        HostAttachError: Not a mutable dataclass, or a generated name is taken
        DependencyGraphError: Unknown dependency or dependency cycle
        NameCollisionError: Generated names collide
    """

    def wrap(target: T) -> T:
        spec = struct_spec_from_class(target, naming)
        return attach(target, generate(spec, settings))

    if cls is None:
        return wrap
    return wrap(cls)


def generation_result(obj: Any) -> GenerationResult:
    """Return the GenerationResult attached to a decorated class or its instance.

    Raises:
        HostAttachError: If the class was not decorated with dynamic_struct
    """
    cls = obj if isinstance(obj, type) else type(obj)
    result = getattr(cls, _RESULT_ATTR, None)
    if not isinstance(result, GenerationResult):
        raise HostAttachError(f"{cls.__qualname__} has no generated propagation methods")
    return result


def refresh(instance: Any) -> Any:
    """Run every dynamic field's compute method once, in dependency order.

    For initialising derived values after construction, e.g. from
    ``__post_init__``. Does not go through the generated functions, so each
    compute method runs exactly once regardless of diamonds.

    Returns:
        ``instance``
    """
    result = generation_result(instance)
    for name in result.graph.topological_order():
        field_spec = result.spec.get_field(name)
        if field_spec.compute_method is not None:
            getattr(instance, field_spec.compute_method)()
    return instance
