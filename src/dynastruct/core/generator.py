# src/dynastruct/core/generator.py
"""Generation run: build -> validate -> resolve names -> emit.

generate() is a pure function of its inputs. It either returns the complete
function set for a struct or raises; there is no partial output and nothing
is retried, since running again on the same input gives the same failure.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from dynastruct.contracts.emitted import FunctionDef
from dynastruct.contracts.enums import FunctionFamily, PropagationMode
from dynastruct.contracts.errors import NameCollisionError
from dynastruct.contracts.schema import StructSpec
from dynastruct.core.canonical import compute_output_hash
from dynastruct.core.config import GeneratorSettings, SchemaDocument
from dynastruct.core.dag import DependencyGraph, build_dependency_graph, validate_dependency_graph
from dynastruct.core.emitter import emit_functions
from dynastruct.core.logging import get_logger
from dynastruct.core.naming import ResolvedNaming, find_name_collisions, resolve_naming

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """Everything one generation run produced for a struct."""

    spec: StructSpec
    graph: DependencyGraph
    naming: ResolvedNaming
    mode: PropagationMode
    functions: tuple[FunctionDef, ...]

    def __iter__(self) -> Iterator[FunctionDef]:
        return iter(self.functions)

    def __len__(self) -> int:
        return len(self.functions)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(fn.name for fn in self.functions)

    @property
    def fingerprint(self) -> str:
        """SHA-256 of the canonical form of the emitted functions."""
        return compute_output_hash(self.spec.name, self.functions)

    def function(self, name: str) -> FunctionDef:
        """Look up an emitted function by name.

        Raises:
            KeyError: If no function has that name
        """
        for fn in self.functions:
            if fn.name == name:
                return fn
        raise KeyError(f"No generated function '{name}' for struct '{self.spec.name}'")

    def for_field(self, field: str, family: FunctionFamily) -> FunctionDef:
        """Look up the function of ``family`` generated for ``field``."""
        for fn in self.functions:
            if fn.field == field and fn.family == family:
                return fn
        raise KeyError(f"No {family.value} function for field '{field}' of struct '{self.spec.name}'")

    def entry_point(self, field: str) -> FunctionDef:
        """The setter (static field) or update function (dynamic field) for ``field``."""
        family = FunctionFamily.UPDATE if self.spec.get_field(field).is_dynamic else FunctionFamily.SETTER
        return self.for_field(field, family)


def generate(spec: StructSpec, settings: GeneratorSettings | None = None) -> GenerationResult:
    """Generate the propagation functions for one struct.

    Args:
        spec: Parsed struct description
        settings: Generator options (defaults: nested propagation, collision detection on)

    Returns:
        GenerationResult with functions in declaration order

    Raises:
        DependencyGraphError: Unknown dependency references, or a dependency cycle
        NameCollisionError: Resolved names collide (only with detect_name_collisions)
    """
    settings = settings or GeneratorSettings()

    graph = build_dependency_graph(spec)
    validate_dependency_graph(spec, graph)

    naming = resolve_naming(spec.naming)
    if settings.detect_name_collisions:
        collisions = find_name_collisions(spec, naming)
        if collisions:
            logger.debug(
                "name_collisions_detected",
                struct=spec.name,
                names=sorted({c.resolved_name for c in collisions}),
            )
            raise NameCollisionError(spec.name, collisions)

    functions = emit_functions(spec, graph, naming, mode=settings.propagation)
    result = GenerationResult(
        spec=spec,
        graph=graph,
        naming=naming,
        mode=settings.propagation,
        functions=functions,
    )
    # fingerprint hashes every emitted function
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "functions_emitted",
            struct=spec.name,
            functions=len(functions),
            mode=settings.propagation.value,
            fingerprint=result.fingerprint,
        )
    return result


def generate_document(document: SchemaDocument, only: Sequence[str] | None = None) -> list[GenerationResult]:
    """Generate every struct in ``document`` (or just those named in ``only``).

    Structs are processed in document order. The first failing struct
    aborts the run.

    Raises:
        KeyError: If ``only`` names a struct the document lacks
    """
    specs = document.struct_specs()
    if only:
        wanted = set(only)
        missing = [name for name in only if name not in {s.name for s in specs}]
        if missing:
            raise KeyError(f"Struct(s) not found: {missing}. Available structs: {[s.name for s in specs]}")
        specs = [s for s in specs if s.name in wanted]
    return [generate(spec, document.generator) for spec in specs]
