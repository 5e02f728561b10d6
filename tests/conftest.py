# tests/conftest.py
"""Shared test fixtures and helpers.

Fixtures build StructSpecs directly (no YAML, no dataclasses) so core tests
exercise the generator without any host adapter in the way. Host adapter
and CLI tests build their own inputs.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

from __future__ import annotations

import os

import pytest
from hypothesis import Phase, Verbosity, settings

from dynastruct.contracts import FieldSpec, NamingConfig, StructSpec

# =============================================================================
# Struct fixtures
# =============================================================================


def make_demo_spec(naming: NamingConfig | None = None) -> StructSpec:
    """a, b static; c = f(a, b); d = f(c)."""
    return StructSpec(
        name="Demo",
        fields=(
            FieldSpec.static("a", "int"),
            FieldSpec.static("b", "int"),
            FieldSpec.dynamic("c", ("a", "b"), "calc_c", "int"),
            FieldSpec.dynamic("d", ("c",), "calc_d", "int"),
        ),
        naming=naming or NamingConfig(),
    )


def make_diamond_spec() -> StructSpec:
    """A static; B and C depend on A; D depends on (B, C)."""
    return StructSpec(
        name="Diamond",
        fields=(
            FieldSpec.static("A", "int"),
            FieldSpec.dynamic("B", ("A",), "calc_b", "int"),
            FieldSpec.dynamic("C", ("A",), "calc_c", "int"),
            FieldSpec.dynamic("D", ("B", "C"), "calc_d", "int"),
        ),
    )


@pytest.fixture
def demo_spec() -> StructSpec:
    return make_demo_spec()


@pytest.fixture
def diamond_spec() -> StructSpec:
    return make_diamond_spec()


# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
