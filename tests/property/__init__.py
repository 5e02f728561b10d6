# tests/property/__init__.py
"""Property-based tests for dynastruct.

Property-based testing validates invariants that must hold for ALL inputs,
not just the specific examples we think of. Generated structs exercise
dependency shapes (deep chains, wide fan-out, diamonds, cycles) that
hand-written fixtures miss.
"""
