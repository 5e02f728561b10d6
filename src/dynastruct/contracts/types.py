"""Semantic type aliases for compile-time type safety.

NewType creates distinct types that mypy treats as incompatible,
preventing accidental misuse of semantically different string values.
"""

from typing import NewType

FieldName = NewType("FieldName", str)
"""Name of a declared record field (e.g., 'total')"""

FunctionName = NewType("FunctionName", str)
"""Resolved name of a generated function (e.g., 'updated_total')"""
