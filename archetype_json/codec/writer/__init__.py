"""
Writer module.

Contains the AST writer and the expression interner.
"""

from __future__ import annotations

from .interner import ExpressionInterner
from .writer import ScriptWriter, serialize, serialize_pretty, serialize_to_string

__all__ = [
    "ScriptWriter",
    "ExpressionInterner",
    "serialize",
    "serialize_to_string",
    "serialize_pretty",
]
