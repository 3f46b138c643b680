"""Archetype JSON

A Python package for reading and writing archetype scripts stored as JSON.
Converts documents to a typed AST and back, with conditions, method tables
and an embedded expression language.
"""

__version__ = "0.1.0"

from .codec import (
    CodecConfig,
    ExpressionFormatError,
    SchemaViolationError,
    ScriptCodecError,
    TreeShapeError,
    UnresolvedReferenceError,
    deserialize,
    deserialize_node,
    render_outline,
    serialize,
    serialize_pretty,
    serialize_to_string,
)

__all__ = [
    "CodecConfig",
    "ScriptCodecError",
    "TreeShapeError",
    "SchemaViolationError",
    "UnresolvedReferenceError",
    "ExpressionFormatError",
    "deserialize",
    "deserialize_node",
    "serialize",
    "serialize_to_string",
    "serialize_pretty",
    "render_outline",
]
