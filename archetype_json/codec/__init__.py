"""
Script codec.

Bidirectional conversion between JSON script documents and the typed AST:

- tree: JSON token stream to nested element events
- script_ast: values, expressions and node definitions
- reader: element events to AST
- writer: AST to JSON tree, with expression interning
- outline: text outlines of an AST
"""

from __future__ import annotations

from .config import CodecConfig
from .errors import (
    ExpressionFormatError,
    SchemaViolationError,
    ScriptCodecError,
    TreeShapeError,
    UnresolvedReferenceError,
)
from .location import Location
from .outline import render_outline
from .reader import ScriptReader, deserialize, deserialize_node
from .writer import ScriptWriter, serialize, serialize_pretty, serialize_to_string

__all__ = [
    "CodecConfig",
    "Location",
    "ScriptCodecError",
    "TreeShapeError",
    "SchemaViolationError",
    "UnresolvedReferenceError",
    "ExpressionFormatError",
    "ScriptReader",
    "ScriptWriter",
    "deserialize",
    "deserialize_node",
    "serialize",
    "serialize_to_string",
    "serialize_pretty",
    "render_outline",
]
