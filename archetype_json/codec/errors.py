"""
Exceptions raised by the script codec.

Syntax errors from the JSON token source (``ijson.JSONError`` and
``ijson.IncompleteJSONError``) are not wrapped and propagate unchanged.
"""

from __future__ import annotations

from .location import Location


class ScriptCodecError(Exception):
    """Base class for all codec failures.

    Also raised directly when an unexpected error occurs while processing
    an element; the original exception is chained as ``__cause__``.
    """

    def __init__(self, message: str, location: Location | None = None):
        self.location = location
        if location is not None:
            message = f"{message} {{ location={location} }}"
        super().__init__(message)


class TreeShapeError(ScriptCodecError):
    """Raised when the JSON events do not describe a well-formed node tree.

    This covers misplaced arrays or objects, attributes that arrive after a
    node's children, stack underflow and unterminated nodes.
    """


class SchemaViolationError(ScriptCodecError):
    """Raised when an element is not legal where it appears.

    Attributes:
        kind: The offending element kind (``None`` when the kind is missing)
    """

    def __init__(self, message: str, kind: str | None = None, location: Location | None = None):
        self.kind = kind
        super().__init__(message, location)


class UnresolvedReferenceError(SchemaViolationError):
    """Raised when an ``if`` attribute names an expression id that was never declared."""

    def __init__(self, expression_id: str, kind: str | None = None, location: Location | None = None):
        self.expression_id = expression_id
        super().__init__(f"Unresolved expression: '{expression_id}'", kind, location)


class ExpressionFormatError(ScriptCodecError):
    """Raised when expression text cannot be parsed."""
