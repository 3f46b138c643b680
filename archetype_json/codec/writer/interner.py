"""
Expression interning for the writer.
"""

from __future__ import annotations

from ..script_ast.expression import Expression, Token


class ExpressionInterner:
    """Assigns one id per distinct token sequence.

    An expression read from a document keeps its declared id when that id
    is still free; other expressions get ``<prefix><n>`` ids.
    """

    def __init__(self, prefix: str = "e"):
        self.prefix = prefix
        self._ids: dict[tuple[Token, ...], str] = {}
        self._entries: dict[str, Expression] = {}
        self._counter = 0

    def intern(self, expression: Expression) -> str:
        """Get the id of an expression, assigning one on first use."""
        expr_id = self._ids.get(expression.tokens)
        if expr_id is not None:
            return expr_id
        expr_id = expression.source_id
        if not expr_id or expr_id in self._entries:
            expr_id = self._next_id()
        self._ids[expression.tokens] = expr_id
        self._entries[expr_id] = expression
        return expr_id

    def entries(self) -> dict[str, Expression]:
        """Interned expressions by id, in first-seen order."""
        return dict(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def _next_id(self) -> str:
        while True:
            self._counter += 1
            candidate = f"{self.prefix}{self._counter}"
            if candidate not in self._entries:
                return candidate
