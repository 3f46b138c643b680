"""
Expression language.

An expression is an immutable sequence of tokens. Expressions parsed from
text are held in postfix order, the form they are stored in documents.
Token lists read from documents are trusted as-is; ``check_tokens`` only
reports suspicious shapes.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..errors import ExpressionFormatError
from .values import Value, read_value, write_value


class Operator(Enum):
    """Expression operator, valued by its symbol."""

    EQUAL = "=="
    NOT_EQUAL = "!="
    AND = "&&"
    OR = "||"
    NOT = "!"
    CONTAINS = "contains"
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def precedence(self) -> int:
        return _PRECEDENCE[self]

    @property
    def is_paren(self) -> bool:
        return self in (Operator.OPEN_PAREN, Operator.CLOSE_PAREN)

    @staticmethod
    def from_name(name: str) -> Operator:
        """Look up an operator by symbol or by enum name.

        Raises:
            ValueError: If the name is not a known operator
        """
        for op in Operator:
            if name in (op.value, op.name):
                return op
        raise ValueError(f"Unsupported operator: {name!r}")


_PRECEDENCE = {
    Operator.OR: 3,
    Operator.AND: 4,
    Operator.EQUAL: 8,
    Operator.NOT_EQUAL: 8,
    Operator.CONTAINS: 9,
    Operator.NOT: 13,
    Operator.OPEN_PAREN: 0,
    Operator.CLOSE_PAREN: 0,
}


@dataclass(frozen=True)
class Literal:
    """Literal operand."""

    value: Value


@dataclass(frozen=True)
class OperatorToken:
    """Operator token."""

    operator: Operator


@dataclass(frozen=True)
class Variable:
    """Variable reference, written ``${name}`` in expression text."""

    name: str


Token = Literal | OperatorToken | Variable

TOKEN_KINDS = ("literal", "operator", "variable")


@dataclass(frozen=True)
class Expression:
    """An immutable token sequence.

    ``source_id`` remembers the id an expression was declared under in a
    document; it does not take part in equality.
    """

    tokens: tuple[Token, ...] = ()
    source_id: str | None = field(default=None, compare=False)

    @staticmethod
    def parse(text: str) -> Expression:
        """Parse expression text into postfix tokens.

        Raises:
            ExpressionFormatError: If the text is not a valid expression
        """
        return Expression(tuple(_ExpressionParser(text).parse()))

    def to_text(self) -> str:
        """Render the expression as infix text."""
        if any(isinstance(t, OperatorToken) and t.operator.is_paren for t in self.tokens):
            return " ".join(_token_text(t) for t in self.tokens)
        stack: list[tuple[str, int]] = []
        try:
            for token in self.tokens:
                match token:
                    case OperatorToken(operator=Operator.NOT):
                        text, prec = stack.pop()
                        stack.append(("!" + _wrap(text, prec < Operator.NOT.precedence), Operator.NOT.precedence))
                    case OperatorToken(operator=op):
                        right, right_prec = stack.pop()
                        left, left_prec = stack.pop()
                        left = _wrap(left, left_prec < op.precedence)
                        right = _wrap(right, right_prec <= op.precedence)
                        stack.append((f"{left} {op.symbol} {right}", op.precedence))
                    case _:
                        stack.append((_token_text(token), 100))
        except IndexError:
            stack = []
        if len(stack) != 1:
            return " ".join(_token_text(t) for t in self.tokens)
        return stack[0][0]

    def __str__(self) -> str:
        return self.to_text()


def parse_tokens(tokens: Iterable[Token]) -> Expression:
    """Build an expression from a token list."""
    return Expression(tuple(tokens))


def serialize_tokens(expression: Expression) -> list[Token]:
    """Flatten an expression back into its token list."""
    return list(expression.tokens)


def check_tokens(tokens: Iterable[Token]) -> list[str]:
    """Report structural problems in a token list.

    Token lists with parenthesis tokens are checked as infix, others as postfix.

    Returns:
        A list of problem descriptions, empty when the tokens look sound
    """
    tokens = list(tokens)
    if not tokens:
        return ["empty expression"]
    if any(isinstance(t, OperatorToken) and t.operator.is_paren for t in tokens):
        return _check_infix(tokens)
    return _check_postfix(tokens)


def _check_postfix(tokens: list[Token]) -> list[str]:
    problems = []
    depth = 0
    for i, token in enumerate(tokens):
        if not isinstance(token, OperatorToken):
            depth += 1
            continue
        needed = 1 if token.operator == Operator.NOT else 2
        if depth < needed:
            problems.append(f"missing operand for '{token.operator.symbol}' at token {i}")
            depth = needed
        depth -= needed - 1
    if depth != 1:
        problems.append(f"expression leaves {depth} operands")
    return problems


def _check_infix(tokens: list[Token]) -> list[str]:
    problems = []
    depth = 0
    expect_operand = True
    for i, token in enumerate(tokens):
        op = token.operator if isinstance(token, OperatorToken) else None
        if op == Operator.OPEN_PAREN:
            if not expect_operand:
                problems.append(f"unexpected '(' at token {i}")
            depth += 1
        elif op == Operator.CLOSE_PAREN:
            if expect_operand:
                problems.append(f"missing operand before ')' at token {i}")
            depth -= 1
            if depth < 0:
                problems.append(f"unmatched ')' at token {i}")
                depth = 0
        elif op == Operator.NOT:
            if not expect_operand:
                problems.append(f"unexpected '!' at token {i}")
        elif op is not None:
            if expect_operand:
                problems.append(f"missing operand before '{op.symbol}' at token {i}")
            expect_operand = True
        else:
            if not expect_operand:
                problems.append(f"missing operator before token {i}")
            expect_operand = False
    if depth:
        problems.append("unmatched '('")
    if expect_operand:
        problems.append("expression ends with an operator")
    return problems


def token_from_json(kind: str | None, attributes: dict[str, Any]) -> Token:
    """Create a token from a token element.

    Raises:
        ValueError: If the kind, the attributes or the operator name are not supported
    """
    unknown = set(attributes) - {"value"}
    if unknown:
        raise ValueError(f"Unsupported token attributes: {sorted(unknown)}")
    value = attributes.get("value")
    if kind == "literal":
        return Literal(read_value(value))
    if kind in ("operator", "variable"):
        if not isinstance(value, str):
            raise ValueError(f"Token '{kind}' requires a string value")
        return OperatorToken(Operator.from_name(value)) if kind == "operator" else Variable(value)
    raise ValueError(f"Unsupported token kind: {kind!r}")


def token_to_json(token: Token, name_key: str = "kind") -> dict[str, Any]:
    """Convert a token to its JSON object form."""
    match token:
        case Literal(value=value):
            return {name_key: "literal", "value": write_value(value)}
        case OperatorToken(operator=op):
            return {name_key: "operator", "value": op.symbol}
        case Variable(name=name):
            return {name_key: "variable", "value": name}
    raise TypeError(f"Not a token: {token!r}")


def _wrap(text: str, needed: bool) -> str:
    return f"({text})" if needed else text


def _quote(text: str) -> str:
    return f'"{text}"' if "'" in text else f"'{text}'"


def _token_text(token: Token) -> str:
    match token:
        case OperatorToken(operator=op):
            return op.symbol
        case Variable(name=name):
            return "${" + name + "}"
        case Literal(value=None):
            return "null"
        case Literal(value=bool(value)):
            return "true" if value else "false"
        case Literal(value=str(value)):
            return _quote(value)
        case Literal(value=value):
            return "[" + ", ".join(_quote(item) for item in value) + "]"
    raise TypeError(f"Not a token: {token!r}")


class _SymbolType(Enum):
    SKIP = re.compile(r"\s+")
    ARRAY = re.compile(r"\[[^\]\[]*\]")
    BOOLEAN = re.compile(r"(true|false)")
    STRING = re.compile(r"['\"][^'\"]*['\"]")
    VARIABLE = re.compile(r"\$\{(~?[\w.-]+)\}")
    EQUALITY_OPERATOR = re.compile(r"(!=|==)")
    BINARY_OPERATOR = re.compile(r"(\|\||&&)")
    UNARY_OPERATOR = re.compile(r"!")
    CONTAINS_OPERATOR = re.compile(r"contains")
    PARENTHESIS = re.compile(r"[()]")


_OPERATOR_SYMBOLS = (
    _SymbolType.EQUALITY_OPERATOR,
    _SymbolType.BINARY_OPERATOR,
    _SymbolType.UNARY_OPERATOR,
    _SymbolType.CONTAINS_OPERATOR,
)

_ARRAY_ELEMENT = re.compile(r"'([^']*)'")


class _ExpressionParser:
    """Shunting-yard conversion of infix text to postfix tokens."""

    def __init__(self, text: str):
        self.text = text
        self.output: list[Token] = []
        self.depth = 0

    def symbols(self) -> list[tuple[_SymbolType, re.Match]]:
        symbols = []
        pos = 0
        while pos < len(self.text):
            for symbol_type in _SymbolType:
                match = symbol_type.value.match(self.text, pos)
                if match:
                    break
            else:
                raise ExpressionFormatError(f"Unexpected token - {self.text[pos:]}")
            pos = match.end()
            if symbol_type != _SymbolType.SKIP:
                symbols.append((symbol_type, match))
        return symbols

    def parse(self) -> list[Token]:
        # None marks an open parenthesis on the operator stack
        stack: list[Operator | None] = []
        previous: str | None = None
        for symbol_type, match in self.symbols():
            text = match.group()
            if symbol_type in _OPERATOR_SYMBOLS:
                op = Operator.from_name(text)
                if op == Operator.NOT:
                    stack.append(op)
                else:
                    if previous == "(":
                        raise ExpressionFormatError("Invalid parenthesis")
                    while stack and stack[-1] is not None and stack[-1].precedence >= op.precedence:
                        self._emit(stack.pop())
                    stack.append(op)
            elif symbol_type == _SymbolType.PARENTHESIS:
                if text == "(":
                    stack.append(None)
                else:
                    while stack and stack[-1] is not None:
                        self._emit(stack.pop())
                    if not stack:
                        raise ExpressionFormatError("Unmatched parenthesis")
                    stack.pop()
            else:
                self.output.append(self._operand(symbol_type, match))
                self.depth += 1
            previous = text
        while stack:
            op = stack.pop()
            if op is None:
                raise ExpressionFormatError("Unmatched parenthesis")
            self._emit(op)
        if self.depth != 1:
            raise ExpressionFormatError(f"Invalid expression: {{ {self.text} }}")
        return self.output

    def _emit(self, op: Operator) -> None:
        if op == Operator.NOT:
            if self.depth < 1:
                raise ExpressionFormatError("Missing operand")
            last = self.output[-1]
            if isinstance(last, Literal) and last.value is not None and not isinstance(last.value, bool):
                raise ExpressionFormatError("Invalid operand")
        else:
            if self.depth < 2:
                raise ExpressionFormatError("Missing operand")
            self.depth -= 1
        self.output.append(OperatorToken(op))

    @staticmethod
    def _operand(symbol_type: _SymbolType, match: re.Match) -> Token:
        text = match.group()
        if symbol_type == _SymbolType.BOOLEAN:
            return Literal(text == "true")
        if symbol_type == _SymbolType.STRING:
            return Literal(text[1:-1])
        if symbol_type == _SymbolType.ARRAY:
            return Literal(tuple(_ARRAY_ELEMENT.findall(text)))
        return Variable(match.group(1))
