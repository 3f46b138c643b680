"""
Tests for the expression language.
"""

from __future__ import annotations

import pytest

from archetype_json.codec.errors import ExpressionFormatError
from archetype_json.codec.script_ast import (
    Expression,
    Literal,
    Operator,
    OperatorToken,
    Variable,
    check_tokens,
    parse_tokens,
    serialize_tokens,
    token_from_json,
    token_to_json,
)

AND = OperatorToken(Operator.AND)
OR = OperatorToken(Operator.OR)
NOT = OperatorToken(Operator.NOT)
EQUAL = OperatorToken(Operator.EQUAL)
CONTAINS = OperatorToken(Operator.CONTAINS)
OPEN = OperatorToken(Operator.OPEN_PAREN)
CLOSE = OperatorToken(Operator.CLOSE_PAREN)


class TestOperator:
    """Test cases for operator lookup"""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("==", Operator.EQUAL),
            ("EQUAL", Operator.EQUAL),
            ("!=", Operator.NOT_EQUAL),
            ("NOT_EQUAL", Operator.NOT_EQUAL),
            ("&&", Operator.AND),
            ("OR", Operator.OR),
            ("!", Operator.NOT),
            ("contains", Operator.CONTAINS),
            ("CONTAINS", Operator.CONTAINS),
            ("(", Operator.OPEN_PAREN),
            ("CLOSE_PAREN", Operator.CLOSE_PAREN),
        ],
    )
    def test_from_name(self, name, expected):
        assert Operator.from_name(name) is expected

    def test_unknown_operator(self):
        with pytest.raises(ValueError):
            Operator.from_name("<>")

    def test_precedence(self):
        assert Operator.NOT.precedence > Operator.CONTAINS.precedence > Operator.EQUAL.precedence
        assert Operator.EQUAL.precedence == Operator.NOT_EQUAL.precedence
        assert Operator.AND.precedence > Operator.OR.precedence


class TestExpressionParse:
    """Test cases for parsing expression text"""

    def test_parenthesized(self):
        expr = Expression.parse("true == (true || false)")
        assert expr.tokens == (Literal(True), Literal(True), Literal(False), OR, EQUAL)

    def test_precedence_without_parentheses(self):
        expr = Expression.parse("${flavor} == 'se' && !${docker}")
        assert expr.tokens == (Variable("flavor"), Literal("se"), EQUAL, Variable("docker"), NOT, AND)

    def test_contains_over_array(self):
        expr = Expression.parse("['a', 'b'] contains \"a\"")
        assert expr.tokens == (Literal(("a", "b")), Literal("a"), CONTAINS)

    def test_empty_array(self):
        assert Expression.parse("${list} == []").tokens == (Variable("list"), Literal(()), EQUAL)

    def test_variable_names(self):
        assert Expression.parse("${~docker.image-name}").tokens == (Variable("~docker.image-name"),)

    def test_left_associative(self):
        expr = Expression.parse("true || false || true")
        assert expr.tokens == (Literal(True), Literal(False), OR, Literal(True), OR)

    def test_double_negation(self):
        assert Expression.parse("!!true").tokens == (Literal(True), NOT, NOT)

    @pytest.mark.parametrize(
        "text",
        [
            "true &&",
            "&& true",
            "(true",
            "true)",
            "( == true)",
            "!'foo'",
            "true false",
            "@",
            "",
        ],
    )
    def test_invalid(self, text):
        with pytest.raises(ExpressionFormatError):
            Expression.parse(text)


class TestExpressionText:
    """Test cases for rendering expressions as text"""

    @pytest.mark.parametrize(
        "text",
        [
            "true == (true || false)",
            "${flavor} == 'se' && !${docker}",
            "['a', 'b'] contains 'a'",
            "!(${a} || ${b})",
            "(${a} || ${b}) && ${c}",
        ],
    )
    def test_text_round_trip(self, text):
        expr = Expression.parse(text)
        assert expr.to_text() == text
        assert Expression.parse(expr.to_text()) == expr

    def test_infix_tokens_are_joined(self):
        expr = Expression((OPEN, Literal(True), CLOSE))
        assert str(expr) == "( true )"

    def test_malformed_tokens_are_joined(self):
        assert Expression((Literal(True), AND)).to_text() == "true &&"


class TestTokens:
    """Test cases for the token codec"""

    @pytest.mark.parametrize(
        "text",
        [
            "true",
            "true == (true || false)",
            "['x', 'y'] contains ${features} && !${disabled}",
            "(${a} == 'b' || ${c} != 'd') && ${e} contains 'f'",
        ],
    )
    def test_token_round_trip(self, text):
        expr = Expression.parse(text)
        assert parse_tokens(serialize_tokens(expr)) == expr

    def test_source_id_is_not_compared(self):
        tokens = (Literal(True),)
        assert Expression(tokens, source_id="e1") == Expression(tokens)
        assert hash(Expression(tokens, source_id="e1")) == hash(Expression(tokens))

    @pytest.mark.parametrize(
        "kind,attributes,expected",
        [
            ("literal", {"value": True}, Literal(True)),
            ("literal", {"value": ["a", "b"]}, Literal(("a", "b"))),
            ("literal", {"value": None}, Literal(None)),
            ("literal", {}, Literal(None)),
            ("operator", {"value": "&&"}, AND),
            ("operator", {"value": "AND"}, AND),
            ("variable", {"value": "flavor"}, Variable("flavor")),
        ],
    )
    def test_token_from_json(self, kind, attributes, expected):
        assert token_from_json(kind, attributes) == expected

    @pytest.mark.parametrize(
        "kind,attributes",
        [
            ("number", {"value": "1"}),
            (None, {"value": "1"}),
            ("operator", {"value": "<>"}),
            ("operator", {"value": True}),
            ("variable", {}),
            ("literal", {"value": "a", "extra": "b"}),
        ],
    )
    def test_token_from_json_invalid(self, kind, attributes):
        with pytest.raises(ValueError):
            token_from_json(kind, attributes)

    def test_token_to_json(self):
        assert token_to_json(Literal(("a",))) == {"kind": "literal", "value": ["a"]}
        assert token_to_json(CONTAINS) == {"kind": "operator", "value": "contains"}
        assert token_to_json(Variable("v"), name_key="type") == {"type": "variable", "value": "v"}


class TestCheckTokens:
    """Test cases for advisory token checks"""

    def test_sound_postfix(self):
        assert check_tokens(Expression.parse("true == (true || false)").tokens) == []

    def test_sound_infix(self):
        assert check_tokens([OPEN, Literal(True), OR, NOT, Literal(False), CLOSE]) == []

    def test_empty(self):
        assert check_tokens([]) == ["empty expression"]

    def test_missing_operand(self):
        problems = check_tokens([Literal(True), AND])
        assert problems
        assert "missing operand" in problems[0]

    def test_leftover_operands(self):
        assert check_tokens([Literal(True), Literal(False)]) == ["expression leaves 2 operands"]

    def test_unbalanced_parenthesis(self):
        assert "unmatched '('" in check_tokens([OPEN, Literal(True)])
        assert any("unmatched ')'" in p for p in check_tokens([Literal(True), CLOSE]))
