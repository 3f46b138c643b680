"""
Script reader.

Consumes the tree events of a JSON script document and builds the typed
AST in a single forward pass. Expression ids must be declared in the
``expressions`` dictionary of the document root before any ``if``
attribute refers to them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..config import CodecConfig
from ..errors import ScriptCodecError, SchemaViolationError, TreeShapeError, UnresolvedReferenceError
from ..location import Location
from ..script_ast.builders import NodeBuilder
from ..script_ast.expression import Expression, Token, check_tokens, token_from_json
from ..script_ast.nodes import Child, Method, Node, Script
from ..script_ast.values import Value, read_value
from ..tree.keys import key_classifier
from ..tree.parser import TreeEventParser
from ..tree.tokens import Source
from .states import Action, State, root_transition, transition

logger = logging.getLogger(__name__)


@dataclass
class Frame:
    """An open element: its child state and what it accumulates."""

    state: State
    builder: NodeBuilder | None = None
    tokens: list[Token] | None = None


class ScriptReader:
    """Builds an AST from one JSON document."""

    def __init__(self, config: CodecConfig | None = None, strict_root: bool | None = None):
        """
        Initialize the reader.

        Args:
            config: Codec configuration
            strict_root: Override of ``config.strict_root``
        """
        self.config = config or CodecConfig()
        self.strict_root = self.config.strict_root if strict_root is None else strict_root
        self.expressions: dict[str, Expression] = {}
        self._stack: list[Frame] = []
        self._result: Child | None = None
        self._parser = TreeEventParser(key_classifier(self.config), self)

    def read(self, source: Source) -> Node:
        """
        Read a document.

        Args:
            source: JSON text, UTF-8 bytes, or a file object

        Returns:
            The root node

        Raises:
            ijson.JSONError: If the input is not valid JSON
            ScriptCodecError: If the document is not a valid script
        """
        self._parser.parse(source)
        if not isinstance(self._result, Node):
            raise SchemaViolationError("Unable to create script", location=self._parser.location)
        logger.debug("Read '%s' document with %d expression(s)", self._result.kind, len(self.expressions))
        return self._result

    def start_element(self, kind: str | None, attributes: dict[str, Any], location: Location) -> None:
        try:
            self._process_element(kind, attributes, location)
        except ScriptCodecError:
            raise
        except ValueError as e:
            raise SchemaViolationError(f"Invalid element '{kind}'", kind, location) from e
        except Exception as e:
            raise ScriptCodecError("An unexpected error occurred", location) from e

    def end_element(self, kind: str | None, location: Location, has_children: bool = False) -> None:
        if not self._stack:
            raise TreeShapeError("Invalid state, no open element", location)
        frame = self._stack.pop()
        if frame.builder is not None:
            node = frame.builder.build(has_children)
            if self._stack:
                self._stack[-1].builder.add_child(node)
            else:
                self._result = node
        elif frame.state == State.EXPRESSION:
            self._add_expression(kind, frame.tokens, location)

    def _process_element(self, kind: str | None, attributes: dict[str, Any], location: Location) -> None:
        attrs = {name: read_value(value) for name, value in attributes.items()}
        condition = self._resolve_condition(kind, attrs, location)

        if not self._stack:
            if self._result is not None:
                raise TreeShapeError("Document has more than one root", location)
            step = root_transition(kind, self.strict_root)
            builder = NodeBuilder.open(step.node_type, kind or Script.KIND, attrs, location, condition)
            self._stack.append(Frame(step.successor, builder))
            return

        ctx = self._stack[-1]
        step = transition(ctx.state, kind)
        if condition is not None and step.action not in (Action.NODE, Action.METHOD):
            raise ValueError(f"'{self.config.condition_key}' is not allowed on '{kind}'")

        match step.action:
            case Action.NODE:
                builder = NodeBuilder.open(step.node_type, kind, attrs, location, condition)
                self._stack.append(Frame(step.successor, builder))
            case Action.METHOD:
                if "name" in attrs:
                    raise ValueError(f"Method '{kind}' is named by its key")
                attrs["name"] = kind
                builder = NodeBuilder.open(Method, Method.KIND, attrs, location, condition)
                self._stack.append(Frame(step.successor, builder))
            case Action.ENTER:
                self._stack.append(Frame(step.successor))
            case Action.EXPRESSION:
                if attrs:
                    raise ValueError(f"Expression '{kind}' cannot have attributes")
                self._stack.append(Frame(step.successor, tokens=[]))
            case Action.TOKEN:
                ctx.tokens.append(token_from_json(kind, attrs))
                self._stack.append(Frame(step.successor))

    def _resolve_condition(self, kind: str | None, attrs: dict[str, Value], location: Location) -> Expression | None:
        if self.config.condition_key not in attrs:
            return None
        expr_id = attrs.pop(self.config.condition_key)
        if not isinstance(expr_id, str):
            raise ValueError(f"'{self.config.condition_key}' must be a string")
        expression = self.expressions.get(expr_id)
        if expression is None:
            raise UnresolvedReferenceError(expr_id, kind, location)
        return expression

    def _add_expression(self, expr_id: str, tokens: list[Token], location: Location) -> None:
        expression = Expression(tuple(tokens), source_id=expr_id)
        if self.config.validate_expressions:
            problems = check_tokens(expression.tokens)
            if problems:
                logger.warning("Expression '%s' at %s looks malformed: %s", expr_id, location, "; ".join(problems))
        self.expressions[expr_id] = expression


def deserialize(source: Source, config: CodecConfig | None = None) -> Script:
    """Read a script document.

    Raises:
        ijson.JSONError: If the input is not valid JSON
        ScriptCodecError: If the document is not a valid script
    """
    return ScriptReader(config, strict_root=True).read(source)


def deserialize_node(source: Source, config: CodecConfig | None = None) -> Node:
    """Read a document whose root may be any block, e.g. a single step."""
    return ScriptReader(config, strict_root=False).read(source)
