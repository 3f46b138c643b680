"""
Script writer.

Walks the AST depth first and emits the JSON tree of the document.
Conditions are written as an ``if`` attribute on the guarded node, and the
expressions they reference are interned into the ``expressions``
dictionary of the document root, ahead of the root's children.

The walk keeps its own stack of open nodes, so any tree the reader builds
can be written back regardless of its depth.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from ..config import CodecConfig
from ..errors import ScriptCodecError
from ..reader.states import EXPRESSIONS_KIND
from ..script_ast.expression import Expression, token_to_json
from ..script_ast.nodes import Child, Condition, Method, Methods, Node
from ..script_ast.values import write_value
from .interner import ExpressionInterner

logger = logging.getLogger(__name__)


@dataclass
class Frame:
    """An open node: its pending children and the output they accumulate."""

    node: Node
    pending: Iterator[Child]

    # Called with the frame once all children are written
    close: Callable[[Frame], None]

    children: list[dict[str, Any]] = field(default_factory=list)
    methods: dict[str, Any] | None = None

    # Set for method tables; their children become entries of this dictionary
    entries: dict[str, Any] | None = None


class ScriptWriter:
    """Converts an AST to a JSON tree; one instance per document."""

    def __init__(self, config: CodecConfig | None = None):
        self.config = config or CodecConfig()
        self.interner = ExpressionInterner(self.config.expression_id_prefix)
        self._stack: list[Frame] = []

    def write(self, root: Node) -> dict[str, Any]:
        """
        Write a document.

        Args:
            root: The root node, normally a Script

        Returns:
            The JSON tree, ready for ``json.dumps``

        Raises:
            ScriptCodecError: If the AST cannot be represented as a document
        """
        document: dict[str, Any] = {}
        self._open_node(root, None, document)
        while self._stack:
            frame = self._stack[-1]
            child = next(frame.pending, None)
            if child is None:
                self._stack.pop()
                frame.close(frame)
            elif frame.entries is not None:
                self._open_entry(frame.entries, child)
            else:
                self._open_child(frame, child)
        if len(self.interner):
            document = self._add_expressions(document)
        logger.debug("Wrote '%s' document with %d expression(s)", root.kind, len(self.interner))
        return document

    def _add_expressions(self, document: dict[str, Any]) -> dict[str, Any]:
        expressions = {
            expr_id: [token_to_json(token, self.config.name_key) for token in expression.tokens]
            for expr_id, expression in self.interner.entries().items()
        }
        nested_keys = {self.config.children_key, *self.config.object_keys}
        result: dict[str, Any] = {}
        for key, value in document.items():
            if key in nested_keys and EXPRESSIONS_KIND not in result:
                result[EXPRESSIONS_KIND] = expressions
            result[key] = value
        result.setdefault(EXPRESSIONS_KIND, expressions)
        return result

    def _open_child(self, frame: Frame, child: Child) -> None:
        match child:
            case Methods():
                if frame.methods is None:
                    frame.methods = {}
                self._stack.append(Frame(child, iter(child.children), _close_table, entries=frame.methods))
            case Condition(then=Methods()):
                raise ScriptCodecError(f"Method table of '{frame.node.kind}' cannot be conditional")
            case Condition(expression=expression, then=node):
                output: dict[str, Any] = {}
                frame.children.append(output)
                self._open_node(node, expression, output)
            case Node():
                output = {}
                frame.children.append(output)
                self._open_node(child, None, output)
            case _:
                raise ScriptCodecError(f"Not a node: {child!r}")

    def _open_node(self, node: Node, expression: Expression | None, output: dict[str, Any]) -> None:
        output[self.config.name_key] = node.kind
        for name, value in node.attribute_values().items():
            output[name] = write_value(value)
        if expression is not None:
            output[self.config.condition_key] = self.interner.intern(expression)

        def close(frame: Frame) -> None:
            if frame.methods is not None:
                output[Methods.KIND] = frame.methods
            if frame.children or node.keeps_empty_children():
                output[self.config.children_key] = frame.children

        self._stack.append(Frame(node, iter(node.children), close))

    def _open_entry(self, entries: dict[str, Any], child: Child) -> None:
        method = child.then if isinstance(child, Condition) else child
        if not isinstance(method, Method):
            raise ScriptCodecError(f"Method table cannot hold '{method.kind}'")
        expr_id = self.interner.intern(child.expression) if isinstance(child, Condition) else None

        def close(frame: Frame) -> None:
            if expr_id is None and frame.methods is None:
                entries[method.name] = frame.children
                return
            entry: dict[str, Any] = {}
            if expr_id is not None:
                entry[self.config.condition_key] = expr_id
            if frame.methods is not None:
                entry[Methods.KIND] = frame.methods
            entry[self.config.children_key] = frame.children
            entries[method.name] = entry

        self._stack.append(Frame(method, iter(method.children), close))


def _close_table(frame: Frame) -> None:
    """Entries of a method table are added by their own frames."""


def serialize(root: Node, config: CodecConfig | None = None) -> dict[str, Any]:
    """Convert an AST to its JSON tree."""
    return ScriptWriter(config).write(root)


def serialize_to_string(root: Node, config: CodecConfig | None = None) -> str:
    """Convert an AST to compact JSON text."""
    return json.dumps(serialize(root, config), ensure_ascii=False, separators=(",", ":"))


def serialize_pretty(root: Node, config: CodecConfig | None = None) -> str:
    """Convert an AST to indented JSON text."""
    config = config or CodecConfig()
    return json.dumps(serialize(root, config), ensure_ascii=False, indent=config.indent)
