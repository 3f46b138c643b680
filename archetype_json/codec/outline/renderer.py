"""
Text outline of an AST.

Flattens the tree into one line per node, in document order, and renders
the lines with a Jinja2 template.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

import jinja2

from ..script_ast.expression import Expression
from ..script_ast.nodes import Child, Condition, Node
from ..script_ast.values import Value, write_value

TEMPLATE_NAME = "outline.txt.jinja2"


@dataclass
class OutlineLine:
    """One node of the outline."""

    depth: int
    kind: str
    attributes: dict[str, Value]
    condition: Expression | None = None


def outline_lines(root: Child) -> list[OutlineLine]:
    """List the nodes of a tree in pre-order, with their depth."""
    lines: list[OutlineLine] = []
    stack: list[tuple[Child, int]] = [(root, 0)]
    while stack:
        child, depth = stack.pop()
        condition = None
        if isinstance(child, Condition):
            condition = child.expression
            child = child.then
        lines.append(OutlineLine(depth, child.kind, child.attribute_values(), condition))
        stack.extend((sub, depth + 1) for sub in reversed(child.children))
    return lines


class OutlineRenderer:
    """Renders outlines with the packaged template."""

    def __init__(self, indent: int = 2):
        """
        Initialize the renderer.

        Args:
            indent: Number of spaces per depth level
        """
        self.indent = indent
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates"
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
        )
        self.jinja_env.filters["indentation"] = self._indentation
        self.jinja_env.filters["attributes"] = self._attributes
        self.jinja_env.filters["condition"] = self._condition
        self.template = self.jinja_env.get_template(TEMPLATE_NAME)

    def render(self, root: Child) -> str:
        """
        Render the outline of a tree.

        Args:
            root: The root node, possibly wrapped in a condition

        Returns:
            The outline text, one node per line
        """
        return self.template.render(lines=outline_lines(root))

    def _indentation(self, depth: int) -> str:
        return " " * (depth * self.indent)

    @staticmethod
    def _attributes(attributes: dict[str, Value]) -> str:
        return "".join(f" {name}={json.dumps(write_value(value))}" for name, value in attributes.items())

    @staticmethod
    def _condition(expression: Expression | None) -> str:
        if expression is None:
            return ""
        return f" [if {expression.to_text()}]"


def render_outline(root: Node | Condition, indent: int = 2) -> str:
    """Render the text outline of a tree."""
    return OutlineRenderer(indent).render(root)
