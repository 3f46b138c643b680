"""
Node builders.

A builder is the open, mutable form of a node: attributes are checked when
it is opened, children accumulate while it is open, and ``build`` closes it
into an immutable node exactly once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..location import Location
from .expression import Expression
from .nodes import Child, Condition, Node
from .values import Value


@dataclass
class NodeBuilder:
    """Open node accumulating its children."""

    node_type: type[Node]
    kind: str
    values: dict[str, Any] = field(default_factory=dict)
    location: Location | None = None

    # Expression guarding the node, if any
    condition: Expression | None = None

    children: list[Child] = field(default_factory=list)
    closed: bool = False

    @classmethod
    def open(
        cls,
        node_type: type[Node],
        kind: str,
        attributes: dict[str, Value],
        location: Location | None = None,
        condition: Expression | None = None,
    ) -> NodeBuilder:
        """Open a builder, validating the attributes for the node type.

        Raises:
            ValueError: If the attributes are not legal for the node type
        """
        values = node_type.coerce_attributes(kind, attributes)
        return cls(node_type, kind, values, location, condition)

    def add_child(self, child: Child) -> None:
        if self.closed:
            raise RuntimeError(f"Node '{self.kind}' is already built")
        self.children.append(child)

    def build(self, has_children: bool | None = None) -> Child:
        """Close the builder, returning the node or its condition wrapper.

        Args:
            has_children: Whether the document held a children array for the node
        """
        if self.closed:
            raise RuntimeError(f"Node '{self.kind}' is already built")
        self.closed = True
        node = self.node_type.create(self.kind, self.values, self.children, self.location, has_children)
        if self.condition is not None:
            return Condition(self.condition, node)
        return node
