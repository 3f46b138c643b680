"""
Schema-agnostic tree event parser.

Turns the forward-only JSON token stream into nested ``start_element`` /
``end_element`` callbacks. Every JSON object is a node; the key classifier
decides which keys name the node, which hold its ordered children, which
hold dictionaries of named sub-nodes, and which are plain attributes.

A node's start callback fires lazily, when its first children or object
key is reached or when the object ends, so that all attributes preceding
those keys are delivered with it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from ..errors import TreeShapeError
from ..location import Location
from .keys import KeyClassifier, KeyRole
from .tokens import SCALAR_EVENTS, Source, TokenEvent, iter_events


class TreeHandler(Protocol):
    """Receiver of tree events."""

    def start_element(self, kind: str | None, attributes: dict[str, Any], location: Location) -> None:
        """Start of a node, before any of its children."""

    def end_element(self, kind: str | None, location: Location, has_children: bool = False) -> None:
        """End of a node, after all of its children.

        ``has_children`` tells whether the node held a children array, even an empty one.
        """


class FrameType(Enum):
    """Kind of pending context on the parser stack."""

    NODE = "node"  # inside a node object
    KEY = "key"  # waiting for the value of a node key
    CHILDREN = "children"  # inside a children array
    OBJECT = "object"  # inside an object-role dictionary
    ENTRY = "entry"  # waiting for the value of a dictionary entry
    ENTRY_CHILDREN = "entry_children"  # inside an array-valued dictionary entry
    ATTRIBUTE = "attribute"  # inside an array attribute


@dataclass
class Frame:
    """A pending context; only the fields its type needs are set."""

    type: FrameType
    key: str | None = None
    role: KeyRole | None = None
    kind: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)
    items: list[Any] = field(default_factory=list)
    named: bool = False
    started: bool = False
    has_children: bool = False


class TreeEventParser:
    """Drives a TreeHandler from a JSON token stream."""

    def __init__(self, classifier: KeyClassifier, handler: TreeHandler):
        """
        Initialize the parser.

        Args:
            classifier: Function giving the role of each JSON object key
            handler: Receiver of the element callbacks
        """
        self.classifier = classifier
        self.handler = handler
        self.location = Location()
        self._stack: list[Frame] = []
        self._root_seen = False

    def parse(self, source: Source) -> None:
        """Consume the whole input and emit the element callbacks.

        Raises:
            ijson.JSONError: If the input is not valid JSON
            TreeShapeError: If the JSON does not describe a node tree
        """
        for token in iter_events(source):
            self.location = token.location
            self.feed(token)
        if self._stack:
            raise TreeShapeError("Unterminated node at end of input", self.location)
        if not self._root_seen:
            raise TreeShapeError("Document has no root node", self.location)

    def feed(self, token: TokenEvent) -> None:
        """Process a single token event."""
        if not self._stack:
            if self._root_seen or token.event != "start_map":
                raise TreeShapeError("Invalid state, no enclosing node", self.location)
            self._root_seen = True
            self._stack.append(Frame(FrameType.NODE))
            return

        frame = self._stack[-1]
        if frame.type == FrameType.NODE:
            self._in_node(frame, token)
        elif frame.type == FrameType.KEY:
            self._key_value(frame, token)
        elif frame.type in (FrameType.CHILDREN, FrameType.ENTRY_CHILDREN):
            self._in_children(frame, token)
        elif frame.type == FrameType.OBJECT:
            self._in_object(frame, token)
        elif frame.type == FrameType.ENTRY:
            self._entry_value(frame, token)
        else:
            self._in_attribute(frame, token)

    def _in_node(self, frame: Frame, token: TokenEvent) -> None:
        if token.event == "map_key":
            role = self.classifier(token.value)
            if role == KeyRole.UNKNOWN and frame.started:
                raise TreeShapeError(f"Attribute '{token.value}' follows the node children", self.location)
            if role == KeyRole.NAME and (frame.named or frame.started):
                raise TreeShapeError(f"Unexpected node name key '{token.value}'", self.location)
            self._stack.append(Frame(FrameType.KEY, key=token.value, role=role))
        elif token.event == "end_map":
            self._start(frame)
            self._stack.pop()
            self.handler.end_element(frame.kind, self.location, frame.has_children)
        else:
            raise TreeShapeError(f"Unexpected '{token.event}' in node", self.location)

    def _key_value(self, frame: Frame, token: TokenEvent) -> None:
        self._stack.pop()
        node = self._stack[-1]
        if frame.role == KeyRole.NAME:
            if token.event != "string":
                raise TreeShapeError(f"Node name '{frame.key}' must be a string", self.location)
            node.kind = token.value
            node.named = True
        elif frame.role == KeyRole.CHILDREN:
            if token.event != "start_array":
                raise TreeShapeError(f"Children '{frame.key}' must be an array", self.location)
            self._start(node)
            node.has_children = True
            self._stack.append(Frame(FrameType.CHILDREN, key=frame.key))
        elif frame.role == KeyRole.OBJECT:
            if token.event != "start_map":
                raise TreeShapeError(f"'{frame.key}' must be an object", self.location)
            self._start(node)
            self.handler.start_element(frame.key, {}, self.location)
            self._stack.append(Frame(FrameType.OBJECT, key=frame.key))
        elif token.event in SCALAR_EVENTS:
            node.attributes[frame.key] = token.value
        elif token.event == "start_array":
            self._stack.append(Frame(FrameType.ATTRIBUTE, key=frame.key))
        else:
            raise TreeShapeError(f"Attribute '{frame.key}' cannot hold an object", self.location)

    def _in_children(self, frame: Frame, token: TokenEvent) -> None:
        if token.event == "start_map":
            self._stack.append(Frame(FrameType.NODE))
        elif token.event == "end_array":
            self._stack.pop()
            if frame.type == FrameType.ENTRY_CHILDREN:
                self.handler.end_element(frame.key, self.location, True)
        else:
            raise TreeShapeError(f"Children of '{frame.key}' must be objects", self.location)

    def _in_object(self, frame: Frame, token: TokenEvent) -> None:
        if token.event == "map_key":
            self._stack.append(Frame(FrameType.ENTRY, key=token.value))
        elif token.event == "end_map":
            self._stack.pop()
            self.handler.end_element(frame.key, self.location)
        else:
            raise TreeShapeError(f"Unexpected '{token.event}' in '{frame.key}'", self.location)

    def _entry_value(self, frame: Frame, token: TokenEvent) -> None:
        self._stack.pop()
        if token.event == "start_array":
            self.handler.start_element(frame.key, {}, self.location)
            self._stack.append(Frame(FrameType.ENTRY_CHILDREN, key=frame.key))
        elif token.event == "start_map":
            # the dictionary key names the entry node
            self._stack.append(Frame(FrameType.NODE, kind=frame.key, named=True))
        else:
            raise TreeShapeError(f"Entry '{frame.key}' must be an object or an array", self.location)

    def _in_attribute(self, frame: Frame, token: TokenEvent) -> None:
        if token.event in SCALAR_EVENTS:
            frame.items.append(token.value)
        elif token.event == "end_array":
            self._stack.pop()
            self._stack[-1].attributes[frame.key] = frame.items
        else:
            raise TreeShapeError(f"Attribute '{frame.key}' must be an array of scalars", self.location)

    def _start(self, frame: Frame) -> None:
        if not frame.started:
            frame.started = True
            self.handler.start_element(frame.kind, frame.attributes, self.location)
