"""
Key roles used by the tree event parser.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from ..config import CodecConfig


class KeyRole(Enum):
    """How the value of a JSON object key is interpreted."""

    NAME = "name"  # scalar naming the enclosing node
    OBJECT = "object"  # dictionary of named sub-nodes
    CHILDREN = "children"  # ordered array of child nodes
    UNKNOWN = "unknown"  # plain attribute


KeyClassifier = Callable[[str], KeyRole]


def key_classifier(config: CodecConfig | None = None) -> KeyClassifier:
    """Build the key classifier for the script document schema."""
    config = config or CodecConfig()
    roles = {key: KeyRole.OBJECT for key in config.object_keys}
    roles[config.children_key] = KeyRole.CHILDREN
    roles[config.name_key] = KeyRole.NAME

    def classify(key: str) -> KeyRole:
        return roles.get(key, KeyRole.UNKNOWN)

    return classify
