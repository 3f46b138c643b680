"""
Tree event parsing.

Contains the JSON token source, the key classifier and the parser that
turns JSON objects into nested element events.
"""

from __future__ import annotations

from .keys import KeyClassifier, KeyRole, key_classifier
from .parser import TreeEventParser, TreeHandler
from .tokens import TokenEvent, iter_events

__all__ = [
    "KeyRole",
    "KeyClassifier",
    "key_classifier",
    "TreeEventParser",
    "TreeHandler",
    "TokenEvent",
    "iter_events",
]
