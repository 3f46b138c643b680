"""
Reader module.

Contains the reader state machine that builds the AST from tree events.
"""

from __future__ import annotations

from .reader import ScriptReader, deserialize, deserialize_node
from .states import Action, State, Transition, resolve_block, root_transition, transition

__all__ = [
    "ScriptReader",
    "deserialize",
    "deserialize_node",
    "State",
    "Action",
    "Transition",
    "transition",
    "resolve_block",
    "root_transition",
]
