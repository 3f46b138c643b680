"""
Reader states and the transition function.

``transition`` maps the state of the enclosing element and the kind of a
new element to the action to take and the state for the new element's
children. It performs no I/O and builds nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..script_ast.expression import TOKEN_KINDS
from ..script_ast.nodes import (
    Block,
    BooleanInput,
    BooleanPreset,
    BooleanVariable,
    EnumInput,
    EnumPreset,
    EnumVariable,
    InputOption,
    Inputs,
    Invocation,
    ListInput,
    ListPreset,
    ListVariable,
    Method,
    Methods,
    Model,
    ModelList,
    ModelMap,
    ModelValue,
    Node,
    Output,
    Presets,
    PresetValue,
    Script,
    Step,
    TextInput,
    TextPreset,
    TextVariable,
    Variables,
)


class State(Enum):
    """What the children of an element may be."""

    ROOT = "root"  # body of the document root
    EXECUTABLE = "executable"  # statements of a script, step, method or input
    BLOCK = "block"  # content of any other block
    INPUT = "input"  # content of an inputs container or input group
    PRESET = "preset"  # content of a presets container
    VARIABLE = "variable"  # content of a variables container
    METHODS = "methods"  # entries of a method table
    EXPRESSIONS = "expressions"  # entries of the expression table
    EXPRESSION = "expression"  # tokens of one expression
    TOKEN = "token"  # a token; no children


class Action(Enum):
    """What to do with a new element."""

    NODE = "node"  # open a node builder
    METHOD = "method"  # open a method builder named by the element kind
    ENTER = "enter"  # push a state without a builder
    EXPRESSION = "expression"  # start an expression named by the element kind
    TOKEN = "token"  # append a token to the enclosing expression


@dataclass(frozen=True)
class Transition:
    action: Action
    successor: State
    node_type: type[Node] | None = None


EXPRESSIONS_KIND = "expressions"
CALL_KIND = "call"

_BLOCKS: dict[str, tuple[type[Node], State]] = {
    "script": (Script, State.EXECUTABLE),
    "step": (Step, State.EXECUTABLE),
    "method": (Method, State.EXECUTABLE),
    "methods": (Methods, State.METHODS),
    "inputs": (Inputs, State.INPUT),
    "presets": (Presets, State.PRESET),
    "variables": (Variables, State.VARIABLE),
    "output": (Output, State.BLOCK),
    "model": (Model, State.BLOCK),
    "list": (ModelList, State.BLOCK),
    "map": (ModelMap, State.BLOCK),
    "value": (ModelValue, State.BLOCK),
}

# Kinds that are only legal in a specific state
_RESERVED = frozenset({EXPRESSIONS_KIND, CALL_KIND, "boolean", "text", "enum", "option"})

_INPUTS: dict[str, tuple[type[Node], State]] = {
    "boolean": (BooleanInput, State.EXECUTABLE),
    "text": (TextInput, State.EXECUTABLE),
    "option": (InputOption, State.EXECUTABLE),
    "enum": (EnumInput, State.INPUT),
    "list": (ListInput, State.INPUT),
}

_PRESETS: dict[str, type[Node]] = {
    "boolean": BooleanPreset,
    "text": TextPreset,
    "enum": EnumPreset,
    "list": ListPreset,
    "value": PresetValue,
}

_VARIABLES: dict[str, type[Node]] = {
    "boolean": BooleanVariable,
    "text": TextVariable,
    "enum": EnumVariable,
    "list": ListVariable,
}


def resolve_block(kind: str | None) -> Transition:
    """Resolve a block kind to its node type and child state.

    Kinds without a dedicated node type become generic blocks.

    Raises:
        ValueError: If the kind is missing or reserved
    """
    if kind is None:
        raise ValueError("Element has no kind")
    if kind in _RESERVED:
        raise ValueError(f"'{kind}' is not allowed here")
    node_type, successor = _BLOCKS.get(kind, (Block, State.BLOCK))
    return Transition(Action.NODE, successor, node_type)


def transition(state: State, kind: str | None) -> Transition:
    """Compute the transition for an element of ``kind`` under ``state``.

    Raises:
        ValueError: If the element is not legal in the state
    """
    match state:
        case State.ROOT | State.EXECUTABLE:
            if kind == EXPRESSIONS_KIND and state == State.ROOT:
                return Transition(Action.ENTER, State.EXPRESSIONS)
            if kind == CALL_KIND:
                return Transition(Action.NODE, State.EXECUTABLE, Invocation)
            return resolve_block(kind)
        case State.BLOCK:
            return resolve_block(kind)
        case State.METHODS:
            return Transition(Action.METHOD, State.EXECUTABLE, Method)
        case State.EXPRESSIONS:
            return Transition(Action.EXPRESSION, State.EXPRESSION)
        case State.EXPRESSION:
            if kind not in TOKEN_KINDS:
                raise ValueError(f"Unsupported token kind: {kind!r}")
            return Transition(Action.TOKEN, State.TOKEN)
        case State.TOKEN:
            raise ValueError("Tokens cannot have children")
        case State.INPUT:
            if kind == CALL_KIND:
                return Transition(Action.NODE, State.EXECUTABLE, Invocation)
            if kind == "output":
                return resolve_block(kind)
            if kind not in _INPUTS:
                raise ValueError(f"Invalid input block: {kind!r}")
            node_type, successor = _INPUTS[kind]
            return Transition(Action.NODE, successor, node_type)
        case State.PRESET:
            if kind not in _PRESETS:
                raise ValueError(f"Invalid preset block: {kind!r}")
            return Transition(Action.NODE, State.PRESET, _PRESETS[kind])
        case State.VARIABLE:
            if kind not in _VARIABLES:
                raise ValueError(f"Invalid variable block: {kind!r}")
            return Transition(Action.NODE, State.VARIABLE, _VARIABLES[kind])
    raise ValueError(f"Invalid state: {state}")


def root_transition(kind: str | None, strict: bool = True) -> Transition:
    """Compute the transition for the document root element.

    A root without a kind is a script. When ``strict`` is false any element
    legal in an executable context may be the root.

    Raises:
        ValueError: If the element cannot be the document root
    """
    if kind is None or kind == Script.KIND:
        return Transition(Action.NODE, State.ROOT, Script)
    if strict:
        raise ValueError(f"Document root must be a script, got '{kind}'")
    result = transition(State.EXECUTABLE, kind)
    if result.successor == State.EXECUTABLE:
        return Transition(result.action, State.ROOT, result.node_type)
    return result
