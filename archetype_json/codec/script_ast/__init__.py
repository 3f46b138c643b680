"""
Script AST module.

Contains values, the expression language, the AST node definitions and
the node builders.
"""

from __future__ import annotations

from .builders import NodeBuilder
from .expression import (
    Expression,
    Literal,
    Operator,
    OperatorToken,
    Token,
    Variable,
    check_tokens,
    parse_tokens,
    serialize_tokens,
    token_from_json,
    token_to_json,
)
from .nodes import (
    Block,
    BooleanInput,
    BooleanPreset,
    BooleanVariable,
    Child,
    Condition,
    EnumInput,
    EnumPreset,
    EnumVariable,
    Input,
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
    NamedInput,
    Node,
    Output,
    Preset,
    Presets,
    PresetValue,
    Script,
    ScriptVariable,
    Step,
    TextInput,
    TextPreset,
    TextVariable,
    Variables,
)
from .values import Value, read_value, write_value

__all__ = [
    "Value",
    "read_value",
    "write_value",
    "Expression",
    "Token",
    "Literal",
    "Operator",
    "OperatorToken",
    "Variable",
    "parse_tokens",
    "serialize_tokens",
    "check_tokens",
    "token_from_json",
    "token_to_json",
    "Node",
    "Child",
    "Condition",
    "NodeBuilder",
    "Script",
    "Step",
    "Method",
    "Methods",
    "Invocation",
    "Inputs",
    "Input",
    "NamedInput",
    "BooleanInput",
    "TextInput",
    "EnumInput",
    "ListInput",
    "InputOption",
    "Presets",
    "Preset",
    "BooleanPreset",
    "TextPreset",
    "EnumPreset",
    "ListPreset",
    "PresetValue",
    "Variables",
    "ScriptVariable",
    "BooleanVariable",
    "TextVariable",
    "EnumVariable",
    "ListVariable",
    "Output",
    "Model",
    "ModelList",
    "ModelMap",
    "ModelValue",
    "Block",
]
