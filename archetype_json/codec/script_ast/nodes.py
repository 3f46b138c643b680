"""
AST (Abstract Syntax Tree) node definitions for archetype scripts.

Nodes are immutable. Each concrete node class declares the attributes that
are legal for its kind; ``coerce_attributes`` rejects anything else.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar

from ..location import Location
from .expression import Expression
from .values import Value, value_type_name

VALUE_TYPES = (str, bool, tuple, type(None))


@dataclass(frozen=True)
class AttributeSpec:
    """Declaration of a node attribute."""

    name: str | None = None  # JSON name, defaults to the field name
    types: tuple[type, ...] = (str,)
    required: bool = False


def attribute(name: str | None = None, types: tuple[type, ...] = (str,), required: bool = False) -> Any:
    """Declare a node attribute field."""
    return field(default=None, metadata={"attribute": AttributeSpec(name, types, required)})


@dataclass(frozen=True, kw_only=True)
class Node:
    """Base class for all AST nodes."""

    KIND: ClassVar[str] = ""

    # Emit the children array even when empty
    ALWAYS_CHILDREN: ClassVar[bool] = False

    children: tuple[Node | Condition, ...] = ()

    # Source location (for error messages)
    location: Location | None = field(default=None, compare=False, repr=False)

    # Whether the source document held a children array; None for nodes built in code
    has_children: bool | None = field(default=None, compare=False, repr=False)

    @property
    def kind(self) -> str:
        return self.KIND

    @classmethod
    def attribute_specs(cls) -> list[tuple[str, str, AttributeSpec]]:
        """List the (JSON name, field name, spec) of every declared attribute."""
        specs = []
        for f in fields(cls):
            spec = f.metadata.get("attribute")
            if spec is not None:
                specs.append((spec.name or f.name, f.name, spec))
        return specs

    @classmethod
    def coerce_attributes(cls, kind: str, attributes: dict[str, Value]) -> dict[str, Any]:
        """Map element attributes to constructor fields.

        Raises:
            ValueError: If an attribute is illegal for the kind, has the wrong type, or is missing
        """
        specs = {name: (field_name, spec) for name, field_name, spec in cls.attribute_specs()}
        result = {}
        for name, value in attributes.items():
            if name not in specs:
                raise ValueError(f"Illegal attribute '{name}' for '{kind}'")
            field_name, spec = specs[name]
            if not isinstance(value, spec.types):
                expected = ", ".join(_TYPE_NAMES[t] for t in spec.types)
                raise ValueError(f"Attribute '{name}' of '{kind}' must be {expected}, got {value_type_name(value)}")
            result[field_name] = value
        for name, (field_name, spec) in specs.items():
            if spec.required and field_name not in result:
                raise ValueError(f"Missing required attribute '{name}' for '{kind}'")
        return result

    @classmethod
    def create(
        cls,
        kind: str,
        values: dict[str, Any],
        children: list[Node | Condition],
        location: Location | None = None,
        has_children: bool | None = None,
    ) -> Node:
        """Construct a node from coerced attributes."""
        return cls(children=tuple(children), location=location, has_children=has_children, **values)

    def attribute_values(self) -> dict[str, Value]:
        """Attributes to emit, in declaration order."""
        result = {}
        for name, field_name, spec in self.attribute_specs():
            value = getattr(self, field_name)
            if value is not None or spec.required:
                result[name] = value
        return result

    def keeps_empty_children(self) -> bool:
        """Whether an empty children array is written for this node."""
        return self.ALWAYS_CHILDREN if self.has_children is None else self.has_children


_TYPE_NAMES = {str: "string", bool: "boolean", tuple: "list", type(None): "null"}


@dataclass(frozen=True)
class Condition:
    """A node guarded by an expression.

    Written in documents as an ``if`` attribute on the guarded node.
    """

    expression: Expression
    then: Node

    @staticmethod
    def of(expression: str | Expression, then: Node) -> Condition:
        """Create a condition, parsing the expression text if needed."""
        if isinstance(expression, str):
            expression = Expression.parse(expression)
        return Condition(expression, then)


Child = Node | Condition


@dataclass(frozen=True, kw_only=True)
class Script(Node):
    """Root of a script document."""

    KIND: ClassVar[str] = "script"
    ALWAYS_CHILDREN: ClassVar[bool] = True


@dataclass(frozen=True, kw_only=True)
class Step(Node):
    """A step groups the inputs shown together."""

    KIND: ClassVar[str] = "step"
    ALWAYS_CHILDREN: ClassVar[bool] = True

    label: str | None = attribute()
    step_id: str | None = attribute("id")
    help: str | None = attribute()


@dataclass(frozen=True, kw_only=True)
class Method(Node):
    """A named, reusable sequence of statements."""

    KIND: ClassVar[str] = "method"
    ALWAYS_CHILDREN: ClassVar[bool] = True

    name: str = attribute(required=True)


@dataclass(frozen=True, kw_only=True)
class Methods(Node):
    """Table of methods, keyed by method name in documents."""

    KIND: ClassVar[str] = "methods"


@dataclass(frozen=True, kw_only=True)
class Invocation(Node):
    """Call of a method."""

    KIND: ClassVar[str] = "call"

    method: str = attribute(required=True)


@dataclass(frozen=True, kw_only=True)
class Inputs(Node):
    """Container of inputs."""

    KIND: ClassVar[str] = "inputs"
    ALWAYS_CHILDREN: ClassVar[bool] = True


@dataclass(frozen=True, kw_only=True)
class Input(Node):
    """Base class for inputs."""

    label: str | None = attribute()
    prompt: str | None = attribute()
    help: str | None = attribute()


@dataclass(frozen=True, kw_only=True)
class NamedInput(Input):
    """An input that declares a named value."""

    name: str = attribute(required=True)
    optional: bool | None = attribute(types=(bool,))
    is_global: bool | None = attribute("global", types=(bool,))


@dataclass(frozen=True, kw_only=True)
class BooleanInput(NamedInput):
    KIND: ClassVar[str] = "boolean"

    default: bool | None = attribute(types=(bool,))


@dataclass(frozen=True, kw_only=True)
class TextInput(NamedInput):
    KIND: ClassVar[str] = "text"

    default: str | None = attribute()
    placeholder: str | None = attribute()


@dataclass(frozen=True, kw_only=True)
class EnumInput(NamedInput):
    """Single choice among the options it contains."""

    KIND: ClassVar[str] = "enum"
    ALWAYS_CHILDREN: ClassVar[bool] = True

    default: str | None = attribute()


@dataclass(frozen=True, kw_only=True)
class ListInput(NamedInput):
    """Multiple choices among the options it contains."""

    KIND: ClassVar[str] = "list"
    ALWAYS_CHILDREN: ClassVar[bool] = True

    default: tuple[str, ...] | None = attribute(types=(tuple,))


@dataclass(frozen=True, kw_only=True)
class InputOption(Input):
    KIND: ClassVar[str] = "option"

    value: str = attribute(required=True)


@dataclass(frozen=True, kw_only=True)
class Presets(Node):
    """Container of presets."""

    KIND: ClassVar[str] = "presets"
    ALWAYS_CHILDREN: ClassVar[bool] = True


@dataclass(frozen=True, kw_only=True)
class Preset(Node):
    """Base class for presets, which pre-fill the input at ``path``."""

    path: str = attribute(required=True)


@dataclass(frozen=True, kw_only=True)
class BooleanPreset(Preset):
    KIND: ClassVar[str] = "boolean"

    value: bool = attribute(types=(bool,), required=True)


@dataclass(frozen=True, kw_only=True)
class TextPreset(Preset):
    KIND: ClassVar[str] = "text"

    value: str = attribute(required=True)


@dataclass(frozen=True, kw_only=True)
class EnumPreset(Preset):
    KIND: ClassVar[str] = "enum"

    value: str = attribute(required=True)


@dataclass(frozen=True, kw_only=True)
class ListPreset(Preset):
    KIND: ClassVar[str] = "list"

    value: tuple[str, ...] = attribute(types=(tuple,), required=True)


@dataclass(frozen=True, kw_only=True)
class PresetValue(Preset):
    """Untyped preset."""

    KIND: ClassVar[str] = "value"

    value: Value = attribute(types=VALUE_TYPES, required=True)


@dataclass(frozen=True, kw_only=True)
class Variables(Node):
    """Container of variables."""

    KIND: ClassVar[str] = "variables"
    ALWAYS_CHILDREN: ClassVar[bool] = True


@dataclass(frozen=True, kw_only=True)
class ScriptVariable(Node):
    """Base class for variables, which set the value at ``path`` without an input."""

    path: str = attribute(required=True)


@dataclass(frozen=True, kw_only=True)
class BooleanVariable(ScriptVariable):
    KIND: ClassVar[str] = "boolean"

    value: bool = attribute(types=(bool,), required=True)


@dataclass(frozen=True, kw_only=True)
class TextVariable(ScriptVariable):
    KIND: ClassVar[str] = "text"

    value: str = attribute(required=True)


@dataclass(frozen=True, kw_only=True)
class EnumVariable(ScriptVariable):
    KIND: ClassVar[str] = "enum"

    value: str = attribute(required=True)


@dataclass(frozen=True, kw_only=True)
class ListVariable(ScriptVariable):
    KIND: ClassVar[str] = "list"

    value: tuple[str, ...] = attribute(types=(tuple,), required=True)


@dataclass(frozen=True, kw_only=True)
class Output(Node):
    KIND: ClassVar[str] = "output"
    ALWAYS_CHILDREN: ClassVar[bool] = True


@dataclass(frozen=True, kw_only=True)
class Model(Node):
    """Template model contributed by an output."""

    KIND: ClassVar[str] = "model"
    ALWAYS_CHILDREN: ClassVar[bool] = True


@dataclass(frozen=True, kw_only=True)
class ModelList(Node):
    KIND: ClassVar[str] = "list"
    ALWAYS_CHILDREN: ClassVar[bool] = True

    key: str | None = attribute()
    order: str | None = attribute()


@dataclass(frozen=True, kw_only=True)
class ModelMap(Node):
    KIND: ClassVar[str] = "map"
    ALWAYS_CHILDREN: ClassVar[bool] = True

    key: str | None = attribute()
    order: str | None = attribute()


@dataclass(frozen=True, kw_only=True)
class ModelValue(Node):
    KIND: ClassVar[str] = "value"

    key: str | None = attribute()
    order: str | None = attribute()
    value: str | None = attribute()
    file: str | None = attribute()
    template: str | None = attribute()


@dataclass(frozen=True, kw_only=True)
class Block(Node):
    """Generic node for kinds without a dedicated class; accepts any attributes.

    Attributes are held as (name, value) pairs in document order.
    """

    name: str = ""
    attributes: tuple[tuple[str, Value], ...] = ()

    @property
    def kind(self) -> str:
        return self.name

    @classmethod
    def coerce_attributes(cls, kind: str, attributes: dict[str, Value]) -> dict[str, Any]:
        return {"attributes": tuple(attributes.items())}

    @classmethod
    def create(
        cls,
        kind: str,
        values: dict[str, Any],
        children: list[Node | Condition],
        location: Location | None = None,
        has_children: bool | None = None,
    ) -> Node:
        return cls(name=kind, children=tuple(children), location=location, has_children=has_children, **values)

    def attribute_values(self) -> dict[str, Value]:
        return dict(self.attributes)
