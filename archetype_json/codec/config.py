"""
Configuration for the script codec.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class CodecConfig:
    """Configuration options for reading and writing script documents."""

    # Key holding the node kind
    name_key: str = "kind"

    # Key holding the ordered array of child nodes
    children_key: str = "children"

    # Keys holding dictionaries of named sub-nodes
    object_keys: list[str] = field(default_factory=lambda: ["methods", "expressions"])

    # Attribute referencing an expression id
    condition_key: str = "if"

    # Prefix for expression ids assigned while writing
    expression_id_prefix: str = "e"

    # Indentation used by the pretty-printed serialization
    indent: int = 2

    # Log a warning for token lists that do not form a sound expression
    validate_expressions: bool = True

    # Require the document root to be a script
    strict_root: bool = True

    @staticmethod
    def from_dict(d: dict) -> CodecConfig:
        """Create a config from a dictionary."""
        config = CodecConfig()
        for k, v in d.items():
            if k == "object_keys":
                config.object_keys = list(v)
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "name_key": self.name_key,
            "children_key": self.children_key,
            "object_keys": list(self.object_keys),
            "condition_key": self.condition_key,
            "expression_id_prefix": self.expression_id_prefix,
            "indent": self.indent,
            "validate_expressions": self.validate_expressions,
            "strict_root": self.strict_root,
        }
