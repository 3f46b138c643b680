"""
Source locations reported with codec errors.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    """A position in the JSON input (1-based line, column of the last consumed character)."""

    line: int = 1
    column: int = 0

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"
