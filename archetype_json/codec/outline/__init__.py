"""
Outline module.

Renders human-readable outlines of script trees.
"""

from __future__ import annotations

from .renderer import OutlineLine, OutlineRenderer, outline_lines, render_outline

__all__ = ["OutlineLine", "OutlineRenderer", "outline_lines", "render_outline"]
