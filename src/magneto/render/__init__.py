"""Render module - terminal table output."""

from __future__ import annotations

from magneto.render.formatting import bytes_size, format_percent, human_size
from magneto.render.renderer import Renderer, build_table, format_row

__all__ = ["Renderer", "build_table", "bytes_size", "format_percent", "format_row", "human_size"]
