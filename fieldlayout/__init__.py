"""Typed C struct field offsets and field access over byte buffers."""

__version__ = "0.1.0"

__all__ = ["utils", "ctype", "access", "field_offset", "ext"]