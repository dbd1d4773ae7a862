from .parser import is_chordpro, parse, parse_with_transpose
from .renderer import RenderOptions, render, render_into
from .transpose import transpose_chord

__all__ = [
    "RenderOptions",
    "is_chordpro",
    "parse",
    "parse_with_transpose",
    "render",
    "render_into",
    "transpose_chord",
]
