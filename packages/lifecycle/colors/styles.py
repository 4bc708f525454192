"""rich styling helpers for registry colors."""

from __future__ import annotations

from rich.color import ColorParseError
from rich.style import Style
from rich.text import Text


def style_for(color: str) -> Style:
    """Return a foreground style for a hex or named color.

    An empty or unparseable color yields the null style.
    """
    if not color:
        return Style.null()
    try:
        return Style(color=color)
    except ColorParseError:
        return Style.null()


def format_with_color(text: str, color: str) -> Text:
    """Return ``text`` as rich ``Text`` colored with ``color`` when set."""
    return Text(text, style=style_for(color))
