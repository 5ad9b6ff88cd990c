"""Highlighted-trace formatting helpers.

Keeping formatting here prevents drift between the CLI and the panel, and
keeps the color tags of the core matchers mapped in one place.
"""

from __future__ import annotations

import html
from typing import Iterable

from rich.text import Text

from core.trace_analyzer import Segment

# Color tag -> Rich style (dark text on a light tint of the same hue).
MATCH_STYLES = {
    "red": "bold #991b1b on #fee2e2",
    "orange": "bold #9a3412 on #ffedd5",
    "blue": "bold #1e40af on #dbeafe",
    "purple": "bold #6b21a8 on #f3e8ff",
    "teal": "bold #115e59 on #ccfbf1",
    "pink": "bold #9d174d on #fce7f3",
    "gray": "bold #1f2937 on #f3f4f6",
}
GAP_STYLE = "#9ca3af"


def match_style(color: str) -> str:
    return MATCH_STYLES.get(color, MATCH_STYLES["gray"])


def to_rich_text(segments: Iterable[Segment]) -> Text:
    """Assemble segments into a Rich Text with matches styled by color tag."""

    text = Text()
    for segment in segments:
        if segment.styled:
            text.append(segment.text, style=match_style(segment.color))
        else:
            text.append(segment.text, style=GAP_STYLE)
    return text


def to_html(segments: Iterable[Segment]) -> str:
    """Render segments as escaped HTML spans; the label becomes the title."""

    parts = []
    for segment in segments:
        body = html.escape(segment.text)
        if segment.styled:
            color = segment.color if segment.color in MATCH_STYLES else "gray"
            title = html.escape(segment.label or "", quote=True)
            parts.append(f'<span class="trace-match trace-{color}" title="{title}">{body}</span>')
        else:
            parts.append(f'<span class="trace-text">{body}</span>')
    return f'<pre class="trace">{"".join(parts)}</pre>'


def to_plain(segments: Iterable[Segment]) -> str:
    return "".join(segment.text for segment in segments)


def format_highlighted(segments: Iterable[Segment], mode: str):
    """Return the segments formatted for the requested mode."""

    if mode == "rich":
        return to_rich_text(segments)
    if mode == "html":
        return to_html(segments)
    if mode == "plain":
        return to_plain(segments)
    raise ValueError(f"Unsupported highlight format: {mode}")
