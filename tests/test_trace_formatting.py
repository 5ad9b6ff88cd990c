from __future__ import annotations

import pytest

from adapters.trace_formatting import (
    GAP_STYLE,
    format_highlighted,
    match_style,
    to_html,
    to_plain,
    to_rich_text,
)
from core.trace_analyzer import Segment

SEGMENTS = [
    Segment("see <here>: "),
    Segment("Missing module 'a&b'", color="purple", label="Missing Module"),
    Segment(" end"),
]


def test_rich_text_keeps_plain_text_and_styles_matches() -> None:
    text = to_rich_text(SEGMENTS)

    assert text.plain == "see <here>: Missing module 'a&b' end"
    styles = [(span.start, span.end, span.style) for span in text.spans]
    assert styles == [
        (0, 12, GAP_STYLE),
        (12, 32, match_style("purple")),
        (32, 36, GAP_STYLE),
    ]


def test_unknown_color_falls_back_to_gray() -> None:
    assert match_style("chartreuse") == match_style("gray")


def test_html_escapes_text_and_sets_label_title() -> None:
    rendered = to_html(SEGMENTS)

    assert rendered.startswith('<pre class="trace">')
    assert "see &lt;here&gt;: " in rendered
    assert (
        '<span class="trace-match trace-purple" title="Missing Module">'
        "Missing module &#x27;a&amp;b&#x27;</span>"
    ) in rendered


def test_plain_concatenates_segments() -> None:
    assert to_plain(SEGMENTS) == "see <here>: Missing module 'a&b' end"
    assert format_highlighted(SEGMENTS, "plain") == to_plain(SEGMENTS)


def test_unsupported_format_raises() -> None:
    with pytest.raises(ValueError):
        format_highlighted(SEGMENTS, "markdown")
