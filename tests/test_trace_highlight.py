from __future__ import annotations

from core.trace_analyzer import (
    MatcherResult,
    MatchRecord,
    Segment,
    analyze,
    flatten_spans,
    render_highlighted,
)
from core.trace_patterns import MISSING_MODULE, TYPE_ERROR


def _concat(segments: list[Segment]) -> str:
    return "".join(segment.text for segment in segments)


def test_empty_text_renders_single_unstyled_segment() -> None:
    assert render_highlighted("", []) == [Segment("")]


def test_no_results_renders_whole_text_unstyled() -> None:
    text = "nothing to see\nhere"
    assert render_highlighted(text, []) == [Segment(text)]


def test_gaps_matches_and_tail_in_order() -> None:
    text = "prefix\nError: boom at src/a.js:1:2\nsuffix"
    _, results = analyze(text)
    segments = render_highlighted(text, results)

    assert segments == [
        Segment("prefix\n"),
        Segment("Error: boom at src/a.js:1:2", color="red", label="Error Location"),
        Segment("\nsuffix"),
    ]
    assert _concat(segments) == text


def test_round_trip_across_matchers_sorted_by_position() -> None:
    text = (
        "Type 'string' is not assignable to type 'number'\n"
        "then Cannot find module 'lodash' here"
    )
    _, results = analyze(text)
    segments = render_highlighted(text, results)

    assert _concat(segments) == text
    assert [segment.label for segment in segments if segment.styled] == [
        "Type Error",
        "Missing Module",
    ]


def test_overlapping_matches_are_sliced_in_full() -> None:
    text = "Error: boom at foo (src/a.js:1:2)"
    _, results = analyze(text)
    segments = render_highlighted(text, results)

    assert segments == [
        Segment("Error: boom at foo (src/a.js:1:2", color="red", label="Error Location"),
        Segment("at foo (src/a.js:1:2)", color="orange", label="Stack Entry"),
    ]
    # Overlap re-emits characters, so the round trip no longer holds.
    assert _concat(segments) != text


def test_flatten_spans_is_stable_for_equal_starts() -> None:
    missing = MatcherResult(
        spec=MISSING_MODULE,
        matches=(MatchRecord("x", ("x",), 5, 6), MatchRecord("y", ("y",), 1, 2)),
    )
    type_error = MatcherResult(spec=TYPE_ERROR, matches=(MatchRecord("z", ("z",), 5, 7),))

    spans = flatten_spans([missing, type_error])

    assert [(span.start, span.label) for span in spans] == [
        (1, "Missing Module"),
        (5, "Missing Module"),
        (5, "Type Error"),
    ]
