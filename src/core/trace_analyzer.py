"""Error-trace analysis and highlight rendering (core domain).

`analyze` runs every fixed matcher over the whole text and condenses the first
hit of each kind into a multi-line summary. `render_highlighted` turns the
match results back into ordered text segments for display.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

from core.trace_patterns import (
    MATCHERS,
    SUMMARY_TEMPLATES,
    UNKNOWN_FORMAT,
    WHITESPACE,
    MatcherSpec,
)


@dataclass(frozen=True)
class MatchRecord:
    """A single match of one matcher against the input text."""

    full_match: str
    groups: Tuple[str, ...]
    start: int
    end: int


@dataclass(frozen=True)
class MatcherResult:
    """A matcher paired with its matches in order of occurrence."""

    spec: MatcherSpec
    matches: Tuple[MatchRecord, ...]

    @property
    def label(self) -> str:
        return self.spec.label

    @property
    def color(self) -> str:
        return self.spec.color


@dataclass(frozen=True)
class HighlightSpan:
    start: int
    end: int
    label: str
    color: str


@dataclass(frozen=True)
class Segment:
    """One piece of rendered text; `color` is None for unhighlighted text."""

    text: str
    color: Optional[str] = None
    label: Optional[str] = None

    @property
    def styled(self) -> bool:
        return self.color is not None


class TraceAnalysis(NamedTuple):
    summary: str
    results: List[MatcherResult]


def find_all_matches(text: str, spec: MatcherSpec) -> MatcherResult:
    """Collect every non-overlapping match of one matcher, left to right."""

    records = [
        MatchRecord(
            full_match=match.group(0),
            groups=match.groups(default=""),
            start=match.start(),
            end=match.end(),
        )
        for match in spec.pattern.finditer(text)
    ]
    return MatcherResult(spec=spec, matches=tuple(records))


def _summary_line(result: MatcherResult) -> str:
    first = result.matches[0]
    template = SUMMARY_TEMPLATES.get(result.label)
    if template is None:
        return first.full_match
    return template.format(*first.groups)


def build_summary(text: str, results: Sequence[MatcherResult]) -> str:
    """Summarize the first match of each matcher, or fall back to the first line."""

    if results:
        return "\n".join(_summary_line(result) for result in results)
    first_line = text.split("\n")[0].strip(WHITESPACE)
    return first_line or UNKNOWN_FORMAT


def analyze(text: str, matchers: Iterable[MatcherSpec] = MATCHERS) -> TraceAnalysis:
    """Return the summary and the non-empty matcher results for `text`.

    Results keep matcher declaration order, not position in the text. Absence
    of matches is a normal outcome and yields the fallback summary.
    """

    text = text or ""
    results = [find_all_matches(text, spec) for spec in matchers]
    results = [result for result in results if result.matches]
    return TraceAnalysis(summary=build_summary(text, results), results=results)


def flatten_spans(results: Iterable[MatcherResult]) -> List[HighlightSpan]:
    """Pool every match into spans sorted by start offset.

    The sort is stable, so ties keep discovery order. Overlapping spans from
    different matchers are kept as-is.
    """

    spans = [
        HighlightSpan(start=record.start, end=record.end, label=result.label, color=result.color)
        for result in results
        for record in result.matches
    ]
    return sorted(spans, key=lambda span: span.start)


def render_highlighted(text: str, results: Sequence[MatcherResult]) -> List[Segment]:
    """Split `text` into plain and highlighted segments in start-offset order.

    A span that starts before the cursor (an overlap with the previous span)
    is still sliced in full, so overlapping matches re-emit characters and the
    segments no longer concatenate back to `text`.
    """

    text = text or ""
    if not text or not results:
        return [Segment(text)]

    segments: List[Segment] = []
    cursor = 0
    for span in flatten_spans(results):
        if span.start > cursor:
            segments.append(Segment(text[cursor : span.start]))
        segments.append(Segment(text[span.start : span.end], color=span.color, label=span.label))
        cursor = span.end

    if cursor < len(text):
        segments.append(Segment(text[cursor:]))
    return segments
