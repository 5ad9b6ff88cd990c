"""Analyze tab: paste a trace, see its summary and highlighted matches."""

from __future__ import annotations

from rich.text import Text
from textual import on
from textual.containers import Container, Horizontal, VerticalScroll
from textual.widgets import Button, Static, TextArea

from adapters.trace_formatting import to_rich_text
from core.trace_analyzer import render_highlighted


class AnalyzeTab(Container):
    def compose(self):
        with VerticalScroll(id="analyze-panel"):
            yield Static("Error trace", classes="form-label")
            yield TextArea(id="analyze-input", placeholder="Paste an error trace or log")
            with Horizontal(id="analyze-actions"):
                yield Button("Analyze", id="analyze-run", variant="primary")
                yield Button("Clear", id="analyze-clear")
            yield Static("Summary", id="analyze-summary-title")
            yield Static("", id="analyze-summary")
            yield Static("", id="analyze-legend", classes="subtle")
            yield Static("", id="analyze-output")

    def on_mount(self) -> None:
        self.query_one("#analyze-actions").styles.height = 3

    @on(Button.Pressed, "#analyze-run")
    def _on_analyze(self) -> None:
        text = self.query_one("#analyze-input", TextArea).text
        analysis = self.app.services.issues.analyze_trace(text)
        legend = "  ".join(f"{result.label}: {len(result.matches)}" for result in analysis.results)
        self.query_one("#analyze-summary", Static).update(Text(analysis.summary))
        self.query_one("#analyze-legend", Static).update(legend or "no known error format found")
        self.query_one("#analyze-output", Static).update(
            to_rich_text(render_highlighted(text, analysis.results))
        )

    @on(Button.Pressed, "#analyze-clear")
    def _on_clear(self) -> None:
        self.query_one("#analyze-input", TextArea).text = ""
        for widget_id in ("#analyze-summary", "#analyze-legend", "#analyze-output"):
            self.query_one(widget_id, Static).update("")
