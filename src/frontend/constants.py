"""Shared constants for the Textual UI."""

from __future__ import annotations

ACCENT = "#38BDF8"
