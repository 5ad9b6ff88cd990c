"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AnalysisConfig:
    """Limits applied by the issue service around trace analysis."""

    trace_max_chars: int = 20000
    recent_logs_limit: int = 5


@dataclass(frozen=True)
class SharingConfig:
    """Public base URL used to build shareable links."""

    base_url: str = "http://localhost:5173"
