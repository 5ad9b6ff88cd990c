"""Static configuration for tracescope.

All user-editable settings (database, sharing, analysis limits, logging) live
in a single JSON file for quick edits without touching Python.
"""

import json
import os

from dotenv import load_dotenv

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.environ.get("TRACESCOPE_CONFIG") or os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Where to store the SQLite database.
_database = _CONFIG.get("database", {})
DB_PATH = _resolve_path(_database.get("path", "tracescope.db"))

# Public origin used when building shareable links.
_sharing = _CONFIG.get("sharing", {})
SHARE_BASE_URL = _sharing.get("base_url", "http://localhost:5173")

# Traces longer than this are clipped before analysis; the stored trace is not.
_analysis = _CONFIG.get("analysis", {})
TRACE_MAX_CHARS = int(_analysis.get("trace_max_chars", 20000))
RECENT_LOGS_LIMIT = int(_analysis.get("recent_logs_limit", 5))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})


def current_user_id() -> str:
    """Return the acting user id from the environment (.env supported)."""

    load_dotenv()
    return os.getenv("TRACESCOPE_USER_ID", "local")
