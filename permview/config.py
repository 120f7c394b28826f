"""Persistent JSON config helpers.

Stores the selected theme and the chrome margin.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

from .navigator import DEFAULT_MARGIN

APP_NAME = "permview"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON; write errors are ignored."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def load_theme_name() -> str | None:
    """Load persisted theme name, returning ``None`` when unset/invalid."""
    value = load_config().get("theme")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def save_theme_name(theme_name: str) -> None:
    stripped = str(theme_name).strip()
    if not stripped:
        return
    config = load_config()
    config["theme"] = stripped
    save_config(config)


def load_margin() -> int:
    """Return the persisted chrome margin.

    Booleans, non-integers and values too small for the header and footer
    fall back to the default.
    """
    value = load_config().get("margin")
    if isinstance(value, bool) or not isinstance(value, int) or value < DEFAULT_MARGIN:
        return DEFAULT_MARGIN
    return value
