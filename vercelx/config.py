"""Persistent JSON config helpers.

Stores page size, UI theme, Nerd Font icon preference, and the last used
team scope. All access is defensive: malformed or missing config falls back
to defaults.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "vercelx"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_PAGE_SIZE = 10
PERSONAL_SCOPE = "personal"
NERD_FONT_TERMINALS = ("wezterm", "kitty", "alacritty")


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored so an unwritable config
    directory never breaks a session.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def save_setting(key: str, value: object) -> None:
    config = load_config()
    config[key] = value
    save_config(config)


def load_page_size() -> int:
    """Return persisted page size; booleans and non-positive values fall back."""
    value = load_config().get("page_size")
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return DEFAULT_PAGE_SIZE
    return value


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    value = load_config().get("theme")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def load_icons() -> bool | None:
    """Return the persisted icon preference, or ``None`` when never chosen."""
    value = load_config().get("icons")
    return value if isinstance(value, bool) else None


def load_last_team_id() -> str | None:
    """Return the last chosen team id; ``PERSONAL_SCOPE`` marks the personal account."""
    value = load_config().get("last_team_id")
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def save_last_team_id(team_id: str | None) -> None:
    save_setting("last_team_id", team_id if team_id else PERSONAL_SCOPE)


def detect_nerd_font(environ: dict[str, str] | None = None) -> bool:
    """Guess whether the terminal font has Nerd Font glyphs.

    ``NERD_FONTS=1``/``0`` is an explicit override. Otherwise a known
    Nerd-Font-friendly ``TERM_PROGRAM`` or a non-empty ``NERD_FONT`` enables
    icons.
    """
    env = os.environ if environ is None else environ
    explicit = env.get("NERD_FONTS")
    if explicit == "1":
        return True
    if explicit == "0":
        return False
    term_program = env.get("TERM_PROGRAM", "").lower()
    if any(name in term_program for name in NERD_FONT_TERMINALS):
        return True
    return bool(env.get("NERD_FONT"))


def resolve_icons(flag: bool | None, environ: dict[str, str] | None = None) -> bool:
    """CLI flag first, then the persisted preference, then auto-detection."""
    if flag is not None:
        return flag
    persisted = load_icons()
    if persisted is not None:
        return persisted
    return detect_nerd_font(environ)
