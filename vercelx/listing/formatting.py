"""Pure formatting of project rows for the list table.

Each row is a fixed-column string: name, created, updated, last deploy and
deploy creator. Styling comes from the active ``UITheme``.
"""

from __future__ import annotations

import time

from ..ansi import fit_ansi, pad_ansi
from ..api.models import Creator, ProjectRecord
from ..ui_theme import UITheme
from .state import ListItem

NAME_WIDTH = 35
CREATED_WIDTH = 10
UPDATED_WIDTH = 10
DEPLOY_WIDTH = 20
CREATOR_WIDTH = 15

LOADING_LABEL = "⋯ loading"
NEVER_DEPLOYED_LABEL = "never deployed"
UNKNOWN_CREATOR = "unknown"

_RELATIVE_UNITS: tuple[tuple[int, str], ...] = (
    (31_536_000, "y"),
    (2_592_000, "mo"),
    (604_800, "w"),
    (86_400, "d"),
    (3_600, "h"),
    (60, "m"),
)


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def format_relative_time(timestamp_ms: int, now: int | None = None) -> str:
    """Render ``timestamp_ms`` as ``2d ago``/``3h ago``; under a minute is ``just now``."""
    current = now_ms() if now is None else now
    seconds = (current - timestamp_ms) // 1000
    for unit_seconds, suffix in _RELATIVE_UNITS:
        count = seconds // unit_seconds
        if count > 0:
            return f"{count}{suffix} ago"
    return "just now"


def format_deployment_state(state: str | None, theme: UITheme) -> str:
    """Colored lower-case state label; unknown states pass through verbatim."""
    if not state:
        return theme.paint(theme.placeholder, "never")
    styles = {
        "READY": theme.state_ready,
        "BUILDING": theme.state_building,
        "ERROR": theme.state_error,
        "QUEUED": theme.state_queued,
        "CANCELED": theme.state_canceled,
        "INITIALIZING": theme.state_initializing,
    }
    style = styles.get(state)
    if style is None:
        return state
    return theme.paint(style, state.lower())


def creator_label(creator: Creator | None) -> str:
    """Username, else email, else uid, else ``unknown``."""
    if creator is None:
        return UNKNOWN_CREATOR
    return creator.username or creator.email or creator.uid or UNKNOWN_CREATOR


def format_deployment_cell(record: ProjectRecord, theme: UITheme, now: int | None = None) -> str:
    """Last-deploy column: loading marker, ``never deployed`` or ``<age> (<state>)``."""
    if record.deployment_loading:
        return theme.paint(theme.loading, LOADING_LABEL)
    deployment = record.last_deployment
    if deployment is None:
        return theme.paint(theme.placeholder, NEVER_DEPLOYED_LABEL)
    age = format_relative_time(deployment.created_at, now)
    return f"{age} ({format_deployment_state(deployment.state, theme)})"


def format_creator_cell(record: ProjectRecord, theme: UITheme) -> str:
    """Creator column of the latest deployment."""
    if record.deployment_loading:
        return theme.paint(theme.loading, "⋯")
    if record.last_deployment is None:
        return theme.paint(theme.placeholder, UNKNOWN_CREATOR)
    return creator_label(record.last_deployment.creator)


def _cell(text: str, width: int) -> str:
    """Fit ``text`` into a column, keeping one trailing space as separator."""
    return pad_ansi(fit_ansi(text, width - 1), width)


def format_project_row(record: ProjectRecord, theme: UITheme, now: int | None = None) -> str:
    """One fixed-width table row for ``record``."""
    return "".join(
        [
            _cell(record.name, NAME_WIDTH),
            _cell(format_relative_time(record.created_at, now), CREATED_WIDTH),
            _cell(format_relative_time(record.updated_at, now), UPDATED_WIDTH),
            _cell(format_deployment_cell(record, theme, now), DEPLOY_WIDTH),
            _cell(format_creator_cell(record, theme), CREATOR_WIDTH),
        ]
    ).rstrip()


def column_header(theme: UITheme) -> str:
    """Header line aligned with ``format_project_row`` columns."""
    text = (
        "Name".ljust(NAME_WIDTH)
        + "Created".ljust(CREATED_WIDTH)
        + "Updated".ljust(UPDATED_WIDTH)
        + "Last Deploy".ljust(DEPLOY_WIDTH)
        + "Deploy Creator".ljust(CREATOR_WIDTH)
    )
    return theme.paint(theme.hint, text.rstrip())


def project_item(record: ProjectRecord, theme: UITheme, now: int | None = None) -> ListItem:
    """Build the selectable ``ListItem`` for ``record``."""
    return ListItem(
        id=record.id,
        display_text=format_project_row(record, theme, now),
        source_key=record.name,
    )
