"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the project table, detail view, and settings
overlay. Deployment states each get a dedicated slot.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    bold: str
    dim: str
    reverse: str
    border: str
    title: str
    hint: str
    hint_key: str
    cursor: str
    selected: str
    query: str
    notice: str
    warning: str
    success: str
    state_ready: str
    state_building: str
    state_error: str
    state_queued: str
    state_canceled: str
    state_initializing: str
    placeholder: str
    loading: str
    link: str

    def paint(self, style: str, text: str) -> str:
        """Wrap ``text`` in ``style`` and a reset, or return it bare when unstyled."""
        if not style:
            return text
        return f"{style}{text}{self.reset}"


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    bold="\033[1m",
    dim="\033[2m",
    reverse="\033[7m",
    border="\033[38;5;244m",
    title="\033[1;38;5;81m",
    hint="\033[2;38;5;250m",
    hint_key="\033[38;5;229m",
    cursor="\033[36m",
    selected="\033[32m",
    query="\033[1;38;5;81m",
    notice="\033[34m",
    warning="\033[33m",
    success="\033[32m",
    state_ready="\033[32m",
    state_building="\033[33m",
    state_error="\033[31m",
    state_queued="\033[34m",
    state_canceled="\033[90m",
    state_initializing="\033[36m",
    placeholder="\033[90m",
    loading="\033[34m",
    link="\033[4;38;5;117m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    bold="\033[1m",
    dim="\033[2m",
    reverse="\033[7m",
    border="\033[2;38;5;31m",
    title="\033[1;38;5;45m",
    hint="\033[2;38;5;110m",
    hint_key="\033[38;5;153m",
    cursor="\033[38;5;45m",
    selected="\033[38;5;84m",
    query="\033[1;38;5;45m",
    notice="\033[38;5;39m",
    warning="\033[38;5;215m",
    success="\033[38;5;84m",
    state_ready="\033[38;5;84m",
    state_building="\033[38;5;221m",
    state_error="\033[38;5;203m",
    state_queued="\033[38;5;39m",
    state_canceled="\033[38;5;244m",
    state_initializing="\033[38;5;117m",
    placeholder="\033[38;5;244m",
    loading="\033[38;5;39m",
    link="\033[4;38;5;153m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    bold="",
    dim="",
    reverse="",
    border="",
    title="",
    hint="",
    hint_key="",
    cursor="",
    selected="",
    query="",
    notice="",
    warning="",
    success="",
    state_ready="",
    state_building="",
    state_error="",
    state_queued="",
    state_canceled="",
    state_initializing="",
    placeholder="",
    loading="",
    link="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if not candidate:
        return DEFAULT_THEME.name
    if candidate == PLAIN_THEME.name:
        return DEFAULT_THEME.name
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    normalized = normalize_theme_name(name)
    return _THEMES.get(normalized, DEFAULT_THEME)
