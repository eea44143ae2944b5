"""Frame building for the list, detail and settings views.

Every view renders into a bordered box ``TABLE_WIDTH`` columns wide using
``+`` corners, ``─`` horizontals and ``│`` sides. Functions here only build
strings; ``ScreenRenderer`` writes them.
"""

from __future__ import annotations

from ..ansi import pad_ansi
from ..api.models import Domain
from ..ui_theme import UITheme
from .controller import ListController
from .formatting import column_header, creator_label, format_deployment_state, format_relative_time
from .state import DETAIL_ACTIONS, DetailView, SettingsView

TABLE_WIDTH = 100

BOX_CORNER = "+"
BOX_HORIZONTAL = "─"
BOX_VERTICAL = "│"

CURSOR_INDICATOR = "→"
UNSELECTED_INDICATOR = "△"
SELECTED_INDICATOR = "▲"

ICONS = {
    "project": "\uf413",
    "settings": "\uf013",
    "browser": "\uf0ac",
    "deployments": "\uf0e8",
    "logs": "\uf15c",
    "search": "\uf002",
    "refresh": "\uf021",
    "delete": "\uf1f8",
}

_ACTION_ICONS = ("browser", "settings", "deployments", "logs")

LIST_HINTS = (
    ("↑↓", "move"),
    ("→", "details"),
    ("enter", "select"),
    ("^A", "invert"),
    ("^O", "open"),
    ("^D", "delete"),
    ("^R", "refresh"),
    ("^S", "settings"),
    ("^C", "quit"),
)
DETAIL_HINTS = (
    ("tab", "next action"),
    ("shift-tab", "prev action"),
    ("enter", "open"),
    ("c", "copy url"),
    ("^O", "open & close"),
    ("←/esc", "back"),
)
SETTINGS_HINTS = (
    ("t", "change team"),
    ("i", "toggle icons"),
    ("esc", "back"),
)


def border_line(theme: UITheme, width: int = TABLE_WIDTH) -> str:
    """Horizontal table border with ``+`` corners."""
    return theme.paint(theme.border, BOX_CORNER + BOX_HORIZONTAL * (width - 2) + BOX_CORNER)


def bordered_row(content: str, theme: UITheme, width: int = TABLE_WIDTH) -> str:
    """Wrap ``content`` in side borders, padding or clipping to ``width``."""
    side = theme.paint(theme.border, BOX_VERTICAL)
    return f"{side}{pad_ansi(content, width - 2)}{side}"


def hint_line(hints: tuple[tuple[str, str], ...], theme: UITheme) -> str:
    """Key hint footer such as ``^O open  ^S settings``."""
    parts = [f"{theme.paint(theme.hint_key, key)} {theme.paint(theme.hint, label)}" for key, label in hints]
    return "  ".join(parts)


def _icon(name: str, enabled: bool) -> str:
    return f"{ICONS[name]} " if enabled else ""


def render_lines(controller: ListController, theme: UITheme) -> list[str]:
    """Return the full frame for the controller's current view."""
    view = controller.state.view
    if isinstance(view, DetailView):
        lines = render_detail(controller, view, theme)
        hints = DETAIL_HINTS
    elif isinstance(view, SettingsView):
        lines = render_settings(controller, theme)
        hints = SETTINGS_HINTS
    else:
        lines = render_list(controller, theme)
        hints = LIST_HINTS
    lines.append(hint_line(hints, theme))
    notice = controller.state.notice
    if notice:
        lines.append(theme.paint(theme.notice, notice))
    return lines


def render_list(controller: ListController, theme: UITheme) -> list[str]:
    """Title, query line, header, current page of rows and footer."""
    state = controller.state
    icons = state.icons
    total = len(state.baseline)
    count_label = f"({total} project" + ("" if total == 1 else "s") + ")"
    title = (
        f"{_icon('project', icons)}{theme.paint(theme.title, 'Projects')}"
        f" {theme.paint(theme.dim, '·')} {controller.current_team_name()}"
        f" {theme.paint(theme.hint, count_label)}"
    )

    lines = [border_line(theme), bordered_row(f" {title}", theme)]
    if state.search_query:
        matches = len(state.items)
        match_label = f"({matches} match" + ("" if matches == 1 else "es") + ")"
        search = (
            f" {_icon('search', icons)}Search: {theme.paint(theme.query, state.search_query)}"
            f"{theme.paint(theme.reverse, ' ')} "
            f"{theme.paint(theme.notice, match_label)}"
        )
    else:
        search = f" {_icon('search', icons)}{theme.paint(theme.placeholder, 'Type to search by name, creator, or state')}"
    lines.append(bordered_row(search, theme))
    lines.append(border_line(theme))
    lines.append(bordered_row("     " + column_header(theme), theme))
    lines.append(border_line(theme))

    visible = state.visible_items
    if not state.items:
        empty = "No projects match your search." if state.search_query else "No projects found."
        lines.append(bordered_row(" " + theme.paint(theme.warning, empty), theme))
        padding = state.page_size - 1
    else:
        for offset, item in enumerate(visible):
            index = state.page_start + offset
            is_cursor = index == state.cursor_index
            is_selected = item.id in state.selection
            cursor_mark = theme.paint(theme.cursor, CURSOR_INDICATOR) if is_cursor else " "
            select_mark = (
                theme.paint(theme.selected, SELECTED_INDICATOR) if is_selected else UNSELECTED_INDICATOR
            )
            text = theme.paint(theme.bold, item.display_text) if is_cursor else item.display_text
            lines.append(bordered_row(f" {cursor_mark} {select_mark} {text}", theme))
        padding = state.page_size - len(visible)
    lines.extend(bordered_row("", theme) for _ in range(max(0, padding)))

    lines.append(border_line(theme))
    footer_parts: list[str] = []
    if state.items:
        page = state.page_start // state.page_size + 1
        pages = (len(state.items) + state.page_size - 1) // state.page_size
        footer_parts.append(theme.paint(theme.hint, f"Page {page} of {pages}"))
    if state.selection:
        footer_parts.append(theme.paint(theme.success, f"{len(state.selection)} selected"))
    loading = sum(1 for record in state.records if record.deployment_loading)
    if loading:
        footer_parts.append(theme.paint(theme.loading, f"⋯ loading deployments ({loading} left)"))
    lines.append(bordered_row(" " + f" {theme.paint(theme.dim, '·')} ".join(footer_parts), theme))
    lines.append(border_line(theme))
    return lines


def format_domain(domain: Domain, theme: UITheme) -> str:
    """One domain line with its verification mark."""
    mark = theme.paint(theme.success, "✓") if domain.verified else theme.paint(theme.warning, "⚠")
    text = f"  {mark} {theme.paint(theme.bold, domain.name)}"
    if domain.redirect:
        text += theme.paint(theme.hint, f" → {domain.redirect}")
    if not domain.verified:
        text += theme.paint(theme.warning, " (Unverified)")
    if domain.is_production:
        badge = theme.paint(theme.notice, "Production")
    else:
        badge = theme.paint(theme.hint, f"Preview ({domain.git_branch})")
    return f"{text} ({badge})"


def render_detail(controller: ListController, view: DetailView, theme: UITheme) -> list[str]:
    """Detail panel for ``view.target_id`` with domains, commit and action tabs."""
    state = controller.state
    icons = state.icons
    record = state.record_for(view.target_id)
    name = controller.project_name(view.target_id)
    entry = controller.detail_entry(view.target_id)

    lines = [border_line(theme)]
    lines.append(bordered_row(f" {_icon('project', icons)}{theme.paint(theme.title, name)}", theme))
    lines.append(border_line(theme))

    link = record.link if record is not None else None
    if link is not None and link.full_name:
        branch = link.production_branch or "main"
        git = f"{theme.paint(theme.link, link.full_name)} {theme.paint(theme.hint, f'({branch} branch)')}"
    else:
        git = theme.paint(theme.placeholder, "Not connected")
    lines.append(bordered_row(f" Git: {git}", theme))

    deployment = record.last_deployment if record is not None else None
    if record is not None and record.deployment_loading:
        deploy = theme.paint(theme.loading, "⋯ loading")
    elif deployment is None:
        deploy = theme.paint(theme.placeholder, "never deployed")
    else:
        deploy = (
            f"{format_relative_time(deployment.created_at)} ({format_deployment_state(deployment.state, theme)})"
            f" by {creator_label(deployment.creator)}"
        )
    lines.append(bordered_row(f" Last deploy: {deploy}", theme))

    if entry.loading:
        commit = theme.paint(theme.loading, "⋯ loading")
    else:
        commit = entry.commit_message.splitlines()[0] if entry.commit_message else theme.paint(theme.placeholder, "-")
    lines.append(bordered_row(f" Commit: {commit}", theme))
    lines.append(bordered_row("", theme))

    lines.append(bordered_row(f" {theme.paint(theme.bold, 'Domains')}", theme))
    if entry.loading:
        lines.append(bordered_row("  " + theme.paint(theme.loading, "⋯ loading domains"), theme))
    elif not entry.domains:
        lines.append(bordered_row("  " + theme.paint(theme.placeholder, "No domains configured"), theme))
    else:
        lines.extend(bordered_row(format_domain(domain, theme), theme) for domain in entry.domains)
    lines.append(bordered_row("", theme))

    lines.append(bordered_row(f" {theme.paint(theme.bold, 'Actions')}", theme))
    labels: list[str] = []
    for index, action in enumerate(DETAIL_ACTIONS):
        label = f"{_icon(_ACTION_ICONS[index], icons)}{action.label}"
        if index == view.action_index:
            labels.append(theme.paint(theme.reverse, f" {label} ") if theme.reverse else f"[{label}]")
        else:
            labels.append(f" {label} ")
    lines.append(bordered_row("  " + " ".join(labels), theme))
    url = controller.detail_url() or ""
    lines.append(bordered_row("  " + theme.paint(theme.link, url), theme))
    lines.append(border_line(theme))
    return lines


def render_settings(controller: ListController, theme: UITheme) -> list[str]:
    """Settings overlay listing scope and icon options."""
    state = controller.state
    lines = [border_line(theme)]
    lines.append(bordered_row(f" {_icon('settings', state.icons)}{theme.paint(theme.title, 'Settings')}", theme))
    lines.append(border_line(theme))
    lines.append(
        bordered_row(
            f" Team: {theme.paint(theme.bold, controller.current_team_name())}"
            f"  {theme.paint(theme.hint, f'({len(controller.team_options)} team(s) available)')}",
            theme,
        )
    )
    icons_label = theme.paint(theme.success, "on") if state.icons else theme.paint(theme.placeholder, "off")
    lines.append(bordered_row(f" Nerd Font icons: {icons_label}", theme))
    lines.append(bordered_row(f" Page size: {state.page_size}", theme))
    lines.append(border_line(theme))
    return lines
