"""Synchronous key-driven state machine for the project list.

``ListController`` mutates a ``ListState`` in response to key tokens and
background data, and returns effect objects describing the I/O the driver
should perform. It never touches the terminal, the network, or the
clipboard itself.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Union

from ..api.models import ProjectDetails, ProjectRecord, Team
from ..cache import KNOWN_PREFIXES, TTLCache, project_details_key
from ..input.parser import REPLACEMENT_CHAR
from .filtering import filter_items, normalize_query
from .state import (
    DETAIL_ACTIONS,
    ActionKind,
    DetailEntry,
    DetailView,
    ListItem,
    ListResult,
    ListState,
    ListView,
    SettingsView,
)

DASHBOARD_URL = "https://vercel.com"


@dataclass(frozen=True)
class OpenUrl:
    url: str


@dataclass(frozen=True)
class CopyText:
    text: str


@dataclass(frozen=True)
class FetchDetails:
    ids: tuple[str, ...]


@dataclass(frozen=True)
class SaveSetting:
    key: str
    value: object


@dataclass(frozen=True)
class Resolve:
    result: ListResult


Effect = Union[OpenUrl, CopyText, FetchDetails, SaveSetting, Resolve]


def dashboard_url(scope_slug: str, project_name: str, suffix: str = "") -> str:
    """Dashboard URL for a project page, e.g. ``https://vercel.com/acme/web/logs``."""
    return f"{DASHBOARD_URL}/{scope_slug}/{project_name}{suffix}"


def _is_printable(key: str) -> bool:
    """Single printable character; undecodable input is not query text."""
    return len(key) == 1 and key.isprintable() and key != REPLACEMENT_CHAR


class ListController:
    """Owns list state for one invocation and resolves it exactly once."""

    def __init__(
        self,
        items: Sequence[ListItem],
        records: Sequence[ProjectRecord],
        page_size: int,
        format_record: Callable[[ProjectRecord], ListItem],
        scope_slug: str,
        cache: TTLCache,
        *,
        team_options: Sequence[Team] = (),
        current_team_id: str | None = None,
        icons: bool = False,
    ) -> None:
        self.state = ListState(
            items=list(items),
            baseline=list(items),
            records=list(records),
            page_size=max(1, page_size),
            icons=icons,
        )
        self.format_record = format_record
        self.scope_slug = scope_slug
        self.cache = cache
        self.team_options = tuple(team_options)
        self.current_team_id = current_team_id
        self.result: ListResult | None = None

    # Lifecycle -----------------------------------------------------------

    def start(self) -> list[Effect]:
        """Return the initial prefetch for the first visible page."""
        return self._prefetch_visible()

    def interrupt(self) -> list[Effect]:
        """Resolve with nothing selected and no action."""
        return self._resolve((), ActionKind.NONE)

    def _resolve(self, ids: Sequence[str], action: ActionKind) -> list[Effect]:
        """Record the result on first call; later calls return the same result."""
        if self.result is None:
            self.result = ListResult(selected_ids=tuple(ids), action=action)
        return [Resolve(self.result)]

    # Key dispatch --------------------------------------------------------

    def handle_key(self, key: str) -> list[Effect]:
        """Apply one key token to the active view and return resulting effects."""
        if self.result is not None:
            return []
        self.state.notice = ""
        if key == "CTRL_C":
            return self.interrupt()
        view = self.state.view
        if isinstance(view, DetailView):
            return self._handle_detail_key(key, view)
        if isinstance(view, SettingsView):
            return self._handle_settings_key(key)
        return self._handle_list_key(key)

    def _handle_list_key(self, key: str) -> list[Effect]:
        """Search, navigation, selection and resolving keys of the list view."""
        state = self.state
        if _is_printable(key):
            state.search_query += key
            return self._refilter()
        if key == "BACKSPACE":
            if not state.search_query:
                return []
            state.search_query = state.search_query[:-1]
            return self._refilter()
        if key in {"LEFT", "ESC"}:
            if not state.search_query:
                return []
            state.search_query = ""
            return self._refilter()
        if key == "UP":
            return self._move_cursor(-1)
        if key == "DOWN":
            return self._move_cursor(1)
        if key in {"HOME", "PAGE_UP"}:
            return self._move_page(-1)
        if key in {"END", "PAGE_DOWN"}:
            return self._move_page(1)
        if key == "ENTER":
            item = state.cursor_item
            if item is not None:
                self.toggle_selection(item.id)
            return []
        if key == "CTRL_A":
            self.invert_selection()
            return []
        if key == "CTRL_D":
            if not state.selection:
                state.notice = "Select projects with Enter before deleting."
                return []
            return self._resolve(self.selected_ids(), ActionKind.DELETE)
        if key == "CTRL_O":
            if state.selection:
                return self._resolve(self.selected_ids(), ActionKind.OPEN)
            item = state.cursor_item
            if item is None:
                return []
            return self._resolve((item.id,), ActionKind.OPEN)
        if key == "CTRL_R":
            for prefix in KNOWN_PREFIXES:
                self.cache.invalidate_prefix(prefix)
            return self._resolve((), ActionKind.REFRESH)
        if key == "CTRL_S":
            state.view = SettingsView()
            return []
        if key == "RIGHT":
            return self._open_detail()
        return []

    def _handle_detail_key(self, key: str, view: DetailView) -> list[Effect]:
        """Action cycling, open and copy keys of the detail view."""
        state = self.state
        if key in {"LEFT", "ESC"}:
            state.view = ListView()
            return []
        if key == "TAB":
            state.view = DetailView(view.target_id, (view.action_index + 1) % len(DETAIL_ACTIONS))
            return []
        if key == "SHIFT_TAB":
            state.view = DetailView(view.target_id, (view.action_index - 1) % len(DETAIL_ACTIONS))
            return []
        if key == "ENTER":
            url = self.detail_url()
            if url is None:
                return []
            state.notice = f"Opening {url}"
            return [OpenUrl(url)]
        if key == "c":
            url = self.detail_url()
            if url is None:
                return []
            state.notice = f"Copied {url}"
            return [CopyText(url)]
        if key == "CTRL_O":
            return self._resolve((view.target_id,), DETAIL_ACTIONS[view.action_index].kind)
        return []

    def _handle_settings_key(self, key: str) -> list[Effect]:
        """Team change and icon toggle keys of the settings overlay."""
        state = self.state
        if key == "ESC":
            state.view = ListView()
            return []
        if key == "t":
            return self._resolve((), ActionKind.CHANGE_TEAM)
        if key == "i":
            state.icons = not state.icons
            state.notice = f"Icons {'enabled' if state.icons else 'disabled'}"
            return [SaveSetting("icons", state.icons)]
        return []

    # Selection -----------------------------------------------------------

    def toggle_selection(self, item_id: str) -> None:
        """Add ``item_id`` to the selection, or remove it when already selected."""
        selection = self.state.selection
        if item_id in selection:
            selection.discard(item_id)
        else:
            selection.add(item_id)

    def invert_selection(self) -> None:
        """Flip membership of every displayed item; hidden selections are kept."""
        for item in self.state.items:
            self.toggle_selection(item.id)

    def selected_ids(self) -> tuple[str, ...]:
        """Selection in record order, then baseline order for ids without records."""
        state = self.state
        ordered: list[str] = []
        seen: set[str] = set()
        for item_id in [record.id for record in state.records] + [item.id for item in state.baseline]:
            if item_id in state.selection and item_id not in seen:
                ordered.append(item_id)
                seen.add(item_id)
        return tuple(ordered)

    # Cursor and paging ---------------------------------------------------

    def _move_cursor(self, delta: int) -> list[Effect]:
        """Move the cursor by ``delta`` rows, paging the window when it leaves it."""
        state = self.state
        if not state.items:
            return []
        state.cursor_index = max(0, min(len(state.items) - 1, state.cursor_index + delta))
        if state.cursor_index < state.page_start:
            state.page_start = max(0, state.page_start - state.page_size)
        elif state.cursor_index >= state.page_start + state.page_size:
            state.page_start = min(state.max_page_start, state.page_start + state.page_size)
        self._clamp_window()
        return self._prefetch_visible()

    def _move_page(self, direction: int) -> list[Effect]:
        """Move cursor and window one page back (``-1``) or forward (``1``)."""
        state = self.state
        if not state.items:
            return []
        step = direction * state.page_size
        state.cursor_index = max(0, min(len(state.items) - 1, state.cursor_index + step))
        state.page_start = max(0, min(state.max_page_start, state.page_start + step))
        self._clamp_window()
        return self._prefetch_visible()

    def _clamp_window(self) -> None:
        """Keep ``page_start <= cursor < page_start + page_size`` inside bounds."""
        state = self.state
        if not state.items:
            state.cursor_index = 0
            state.page_start = 0
            return
        state.cursor_index = max(0, min(len(state.items) - 1, state.cursor_index))
        if state.cursor_index < state.page_start:
            state.page_start = state.cursor_index
        elif state.cursor_index >= state.page_start + state.page_size:
            state.page_start = state.cursor_index - state.page_size + 1
        state.page_start = max(0, min(state.max_page_start, state.page_start))

    def _focused_id(self) -> str | None:
        """Id under the cursor, or ``None`` for an empty list."""
        item = self.state.cursor_item
        return item.id if item is not None else None

    def _index_of(self, item_id: str | None) -> int | None:
        """Position of ``item_id`` among displayed items."""
        if item_id is None:
            return None
        for index, item in enumerate(self.state.items):
            if item.id == item_id:
                return index
        return None

    # Filtering and background updates ------------------------------------

    def _refilter(self) -> list[Effect]:
        """Recompute displayed items from records for the current query."""
        state = self.state
        focused = self._focused_id()
        state.items = filter_items(state.baseline, state.records, state.search_query, self.format_record)
        index = self._index_of(focused)
        state.cursor_index = index if index is not None else 0
        if index is None:
            state.page_start = 0
        self._clamp_window()
        return self._prefetch_visible()

    def apply_update(
        self,
        items: Sequence[ListItem],
        records: Sequence[ProjectRecord] | None = None,
    ) -> list[Effect]:
        """Replace displayed items unless a search query is active.

        ``records`` are always refreshed so the next keystroke searches the
        newest data.
        """
        state = self.state
        if records is not None:
            state.records = list(records)
        if normalize_query(state.search_query):
            return []
        focused = self._focused_id()
        state.baseline = list(items)
        state.items = list(items)
        index = self._index_of(focused)
        if index is not None:
            state.cursor_index = index
        self._clamp_window()
        return self._prefetch_visible()

    # Detail view and prefetch --------------------------------------------

    def _open_detail(self) -> list[Effect]:
        """Enter the detail view for the cursor item, fetching details unless known."""
        state = self.state
        item = state.cursor_item
        if item is None:
            return []
        state.view = DetailView(item.id, 0)
        if self.cache.get(project_details_key(item.id)) is not None or item.id in state.in_flight:
            return []
        state.details[item.id] = DetailEntry(loading=True)
        state.in_flight.add(item.id)
        return [FetchDetails((item.id,))]

    def _prefetch_visible(self) -> list[Effect]:
        """Request details for newly visible ids that are neither cached nor in flight."""
        state = self.state
        visible = tuple(item.id for item in state.visible_items)
        if visible == state.prefetched_ids:
            return []
        state.prefetched_ids = visible
        pending = tuple(
            item_id
            for item_id in visible
            if item_id not in state.in_flight and self.cache.get(project_details_key(item_id)) is None
        )
        if not pending:
            return []
        for item_id in pending:
            state.in_flight.add(item_id)
            state.details[item_id] = DetailEntry(loading=True)
        return [FetchDetails(pending)]

    def apply_detail_result(self, item_id: str, details: ProjectDetails | None) -> None:
        """Record a finished detail fetch; ``None`` marks a failed fetch."""
        state = self.state
        state.in_flight.discard(item_id)
        if details is None:
            state.details[item_id] = DetailEntry()
            return
        self.cache.set(project_details_key(item_id), details)
        state.details[item_id] = DetailEntry(
            domains=tuple(details.domains),
            commit_message=details.commit_message,
        )

    def detail_entry(self, item_id: str) -> DetailEntry:
        """Cached details first, then the last fetch result, then a loading placeholder."""
        cached = self.cache.get(project_details_key(item_id))
        if isinstance(cached, ProjectDetails):
            return DetailEntry(domains=tuple(cached.domains), commit_message=cached.commit_message)
        entry = self.state.details.get(item_id)
        if entry is not None:
            return entry
        return DetailEntry(loading=item_id in self.state.in_flight)

    def project_name(self, item_id: str) -> str:
        """Project name used in dashboard URLs for ``item_id``."""
        record = self.state.record_for(item_id)
        if record is not None:
            return record.name
        item = self.state.item_for(item_id)
        return item.source_key if item is not None else item_id

    def detail_url(self) -> str | None:
        """URL of the selected detail action, or ``None`` outside the detail view."""
        view = self.state.view
        if not isinstance(view, DetailView):
            return None
        action = DETAIL_ACTIONS[view.action_index]
        return dashboard_url(self.scope_slug, self.project_name(view.target_id), action.url_suffix)

    def current_team_name(self) -> str:
        """Display name of the active scope."""
        for team in self.team_options:
            if team.id == self.current_team_id:
                return team.name
        return "Personal"
