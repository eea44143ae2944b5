"""State containers for the interactive project list.

``ListState`` is the single mutable object a ``ListController`` owns for
one invocation. The active view is a tagged union of frozen dataclasses so
detail-only fields cannot exist outside the detail view.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from ..api.models import Domain, ProjectRecord


@dataclass(frozen=True)
class ListItem:
    """One selectable row; ``source_key`` is the project name."""

    id: str
    display_text: str
    source_key: str


class ActionKind(Enum):
    OPEN = "open"
    OPEN_SETTINGS = "open-settings"
    OPEN_DEPLOYMENTS = "open-deployments"
    OPEN_LOGS = "open-logs"
    DELETE = "delete"
    CHANGE_TEAM = "change-team"
    REFRESH = "refresh"
    NONE = "none"


@dataclass(frozen=True)
class ListResult:
    selected_ids: tuple[str, ...]
    action: ActionKind


@dataclass(frozen=True)
class DetailAction:
    label: str
    url_suffix: str
    kind: ActionKind


DETAIL_ACTIONS: tuple[DetailAction, ...] = (
    DetailAction("Open project", "", ActionKind.OPEN),
    DetailAction("Settings", "/settings", ActionKind.OPEN_SETTINGS),
    DetailAction("Deployments", "/deployments", ActionKind.OPEN_DEPLOYMENTS),
    DetailAction("Logs", "/logs", ActionKind.OPEN_LOGS),
)


@dataclass(frozen=True)
class ListView:
    pass


@dataclass(frozen=True)
class DetailView:
    target_id: str
    action_index: int = 0


@dataclass(frozen=True)
class SettingsView:
    pass


ViewState = Union[ListView, DetailView, SettingsView]


@dataclass(frozen=True)
class DetailEntry:
    domains: tuple[Domain, ...] = ()
    commit_message: str | None = None
    loading: bool = False


@dataclass
class ListState:
    """Cursor, selection, paging, search and view state for one list session."""

    items: list[ListItem]
    baseline: list[ListItem]
    records: list[ProjectRecord]
    page_size: int
    selection: set[str] = field(default_factory=set)
    cursor_index: int = 0
    page_start: int = 0
    search_query: str = ""
    view: ViewState = field(default_factory=ListView)
    details: dict[str, DetailEntry] = field(default_factory=dict)
    in_flight: set[str] = field(default_factory=set)
    icons: bool = False
    notice: str = ""
    prefetched_ids: tuple[str, ...] = ()

    @property
    def cursor_item(self) -> ListItem | None:
        if not self.items:
            return None
        return self.items[self.cursor_index]

    @property
    def visible_items(self) -> list[ListItem]:
        return self.items[self.page_start : self.page_start + self.page_size]

    @property
    def max_page_start(self) -> int:
        return max(0, len(self.items) - self.page_size)

    def record_for(self, item_id: str) -> ProjectRecord | None:
        for record in self.records:
            if record.id == item_id:
                return record
        return None

    def item_for(self, item_id: str) -> ListItem | None:
        for item in self.baseline:
            if item.id == item_id:
                return item
        for item in self.items:
            if item.id == item_id:
                return item
        return None
