"""Interactive, searchable, multi-select project list."""

from .controller import CopyText, FetchDetails, ListController, OpenUrl, Resolve, SaveSetting
from .filtering import filter_records
from .formatting import column_header, format_project_row, project_item
from .session import ListSession, run_project_list
from .state import ActionKind, ListItem, ListResult

__all__ = [
    "ActionKind",
    "CopyText",
    "FetchDetails",
    "ListController",
    "ListItem",
    "ListResult",
    "ListSession",
    "OpenUrl",
    "Resolve",
    "SaveSetting",
    "column_header",
    "filter_records",
    "format_project_row",
    "project_item",
    "run_project_list",
]
