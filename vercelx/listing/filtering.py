"""Search matching over project records.

Filtering always recomputes from the full record set, so clearing a query
never loses rows hidden by an earlier, narrower one.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from ..api.models import ProjectRecord
from .formatting import creator_label
from .state import ListItem

STATE_KEYWORDS = frozenset({"ready", "building", "error", "queued", "canceled", "initializing"})
NEVER_KEYWORD = "never"


def normalize_query(query: str) -> str:
    return query.strip().casefold()


def record_matches(record: ProjectRecord, query: str) -> bool:
    """Return whether ``record`` matches an already-normalized ``query``.

    Name and creator label match by substring. A query equal to a deployment
    state keyword also matches that state, and ``never`` matches projects
    with no deployment once loading has finished.
    """
    if not query:
        return True
    if query in record.name.casefold():
        return True
    deployment = record.last_deployment
    if deployment is not None and deployment.creator is not None:
        if query in creator_label(deployment.creator).casefold():
            return True
    if query in STATE_KEYWORDS:
        return deployment is not None and (deployment.state or "").casefold() == query
    if query == NEVER_KEYWORD:
        return deployment is None and not record.deployment_loading
    return False


def filter_records(records: Iterable[ProjectRecord], query: str) -> list[ProjectRecord]:
    normalized = normalize_query(query)
    return [record for record in records if record_matches(record, normalized)]


def filter_items(
    baseline: list[ListItem],
    records: list[ProjectRecord],
    query: str,
    format_record: Callable[[ProjectRecord], ListItem],
) -> list[ListItem]:
    """Return displayed items for ``query``; an empty query yields ``baseline``."""
    if not normalize_query(query):
        return list(baseline)
    return [format_record(record) for record in filter_records(records, query)]
