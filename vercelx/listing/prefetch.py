"""Background worker pool for per-project detail data."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from queue import Empty, Queue

from ..api.models import ProjectDetails, ProjectRecord

logger = logging.getLogger(__name__)

DEFAULT_PREFETCH_WORKERS = 4


@dataclass(frozen=True)
class DetailFetchResult:
    """Completed detail fetch; ``details`` is ``None`` when it failed."""

    item_id: str
    details: ProjectDetails | None
    error: BaseException | None = None


class DetailPrefetcher:
    """Runs ``fetch_detail_data`` off the input thread and queues results.

    Results are only consumed through ``drain_results`` so the list state is
    mutated by the input loop alone.
    """

    def __init__(
        self,
        fetch_detail_data: Callable[[ProjectRecord], ProjectDetails],
        max_workers: int = DEFAULT_PREFETCH_WORKERS,
    ) -> None:
        self._fetch_detail_data = fetch_detail_data
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="vercelx-detail-prefetch")
        self._results: Queue[DetailFetchResult] = Queue()
        self._closed = False

    def _run(self, item_id: str, record: ProjectRecord) -> None:
        try:
            details = self._fetch_detail_data(record)
        except Exception as exc:
            self._results.put(DetailFetchResult(item_id=item_id, details=None, error=exc))
            return
        self._results.put(DetailFetchResult(item_id=item_id, details=details))

    def submit(self, item_id: str, record: ProjectRecord | None) -> None:
        """Schedule one fetch; a missing record completes immediately as a failure."""
        if record is None:
            self._results.put(DetailFetchResult(item_id=item_id, details=None, error=KeyError(item_id)))
            return
        if self._closed:
            return
        self._executor.submit(self._run, item_id, record)

    def drain_results(self) -> list[DetailFetchResult]:
        """Drain all completed fetch results."""
        out: list[DetailFetchResult] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out

    def shutdown(self) -> None:
        """Stop accepting work without waiting for running fetches."""
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=False, cancel_futures=True)


__all__ = [
    "DEFAULT_PREFETCH_WORKERS",
    "DetailFetchResult",
    "DetailPrefetcher",
]
