"""In-memory key/value cache with per-entry time-to-live.

Used to avoid refetching project lists, latest deployments, and per-project
detail data while the user browses. Eviction is lazy: expired entries are
dropped on the read that finds them, or by explicit invalidation.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

DEFAULT_TTL_SECONDS = 300.0

PROJECTS_PREFIX = "projects:"
DEPLOYMENT_PREFIX = "deployment:"
PROJECT_DETAILS_PREFIX = "project-details:"
KNOWN_PREFIXES: tuple[str, ...] = (PROJECTS_PREFIX, DEPLOYMENT_PREFIX, PROJECT_DETAILS_PREFIX)


@dataclass(frozen=True)
class CacheEntry:
    data: Any
    expires_at: float


class TTLCache:
    """Process-local TTL store with an injectable clock.

    Not thread-safe on purpose: callers mutate it from the input loop only.
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Any | None:
        """Return cached value, or ``None`` when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            del self._entries[key]
            return None
        return entry.data

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store ``value`` for ``ttl`` seconds (``default_ttl`` when omitted)."""
        lifetime = self.default_ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(data=value, expires_at=self._clock() + lifetime)

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def invalidate_prefix(self, prefix: str) -> None:
        """Drop every entry whose key starts with ``prefix``."""
        for key in [key for key in self._entries if key.startswith(prefix)]:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))


def project_details_key(project_id: str) -> str:
    return f"{PROJECT_DETAILS_PREFIX}{project_id}"


def deployment_key(project_id: str) -> str:
    return f"{DEPLOYMENT_PREFIX}{project_id}"


def projects_key(scope: str | None) -> str:
    return f"{PROJECTS_PREFIX}{scope or 'personal'}"
