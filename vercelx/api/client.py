"""HTTP client for the Vercel REST API.

Wraps ``httpx.Client`` with bearer auth, cursor pagination, and retry with
exponential backoff for rate limits, server errors, and transport failures.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

import httpx

from ..errors import AuthenticationError, VercelApiError
from .models import DeploymentRecord, Domain, ProjectRecord, Team, User

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.vercel.com"
API_TIMEOUT = 30.0
MAX_RETRIES = 3
MAX_PAGE_LIMIT = 100


def _backoff_seconds(attempt: int) -> float:
    """1s, 2s, 4s, ... for zero-based ``attempt``."""
    return float(2**attempt)


def _retry_after_seconds(response: httpx.Response, attempt: int) -> float:
    header = response.headers.get("Retry-After")
    if header:
        try:
            return max(0.0, float(header))
        except ValueError:
            pass
    return _backoff_seconds(attempt)


class VercelApi:
    """Synchronous Vercel API client.

    ``transport`` and ``sleep`` exist for tests; production code uses the
    default network transport and real sleeping between retries.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_API_URL,
        transport: httpx.BaseTransport | None = None,
        max_retries: int = MAX_RETRIES,
        sleep: Callable[[float], None] = time.sleep,
        timeout: float = API_TIMEOUT,
    ) -> None:
        self.max_retries = max_retries
        self._sleep = sleep
        self._client = httpx.Client(
            base_url=base_url,
            headers={"Authorization": f"Bearer {token}", "Content-Type": "application/json"},
            transport=transport,
            timeout=timeout,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> VercelApi:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(self, method: str, path: str, params: dict[str, Any] | None = None) -> Any:
        """Send one request with retries and decode its JSON body.

        Returns ``None`` for empty, 204, or non-JSON success bodies.
        """
        clean_params = {key: value for key, value in (params or {}).items() if value is not None}
        attempt = 0
        while True:
            try:
                response = self._client.request(method, path, params=clean_params)
            except httpx.TransportError as exc:
                if attempt >= self.max_retries:
                    raise
                delay = _backoff_seconds(attempt)
                logger.debug("transport error on %s %s: %s; retrying in %.1fs", method, path, exc, delay)
                self._sleep(delay)
                attempt += 1
                continue

            status = response.status_code
            if status == 429 and attempt < self.max_retries:
                delay = _retry_after_seconds(response, attempt)
                logger.debug("rate limited on %s %s; retrying in %.1fs", method, path, delay)
                self._sleep(delay)
                attempt += 1
                continue
            if 500 <= status < 600 and attempt < self.max_retries:
                delay = _backoff_seconds(attempt)
                logger.debug("server error %d on %s %s; retrying in %.1fs", status, method, path, delay)
                self._sleep(delay)
                attempt += 1
                continue
            if status in (401, 403):
                raise AuthenticationError(status)
            if not response.is_success:
                raise VercelApiError(status, response.text or response.reason_phrase)
            return self._decode(response)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if response.status_code == 204 or not response.content.strip():
            return None
        content_type = response.headers.get("content-type", "")
        if content_type and "application/json" not in content_type:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    def get_current_user(self) -> User:
        payload = self._request("GET", "/v2/user") or {}
        return User.from_api(payload.get("user") or {})

    def list_teams(self) -> list[Team]:
        payload = self._request("GET", "/v2/teams") or {}
        return [Team.from_api(item) for item in payload.get("teams") or []]

    def list_projects(self, team_id: str | None = None) -> list[ProjectRecord]:
        """List every project in scope, following ``pagination.next`` cursors."""
        projects: list[ProjectRecord] = []
        until: int | None = None
        while True:
            payload = self._request("GET", "/v9/projects", {"teamId": team_id, "until": until}) or {}
            projects.extend(ProjectRecord.from_api(item) for item in payload.get("projects") or [])
            until = (payload.get("pagination") or {}).get("next")
            if until is None:
                return projects

    def list_deployments(
        self,
        team_id: str | None = None,
        project_id: str | None = None,
        limit: int = MAX_PAGE_LIMIT,
    ) -> list[DeploymentRecord]:
        """List newest-first deployments, paging until ``limit`` is reached."""
        deployments: list[DeploymentRecord] = []
        until: int | None = None
        while len(deployments) < limit:
            params = {
                "teamId": team_id,
                "projectId": project_id,
                "limit": min(MAX_PAGE_LIMIT, limit - len(deployments)),
                "until": until,
            }
            payload = self._request("GET", "/v6/deployments", params) or {}
            deployments.extend(DeploymentRecord.from_api(item) for item in payload.get("deployments") or [])
            until = (payload.get("pagination") or {}).get("next")
            if until is None:
                break
        return deployments[:limit]

    def get_latest_deployment(self, team_id: str | None, project_id: str) -> DeploymentRecord | None:
        deployments = self.list_deployments(team_id=team_id, project_id=project_id, limit=1)
        return deployments[0] if deployments else None

    def get_project_domains(self, team_id: str | None, project_id: str) -> list[Domain]:
        payload = self._request("GET", f"/v9/projects/{project_id}/domains", {"teamId": team_id}) or {}
        return [Domain.from_api(item) for item in payload.get("domains") or []]

    def delete_project(self, team_id: str | None, project_id: str) -> None:
        self._request("DELETE", f"/v9/projects/{project_id}", {"teamId": team_id})
