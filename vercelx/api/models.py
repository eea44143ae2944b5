"""Typed records decoded from Vercel REST payloads.

Decoders are lenient: missing optional fields become ``None`` and unknown
fields are ignored, so API additions never break listing.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any


def _opt_str(value: object) -> str | None:
    return value if isinstance(value, str) and value else None


def _int(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


@dataclass(frozen=True)
class Team:
    id: str
    name: str
    slug: str

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> Team:
        team_id = str(payload.get("id", ""))
        return cls(
            id=team_id,
            name=str(payload.get("name") or payload.get("slug") or team_id),
            slug=str(payload.get("slug") or team_id),
        )


@dataclass(frozen=True)
class User:
    uid: str
    username: str
    email: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> User:
        return cls(
            uid=str(payload.get("uid") or payload.get("id") or ""),
            username=str(payload.get("username", "")),
            email=_opt_str(payload.get("email")),
        )


@dataclass(frozen=True)
class Creator:
    uid: str | None = None
    username: str | None = None
    email: str | None = None

    @classmethod
    def from_api(cls, payload: object) -> Creator | None:
        if not isinstance(payload, dict):
            return None
        return cls(
            uid=_opt_str(payload.get("uid")),
            username=_opt_str(payload.get("username")),
            email=_opt_str(payload.get("email")),
        )


@dataclass(frozen=True)
class GitLink:
    type: str | None = None
    org: str | None = None
    repo_name: str | None = None
    production_branch: str | None = None

    @classmethod
    def from_api(cls, payload: object) -> GitLink | None:
        if not isinstance(payload, dict):
            return None
        repo = _opt_str(payload.get("repo"))
        repo_name = _opt_str(payload.get("repoName")) or (repo.split("/")[-1] if repo else None)
        return cls(
            type=_opt_str(payload.get("type")),
            org=_opt_str(payload.get("org")) or _opt_str(payload.get("repoOwner")),
            repo_name=repo_name,
            production_branch=_opt_str(payload.get("productionBranch")),
        )

    @property
    def full_name(self) -> str | None:
        if not self.org or not self.repo_name:
            return None
        return f"{self.org}/{self.repo_name}"


@dataclass(frozen=True)
class DeploymentRecord:
    uid: str
    state: str | None
    created_at: int
    url: str | None = None
    creator: Creator | None = None
    commit_message: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> DeploymentRecord:
        meta = payload.get("meta")
        commit_message = None
        if isinstance(meta, dict):
            commit_message = (
                _opt_str(meta.get("githubCommitMessage"))
                or _opt_str(meta.get("gitlabCommitMessage"))
                or _opt_str(meta.get("bitbucketCommitMessage"))
            )
        return cls(
            uid=str(payload.get("uid", "")),
            state=_opt_str(payload.get("state")) or _opt_str(payload.get("readyState")),
            created_at=_int(payload.get("createdAt") or payload.get("created")),
            url=_opt_str(payload.get("url")),
            creator=Creator.from_api(payload.get("creator")),
            commit_message=commit_message,
        )


@dataclass(frozen=True)
class Domain:
    name: str
    verified: bool = True
    git_branch: str | None = None
    redirect: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> Domain:
        return cls(
            name=str(payload.get("name", "")),
            verified=bool(payload.get("verified", True)),
            git_branch=_opt_str(payload.get("gitBranch")),
            redirect=_opt_str(payload.get("redirect")),
        )

    @property
    def is_production(self) -> bool:
        return self.git_branch in {None, "main", "master"}


@dataclass(frozen=True)
class ProjectRecord:
    id: str
    name: str
    account_id: str | None
    created_at: int
    updated_at: int
    link: GitLink | None = None
    last_deployment: DeploymentRecord | None = None
    deployment_loading: bool = False

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> ProjectRecord:
        return cls(
            id=str(payload.get("id", "")),
            name=str(payload.get("name", "")),
            account_id=_opt_str(payload.get("accountId")),
            created_at=_int(payload.get("createdAt")),
            updated_at=_int(payload.get("updatedAt")),
            link=GitLink.from_api(payload.get("link")),
        )

    def with_deployment(self, deployment: DeploymentRecord | None) -> ProjectRecord:
        """Return a copy carrying ``deployment`` with the loading flag cleared."""
        return replace(self, last_deployment=deployment, deployment_loading=False)

    def as_loading(self) -> ProjectRecord:
        return replace(self, deployment_loading=True)


@dataclass(frozen=True)
class ProjectDetails:
    """Detail-view payload fetched lazily per project."""

    domains: tuple[Domain, ...] = ()
    commit_message: str | None = None
