"""``vercelx projects``: browse, open and delete projects in one scope.

``ProjectBrowser`` owns the per-scope record list, loads latest deployments
(first page up front, the rest on a background thread feeding the list's
update hook), runs the interactive list, and carries out the action it
returns. ``run_browser_loop`` re-invokes the list until the user quits.
"""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TextIO

import httpx

from ..api.client import VercelApi
from ..api.models import DeploymentRecord, ProjectDetails, ProjectRecord, Team, User
from ..auth import require_token
from ..cache import DEPLOYMENT_PREFIX, PROJECTS_PREFIX, TTLCache, deployment_key, project_details_key, projects_key
from ..config import (
    PERSONAL_SCOPE,
    load_last_team_id,
    load_page_size,
    load_theme_name,
    resolve_icons,
    save_last_team_id,
    save_setting,
)
from ..error_log import log_error
from ..errors import VercelApiError, VercelxError
from ..listing.controller import dashboard_url
from ..listing.formatting import column_header, format_project_row, project_item
from ..listing.session import UpdateCallback, run_project_list
from ..listing.state import DETAIL_ACTIONS, ActionKind, ListItem, ListResult
from ..opening import open_url
from ..ui_theme import UITheme, resolve_theme
from .prompts import confirm_action, prompt_team

logger = logging.getLogger(__name__)

OPEN_ACTIONS = {action.kind: action.url_suffix for action in DETAIL_ACTIONS}


@dataclass(frozen=True)
class Scope:
    """Account context projects are listed under."""

    team_id: str | None
    slug: str
    name: str

    @property
    def cache_scope(self) -> str:
        return self.team_id or PERSONAL_SCOPE


@dataclass
class CommandOptions:
    token: str | None = None
    team: str | None = None
    page_size: int | None = None
    theme: str | None = None
    no_color: bool = False
    icons: bool | None = None


def is_interactive() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def build_scope(team_id: str | None, teams: Sequence[Team], user: User) -> Scope:
    for team in teams:
        if team.id == team_id:
            return Scope(team_id=team.id, slug=team.slug, name=team.name)
    return Scope(team_id=None, slug=user.username, name="Personal")


def team_id_from_flag(flag: str, teams: Sequence[Team]) -> str | None:
    """Map ``--team`` (id, slug, name, or ``personal``) to a team id."""
    wanted = flag.strip().casefold()
    if wanted == PERSONAL_SCOPE:
        return None
    for team in teams:
        if wanted in {team.id.casefold(), team.slug.casefold(), team.name.casefold()}:
            return team.id
    raise VercelxError(f"Unknown team: {flag}")


def remembered_team_id(teams: Sequence[Team]) -> str | None:
    last = load_last_team_id()
    if last is None or last == PERSONAL_SCOPE:
        return None
    return last if any(team.id == last for team in teams) else None


def print_table(records: Sequence[ProjectRecord], theme: UITheme, out: TextIO) -> None:
    out.write(column_header(theme) + "\n")
    out.write(theme.paint(theme.border, "─" * 100) + "\n")
    for record in records:
        out.write(format_project_row(record, theme) + "\n")
    out.flush()


class ProjectBrowser:
    """Per-scope project data plus action handling for the interactive list."""

    def __init__(
        self,
        api: VercelApi,
        cache: TTLCache,
        scope: Scope,
        *,
        teams: Sequence[Team] = (),
        theme: UITheme,
        icons: bool = False,
        page_size: int = 10,
        out: TextIO | None = None,
        run_list: Callable[..., ListResult] = run_project_list,
        open_url: Callable[[str], bool] = open_url,
        confirm: Callable[[str], bool] = confirm_action,
        save_setting: Callable[[str, object], None] = save_setting,
    ) -> None:
        self.api = api
        self.cache = cache
        self.scope = scope
        self.teams = tuple(teams)
        self.theme = theme
        self.icons = icons
        self.page_size = max(1, page_size)
        self.out = out if out is not None else sys.stdout
        self._run_list = run_list
        self._open_url = open_url
        self._confirm = confirm
        self._persist_setting = save_setting
        self._lock = threading.Lock()
        self._records: list[ProjectRecord] = []
        self._update_hook: UpdateCallback | None = None
        self._generation = 0
        self._loader: threading.Thread | None = None

    def say(self, text: str, style: str = "") -> None:
        self.out.write(self.theme.paint(style, text) + "\n")
        self.out.flush()

    @property
    def records(self) -> list[ProjectRecord]:
        with self._lock:
            return list(self._records)

    def set_records(self, records: Sequence[ProjectRecord]) -> None:
        with self._lock:
            self._records = list(records)

    def set_scope(self, scope: Scope) -> None:
        self.stop_loader()
        self.scope = scope

    def format_record(self, record: ProjectRecord) -> ListItem:
        return project_item(record, self.theme)

    # Data loading --------------------------------------------------------

    def fetch_projects(self) -> list[ProjectRecord]:
        """Return scope projects newest-updated first, cached under ``projects:<scope>``."""
        key = projects_key(self.scope.cache_scope)
        cached = self.cache.get(key)
        if cached is None:
            cached = sorted(self.api.list_projects(self.scope.team_id), key=lambda r: r.updated_at, reverse=True)
            self.cache.set(key, cached)
        return list(cached)

    def fetch_latest_deployment(self, record: ProjectRecord) -> DeploymentRecord | None:
        """Fetch one latest deployment; API failures are logged and yield ``None``."""
        try:
            return self.api.get_latest_deployment(self.scope.team_id, record.id)
        except VercelApiError as exc:
            if exc.status_code != 404:
                log_error(exc, operation="fetchDeployments", projectId=record.id, teamId=self.scope.team_id)
        except httpx.HTTPError as exc:
            log_error(exc, operation="fetchDeployments", projectId=record.id, teamId=self.scope.team_id)
        return None

    def _cached_deployment(self, project_id: str) -> tuple[bool, DeploymentRecord | None]:
        cached = self.cache.get(deployment_key(project_id))
        if cached is None:
            return False, None
        return True, cached[0] if cached else None

    def _deployment_for(self, record: ProjectRecord) -> DeploymentRecord | None:
        hit, deployment = self._cached_deployment(record.id)
        if hit:
            return deployment
        deployment = self.fetch_latest_deployment(record)
        self.cache.set(deployment_key(record.id), [deployment] if deployment is not None else [])
        return deployment

    def load(self) -> list[ProjectRecord]:
        """Load projects with the first page of deployments; the rest load in the background."""
        self.stop_loader()
        records: list[ProjectRecord] = []
        for index, record in enumerate(self.fetch_projects()):
            hit, deployment = self._cached_deployment(record.id)
            if hit:
                records.append(record.with_deployment(deployment))
            elif index < self.page_size:
                records.append(record.with_deployment(self._deployment_for(record)))
            else:
                records.append(record.as_loading())
        self.set_records(records)
        if any(record.deployment_loading for record in records):
            self.start_loader()
        return records

    def load_all(self) -> list[ProjectRecord]:
        """Load projects with every latest deployment fetched synchronously."""
        self.stop_loader()
        records = [record.with_deployment(self._deployment_for(record)) for record in self.fetch_projects()]
        self.set_records(records)
        return records

    def start_loader(self) -> None:
        with self._lock:
            self._generation += 1
            generation = self._generation
        self._loader = threading.Thread(
            target=self._load_remaining,
            args=(generation,),
            name="vercelx-deployment-loader",
            daemon=True,
        )
        self._loader.start()

    def stop_loader(self) -> None:
        """Invalidate the running loader; it exits at its next page boundary."""
        with self._lock:
            self._generation += 1

    def _load_remaining(self, generation: int) -> None:
        while True:
            with self._lock:
                if generation != self._generation:
                    return
                pending = [record for record in self._records if record.deployment_loading][: self.page_size]
            if not pending:
                return
            fetched: dict[str, DeploymentRecord | None] = {}
            for record in pending:
                try:
                    fetched[record.id] = self.fetch_latest_deployment(record)
                except Exception as exc:
                    log_error(exc, operation="backgroundDeployments", projectId=record.id, teamId=self.scope.team_id)
                    fetched[record.id] = None
            with self._lock:
                if generation != self._generation:
                    return
                self._records = [
                    record.with_deployment(fetched[record.id]) if record.id in fetched else record
                    for record in self._records
                ]
                records = list(self._records)
                hook = self._update_hook
            if hook is not None:
                hook([self.format_record(record) for record in records], records)

    def cache_finished_deployments(self) -> None:
        """Cache deployments the background loader finished; runs on the input thread."""
        for record in self.records:
            if record.deployment_loading:
                continue
            key = deployment_key(record.id)
            if self.cache.get(key) is None:
                deployment = record.last_deployment
                self.cache.set(key, [deployment] if deployment is not None else [])

    def fetch_detail_data(self, record: ProjectRecord) -> ProjectDetails:
        """Domains plus the latest commit message; runs on prefetch worker threads."""
        domains = self.api.get_project_domains(self.scope.team_id, record.id)
        deployment = record.last_deployment
        if deployment is None and record.deployment_loading:
            deployment = self.api.get_latest_deployment(self.scope.team_id, record.id)
        return ProjectDetails(
            domains=tuple(domains),
            commit_message=deployment.commit_message if deployment is not None else None,
        )

    # Interactive list ----------------------------------------------------

    def _register_update_hook(self, callback: UpdateCallback) -> None:
        with self._lock:
            self._update_hook = callback

    def _save_setting(self, key: str, value: object) -> None:
        if key == "icons":
            self.icons = bool(value)
        self._persist_setting(key, value)

    def run_list(self) -> ListResult:
        records = self.records
        result = self._run_list(
            [self.format_record(record) for record in records],
            self.page_size,
            self._register_update_hook,
            records,
            self.format_record,
            self.teams,
            self.scope.team_id,
            self.scope.slug,
            self.fetch_detail_data,
            cache=self.cache,
            theme=self.theme,
            icons=self.icons,
            save_setting=self._save_setting,
        )
        with self._lock:
            self._update_hook = None
        self.cache_finished_deployments()
        return result

    # Actions -------------------------------------------------------------

    def _selected_records(self, ids: Sequence[str]) -> list[ProjectRecord]:
        by_id = {record.id: record for record in self.records}
        return [by_id[item_id] for item_id in ids if item_id in by_id]

    def open_projects(self, ids: Sequence[str], action: ActionKind) -> None:
        suffix = OPEN_ACTIONS.get(action, "")
        for record in self._selected_records(ids):
            url = dashboard_url(self.scope.slug, record.name, suffix)
            self.say(f"Opening {record.name}...", self.theme.notice)
            if self._open_url(url):
                self.say(f"✓ Opened {url}", self.theme.success)
            else:
                log_error(f"Could not open {url}", operation="openProject", projectId=record.id)
                self.say(f"✗ Could not open {url}", self.theme.state_error)

    def delete_projects(self, ids: Sequence[str]) -> tuple[list[str], list[tuple[str, str]]]:
        """Confirm, then delete one by one; returns (deleted names, (name, error) failures)."""
        selected = self._selected_records(ids)
        if not selected:
            self.say("No projects selected.", self.theme.warning)
            return [], []
        names = ", ".join(record.name for record in selected)
        if not self._confirm(f"Are you sure you want to delete {len(selected)} project(s)?\n  {names}\n"):
            self.say("Deletion cancelled.", self.theme.warning)
            return [], []

        self.say(f"\nDeleting {len(selected)} project(s)...\n", self.theme.notice)
        deleted: list[str] = []
        failed: list[tuple[str, str]] = []
        for record in selected:
            try:
                self.api.delete_project(self.scope.team_id, record.id)
            except (VercelApiError, httpx.HTTPError) as exc:
                log_error(exc, operation="deleteProject", projectId=record.id, projectName=record.name, teamId=self.scope.team_id)
                failed.append((record.name, str(exc)))
                self.say(f"✗ Failed to delete {record.name}: {exc}", self.theme.state_error)
                continue
            deleted.append(record.name)
            self.cache.invalidate(deployment_key(record.id))
            self.cache.invalidate(project_details_key(record.id))
            self.say(f"✓ Deleted {record.name}", self.theme.success)

        self.cache.invalidate_prefix(PROJECTS_PREFIX)
        self.say("\nSummary:", self.theme.notice)
        self.say(f"  ✓ Successfully deleted: {len(deleted)}", self.theme.success)
        if failed:
            self.say(f"  ✗ Failed: {len(failed)}", self.theme.state_error)
            for name, error in failed:
                self.say(f"    - {name}: {error}", self.theme.state_error)
        return deleted, failed


def run_browser_loop(
    browser: ProjectBrowser,
    user: User,
    *,
    prompt: Callable[..., str | None] = prompt_team,
) -> int:
    """Invoke the list repeatedly, dispatching each resolved action."""
    try:
        while True:
            records = browser.load()
            if not records:
                browser.say("No projects found in this scope.", browser.theme.warning)
                return 0
            result = browser.run_list()
            action = result.action
            logger.debug("list resolved %s for %d project(s)", action.value, len(result.selected_ids))
            if action is ActionKind.NONE:
                return 0
            if action in OPEN_ACTIONS:
                browser.open_projects(result.selected_ids, action)
            elif action is ActionKind.DELETE:
                browser.delete_projects(result.selected_ids)
            elif action is ActionKind.CHANGE_TEAM:
                team_id = prompt(browser.teams, browser.scope.team_id, theme=browser.theme)
                save_last_team_id(team_id)
                browser.set_scope(build_scope(team_id, browser.teams, user))
                browser.say(f"✓ Using scope: {browser.scope.name}\n", browser.theme.success)
            elif action is ActionKind.REFRESH:
                browser.cache.invalidate_prefix(PROJECTS_PREFIX)
                browser.cache.invalidate_prefix(DEPLOYMENT_PREFIX)
    finally:
        browser.stop_loader()


def resolve_display(options: CommandOptions) -> tuple[UITheme, bool, int]:
    """Theme, icon flag and page size from CLI options over persisted config."""
    theme = resolve_theme(options.theme or load_theme_name(), no_color=options.no_color)
    icons = resolve_icons(options.icons)
    page_size = options.page_size or load_page_size()
    return theme, icons, page_size


def projects_command(
    options: CommandOptions,
    *,
    api: VercelApi | None = None,
    cache: TTLCache | None = None,
    out: TextIO | None = None,
    interactive: bool | None = None,
    prompt: Callable[..., str | None] = prompt_team,
) -> int:
    """Entry point for ``vercelx projects``; returns the process exit status."""
    stream = out if out is not None else sys.stdout
    owns_api = api is None
    if api is None:
        api = VercelApi(require_token(options.token))
    interactive = is_interactive() if interactive is None else interactive
    theme, icons, page_size = resolve_display(options)
    try:
        stream.write(theme.paint(theme.notice, "Fetching teams...") + "\n")
        teams = api.list_teams()
        user = api.get_current_user()
        if options.team is not None:
            team_id = team_id_from_flag(options.team, teams)
        elif interactive:
            team_id = prompt(teams, remembered_team_id(teams), theme=theme)
            save_last_team_id(team_id)
        else:
            team_id = remembered_team_id(teams)
        scope = build_scope(team_id, teams, user)
        stream.write(theme.paint(theme.success, f"✓ Using scope: {scope.name}") + "\n")

        browser = ProjectBrowser(
            api,
            cache if cache is not None else TTLCache(),
            scope,
            teams=teams,
            theme=theme,
            icons=icons,
            page_size=page_size,
            out=stream,
        )
        if not interactive:
            records = browser.load_all()
            if not records:
                stream.write(theme.paint(theme.warning, "No projects found in this scope.") + "\n")
                return 0
            print_table(records, theme, stream)
            return 0
        return run_browser_loop(browser, user, prompt=prompt)
    finally:
        if owns_api:
            api.close()
