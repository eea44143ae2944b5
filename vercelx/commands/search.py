"""``vercelx search QUERY``: find projects by name, creator, or deployment state.

Searches the token's default scope. The scope is detected from the first
project's account id, falling back to the personal account.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from typing import TextIO

from ..api.client import VercelApi
from ..api.models import ProjectRecord, Team, User
from ..auth import require_token
from ..cache import TTLCache, projects_key
from ..errors import VercelxError
from ..listing.filtering import filter_records
from .projects import (
    CommandOptions,
    ProjectBrowser,
    Scope,
    build_scope,
    is_interactive,
    print_table,
    resolve_display,
    run_browser_loop,
)
from .prompts import prompt_team


def detect_scope(projects: Sequence[ProjectRecord], teams: Sequence[Team], user: User) -> Scope:
    """Return the team owning the first project, else the personal scope."""
    account_id = projects[0].account_id if projects else None
    return build_scope(account_id, teams, user)


class SearchBrowser(ProjectBrowser):
    """Browser whose list only shows projects matching ``query``."""

    def __init__(self, *args, query: str, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.query = query

    def load(self) -> list[ProjectRecord]:
        matches = sorted(
            filter_records(self.load_all(), self.query),
            key=lambda record: record.updated_at,
            reverse=True,
        )
        self.set_records(matches)
        return matches


def search_command(
    query: str,
    options: CommandOptions,
    *,
    print_only: bool = False,
    api: VercelApi | None = None,
    cache: TTLCache | None = None,
    out: TextIO | None = None,
    interactive: bool | None = None,
    prompt: Callable[..., str | None] = prompt_team,
) -> int:
    """Entry point for ``vercelx search``; returns the process exit status."""
    if not query or not query.strip():
        raise VercelxError("Search query is required. Usage: vercelx search <query>")
    stream = out if out is not None else sys.stdout
    owns_api = api is None
    if api is None:
        api = VercelApi(require_token(options.token))
    interactive = is_interactive() if interactive is None else interactive
    theme, icons, page_size = resolve_display(options)
    cache = cache if cache is not None else TTLCache()
    try:
        stream.write(theme.paint(theme.notice, "Fetching user information...") + "\n")
        user = api.get_current_user()
        teams = api.list_teams()
        projects = sorted(api.list_projects(None), key=lambda record: record.updated_at, reverse=True)
        if not projects:
            stream.write(theme.paint(theme.warning, "No projects found.") + "\n")
            return 0
        scope = detect_scope(projects, teams, user)
        cache.set(projects_key(scope.cache_scope), projects)
        stream.write(theme.paint(theme.success, f"✓ Using scope: {scope.name}") + "\n")

        browser = SearchBrowser(
            api,
            cache,
            scope,
            teams=teams,
            theme=theme,
            icons=icons,
            page_size=page_size,
            out=stream,
            query=query,
        )
        stream.write(theme.paint(theme.notice, "Fetching deployment information...") + "\n")
        matches = browser.load()
        if not matches:
            stream.write(
                theme.paint(theme.warning, f'No projects found matching "{query}" (searched by name, creator, and state).')
                + "\n"
            )
            return 0

        stream.write(theme.paint(theme.success, f'\n✓ Found {len(matches)} project(s) matching "{query}":\n') + "\n")
        print_table(matches, theme, stream)
        if print_only or not interactive:
            return 0
        return run_browser_loop(browser, user, prompt=prompt)
    finally:
        if owns_api:
            api.close()
