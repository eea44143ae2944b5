"""Command workflows behind the ``vercelx`` subcommands."""

from .projects import CommandOptions, ProjectBrowser, Scope, projects_command, run_browser_loop
from .search import SearchBrowser, search_command

__all__ = [
    "CommandOptions",
    "ProjectBrowser",
    "Scope",
    "SearchBrowser",
    "projects_command",
    "run_browser_loop",
    "search_command",
]
