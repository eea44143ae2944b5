"""Line-mode prompts used between interactive list sessions."""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from typing import TextIO

from ..api.models import Team
from ..ui_theme import PLAIN_THEME, UITheme


def prompt_team(
    teams: Sequence[Team],
    default_team_id: str | None = None,
    *,
    theme: UITheme = PLAIN_THEME,
    input_fn: Callable[[str], str] = input,
    out: TextIO | None = None,
) -> str | None:
    """Ask for a scope from a numbered menu; returns a team id or ``None`` for personal.

    Empty input (or end of input) picks ``default_team_id``. Unknown answers
    re-prompt.
    """
    stream = out if out is not None else sys.stdout
    choices: list[tuple[str, str | None]] = [("Personal", None)]
    choices.extend((team.name, team.id) for team in teams)
    default_index = 1
    for index, (_, team_id) in enumerate(choices, start=1):
        if team_id == default_team_id:
            default_index = index

    stream.write(theme.paint(theme.bold, "Select team scope:") + "\n")
    for index, (name, _) in enumerate(choices, start=1):
        marker = theme.paint(theme.cursor, "*") if index == default_index else " "
        stream.write(f" {marker} {index}) {name}\n")
    stream.flush()

    while True:
        try:
            answer = input_fn(f"Scope [{default_index}]: ").strip()
        except EOFError:
            return choices[default_index - 1][1]
        if not answer:
            return choices[default_index - 1][1]
        if answer.isdigit() and 1 <= int(answer) <= len(choices):
            return choices[int(answer) - 1][1]
        lowered = answer.casefold()
        for team in teams:
            if lowered in {team.id.casefold(), team.slug.casefold(), team.name.casefold()}:
                return team.id
        if lowered == "personal":
            return None
        stream.write(theme.paint(theme.warning, f"Enter a number between 1 and {len(choices)}.") + "\n")


def confirm_action(
    message: str,
    default: bool = False,
    *,
    input_fn: Callable[[str], str] = input,
) -> bool:
    """Yes/no question; empty input and end of input return ``default``."""
    suffix = "[Y/n]" if default else "[y/N]"
    try:
        answer = input_fn(f"{message} {suffix}: ").strip().casefold()
    except EOFError:
        return default
    if not answer:
        return default
    return answer in {"y", "yes"}
