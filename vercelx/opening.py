"""Fire-and-forget side effects: browser opening and clipboard copy."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
import threading
import webbrowser

logger = logging.getLogger(__name__)


def _opener_command(url: str) -> list[str] | None:
    """Platform launcher command for ``url``, or ``None`` when none is installed."""
    if sys.platform == "darwin":
        command = ["open", url]
    elif os.name == "nt":
        command = ["cmd", "/c", "start", "", url]
    else:
        command = ["xdg-open", url]
    return command if shutil.which(command[0]) is not None else None


def _webbrowser_open(url: str) -> None:
    try:
        if not webbrowser.open(url):
            logger.warning("No browser accepted %s", url)
    except (webbrowser.Error, OSError) as exc:
        logger.warning("Failed to open browser for %s: %s", url, exc)


def open_url(url: str) -> bool:
    """Start opening ``url`` without waiting for the browser; return whether a launch began.

    The platform opener runs detached from the terminal. Without one,
    ``webbrowser`` runs on a daemon thread since console browsers block
    until they exit.
    """
    command = _opener_command(url)
    if command is not None:
        try:
            subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
            return True
        except OSError as exc:
            logger.debug("opener %s failed: %s", command[0], exc)
    try:
        worker = threading.Thread(target=_webbrowser_open, args=(url,), name="vercelx-open-url", daemon=True)
        worker.start()
    except RuntimeError as exc:
        logger.warning("Failed to open browser for %s: %s", url, exc)
        return False
    return True


def copy_text_to_clipboard(text: str) -> bool:
    """Best-effort clipboard copy across macOS, Windows, and common Linux tools."""
    if not text:
        return False

    command_candidates: list[list[str]] = []
    if sys.platform == "darwin":
        command_candidates.append(["pbcopy"])
    elif os.name == "nt":
        command_candidates.append(["clip"])
    else:
        command_candidates.extend(
            [
                ["wl-copy"],
                ["xclip", "-selection", "clipboard"],
                ["xsel", "--clipboard", "--input"],
            ]
        )

    for command in command_candidates:
        if shutil.which(command[0]) is None:
            continue
        try:
            proc = subprocess.run(
                command,
                input=text,
                text=True,
                check=False,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as exc:
            logger.debug("clipboard command %s failed: %s", command[0], exc)
            continue
        if proc.returncode == 0:
            return True
    return False
