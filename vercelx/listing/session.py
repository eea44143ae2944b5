"""Interactive list session driver.

Owns the terminal for one list invocation: reads keys, feeds them to the
``ListController``, applies queued background updates and detail results
between input events, performs returned effects, and redraws.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Sequence
from queue import Empty, Queue

from ..api.models import ProjectDetails, ProjectRecord, Team
from ..cache import TTLCache
from ..config import save_setting
from ..input import KeyParser, read_keys
from ..opening import copy_text_to_clipboard, open_url
from ..terminal import ScreenRenderer, TerminalController
from ..ui_theme import DEFAULT_THEME, UITheme
from .controller import CopyText, Effect, FetchDetails, ListController, OpenUrl, SaveSetting
from .prefetch import DetailPrefetcher
from .rendering import render_lines
from .state import ActionKind, ListItem, ListResult

logger = logging.getLogger(__name__)

INPUT_POLL_MS = 120

UpdateCallback = Callable[..., None]


class ListSession:
    """Input loop around one ``ListController``."""

    def __init__(
        self,
        controller: ListController,
        fetch_detail_data: Callable[[ProjectRecord], ProjectDetails],
        *,
        theme: UITheme = DEFAULT_THEME,
        stdin_fd: int,
        stdout_fd: int,
        open_url: Callable[[str], bool] = open_url,
        copy_text: Callable[[str], bool] = copy_text_to_clipboard,
        save_setting: Callable[[str, object], None] = save_setting,
        prefetcher: DetailPrefetcher | None = None,
    ) -> None:
        self.controller = controller
        self.theme = theme
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._open_url = open_url
        self._copy_text = copy_text
        self._save_setting = save_setting
        self.prefetcher = prefetcher if prefetcher is not None else DetailPrefetcher(fetch_detail_data)
        self._updates: Queue[tuple[list[ListItem], list[ProjectRecord] | None]] = Queue()
        self._parser = KeyParser()
        self._screen = ScreenRenderer(stdout_fd)
        self._last_view_type: type | None = None

    def update(self, items: Sequence[ListItem], records: Sequence[ProjectRecord] | None = None) -> None:
        """Thread-safe update hook; each call fully replaces the displayed items."""
        self._updates.put((list(items), None if records is None else list(records)))

    def run(self) -> ListResult:
        terminal = TerminalController(self.stdin_fd, self.stdout_fd)
        # Console log output would tear frames while the list owns the screen.
        previous_disable = logging.root.manager.disable
        logging.disable(logging.WARNING)
        try:
            with terminal.raw_mode():
                self._dispatch(self.controller.start())
                self.render()
                while self.controller.result is None:
                    try:
                        keys = read_keys(self.stdin_fd, self._parser, INPUT_POLL_MS)
                    except EOFError:
                        self.controller.interrupt()
                        break
                    dirty = self.drain_background()
                    for key in keys:
                        self._dispatch(self.controller.handle_key(key))
                        if self.controller.result is not None:
                            break
                    if (keys or dirty) and self.controller.result is None:
                        self.render()
        except KeyboardInterrupt:
            self.controller.interrupt()
        finally:
            self.prefetcher.shutdown()
            logging.disable(previous_disable)
        result = self.controller.result
        return result if result is not None else ListResult((), ActionKind.NONE)

    def render(self) -> None:
        view_type = type(self.controller.state.view)
        hard = view_type is not self._last_view_type
        self._last_view_type = view_type
        self._screen.draw_frame(render_lines(self.controller, self.theme), hard=hard)

    def drain_background(self) -> bool:
        """Apply queued updates and finished detail fetches; return whether any arrived."""
        dirty = False
        while True:
            try:
                items, records = self._updates.get_nowait()
            except Empty:
                break
            self._dispatch(self.controller.apply_update(items, records))
            dirty = True
        for result in self.prefetcher.drain_results():
            if result.error is not None:
                logger.debug("detail fetch for %s failed: %s", result.item_id, result.error)
            self.controller.apply_detail_result(result.item_id, result.details)
            dirty = True
        return dirty

    def _dispatch(self, effects: list[Effect]) -> None:
        state = self.controller.state
        for effect in effects:
            if isinstance(effect, OpenUrl):
                if not self._open_url(effect.url):
                    state.notice = f"Could not open a browser for {effect.url}"
            elif isinstance(effect, CopyText):
                if not self._copy_text(effect.text):
                    state.notice = "Clipboard unavailable"
            elif isinstance(effect, FetchDetails):
                for item_id in effect.ids:
                    self.prefetcher.submit(item_id, state.record_for(item_id))
            elif isinstance(effect, SaveSetting):
                self._save_setting(effect.key, effect.value)


def run_project_list(
    initial_items: Sequence[ListItem],
    page_size: int,
    register_update_hook: Callable[[UpdateCallback], None],
    records: Sequence[ProjectRecord],
    format_record: Callable[[ProjectRecord], ListItem],
    team_options: Sequence[Team],
    current_team_id: str | None,
    scope_slug: str,
    fetch_detail_data: Callable[[ProjectRecord], ProjectDetails],
    *,
    cache: TTLCache,
    theme: UITheme | None = None,
    icons: bool = False,
    stdin_fd: int | None = None,
    stdout_fd: int | None = None,
    save_setting: Callable[[str, object], None] = save_setting,
) -> ListResult:
    """Run the interactive project list until the user picks an action.

    ``register_update_hook`` receives the thread-safe update callback before
    the first frame is drawn. ``save_setting`` persists settings toggled in
    the overlay. Returns exactly one ``ListResult``; the
    terminal is restored on every exit path.
    """
    controller = ListController(
        initial_items,
        records,
        page_size,
        format_record,
        scope_slug,
        cache,
        team_options=team_options,
        current_team_id=current_team_id,
        icons=icons,
    )
    session = ListSession(
        controller,
        fetch_detail_data,
        theme=theme or DEFAULT_THEME,
        stdin_fd=sys.stdin.fileno() if stdin_fd is None else stdin_fd,
        stdout_fd=sys.stdout.fileno() if stdout_fd is None else stdout_fd,
        save_setting=save_setting,
    )
    register_update_hook(session.update)
    return session.run()
