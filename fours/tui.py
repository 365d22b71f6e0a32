"""Interactive catalog browser – list of threads, open one into the pager."""

from __future__ import annotations

import enum
import logging
from contextlib import AbstractContextManager
from typing import Callable

from .errors import FetchError, FormatError, FoursError, RenderError
from .pager import open_pager
from .render import WIDTH, leftpad
from .terminal import Screen, TerminalSession
from .thread import Catalog

logger = logging.getLogger("fours.tui")

QUIT_KEYS = frozenset({"q", "x", "\x03"})
DOWN_KEYS = frozenset({"j", "KEY_DOWN"})
UP_KEYS = frozenset({"k", "KEY_UP"})
OPEN_KEYS = frozenset({"l", "\n", "KEY_ENTER", "KEY_RIGHT"})

HINT = "q quit  j/k move  l open"

# Failures that leave the browser running
RECOVERABLE = (FetchError, FormatError, RenderError)


class State(enum.Enum):
    BROWSING = "browsing"
    PAGING = "paging"
    EXITED = "exited"


class BrowseLoop:
    """Key-driven state machine over a Catalog.

    Runs inside one terminal session for its whole life; the pager borrows
    that session rather than acquiring its own.
    """

    def __init__(
        self,
        catalog: Catalog,
        *,
        session: Callable[[], AbstractContextManager[Screen]] = TerminalSession,
        pager: Callable[..., object] = open_pager,
        poll_interval: float = 0.05,
        banner: bool = False,
        width: int = WIDTH,
    ) -> None:
        self.catalog = catalog
        self.state = State.BROWSING
        self.status = ""
        self.errors: list[FoursError] = []
        self._session = session
        self._pager = pager
        self._top = 0
        self.poll_interval = poll_interval
        self.banner = banner
        self.width = width

    def run(self) -> list[FoursError]:
        self.state = State.BROWSING
        try:
            with self._session() as screen:
                while self.state is not State.EXITED:
                    self.tick(screen)
        finally:
            self.state = State.EXITED
        return self.errors

    def tick(self, screen: Screen) -> None:
        self.draw(screen)
        key = screen.poll(self.poll_interval)
        if key is not None:
            self.handle_key(key, screen)

    # ── drawing ──────────────────────────────────────────────────

    def draw(self, screen: Screen) -> None:
        rows, _ = screen.size()
        height = max(rows - 1, 1)
        cursor = self.catalog.cursor
        if cursor is None:
            screen.render([f"/{self.catalog.board}/ has no threads with a subject"], None, HINT)
            return
        # keep the cursor on screen
        if cursor < self._top:
            self._top = cursor
        elif cursor >= self._top + height:
            self._top = cursor - height + 1
        subjects = self.catalog.subjects[self._top : self._top + height]
        footer = self.status or f"/{self.catalog.board}/ {cursor + 1}/{len(self.catalog.posts)}  {HINT}"
        screen.render(subjects, cursor - self._top, footer)

    # ── input ────────────────────────────────────────────────────

    def handle_key(self, key: str, screen: Screen) -> None:
        if key in QUIT_KEYS:
            self.state = State.EXITED
            return
        self.status = ""
        if key in DOWN_KEYS:
            self.catalog.move_down()
        elif key in UP_KEYS:
            self.catalog.move_up()
        elif key in OPEN_KEYS:
            self.open_selected(screen)

    def open_selected(self, screen: Screen) -> None:
        """Fetch, render and page the selected thread.

        The fetch blocks the loop.  Failures are recorded and shown on the
        status line; the loop stays in BROWSING.
        """
        post = self.catalog.selected
        if post is None:
            return
        try:
            thread = self.catalog.open(post)
            text = thread.render(banner=self.banner, width=self.width)
        except RECOVERABLE as exc:
            self._recover(exc)
            return
        self.state = State.PAGING
        try:
            self._pager(leftpad(thread.url, self.width), text, screen, poll_interval=self.poll_interval)
        except RECOVERABLE as exc:
            self._recover(exc)
        finally:
            self.state = State.BROWSING

    def _recover(self, exc: FoursError) -> None:
        logger.debug("Recovered from %s", exc, exc_info=exc)
        self.errors.append(exc)
        self.status = f"error: {exc}"
