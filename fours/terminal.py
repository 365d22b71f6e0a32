"""Exclusive terminal control – curses raw mode on the alternate screen."""

from __future__ import annotations

import curses
import logging
from typing import Protocol, Sequence

from .errors import TerminalError

logger = logging.getLogger("fours.terminal")


class Screen(Protocol):
    """What the browse loop and pager need from a terminal."""

    def size(self) -> tuple[int, int]: ...

    def render(self, rows: Sequence[str], highlight: int | None, footer: str) -> None: ...

    def poll(self, timeout: float) -> str | None: ...


class TerminalSession:
    """Scoped curses session.

    Entering puts the terminal in raw mode on the alternate screen; leaving
    restores it, on every exit path.  Usable as a Screen while held.
    """

    def __init__(self) -> None:
        self._stdscr: curses.window | None = None
        self._muted: list[tuple[logging.Handler, int]] = []

    # ── acquisition ──────────────────────────────────────────────

    def __enter__(self) -> TerminalSession:
        self._mute_logging()
        try:
            self._stdscr = curses.initscr()
            curses.noecho()
            curses.raw()
            self._stdscr.keypad(True)
        except curses.error as exc:
            self._release_quietly()
            raise TerminalError(f"could not take over the terminal: {exc}") from exc
        try:
            curses.curs_set(0)
        except curses.error:
            logger.debug("Terminal cannot hide the cursor")
        return self

    def __exit__(self, exc_type: type[BaseException] | None, *args: object) -> None:
        if exc_type is None:
            self._release()
        else:
            self._release_quietly()

    def _release(self) -> None:
        stdscr, self._stdscr = self._stdscr, None
        try:
            if stdscr is not None:
                self._restore(stdscr)
        finally:
            self._unmute_logging()

    @staticmethod
    def _restore(stdscr: curses.window) -> None:
        try:
            stdscr.keypad(False)
            curses.noraw()
            curses.echo()
        except curses.error as exc:
            raise TerminalError(f"could not restore the terminal: {exc}") from exc
        finally:
            if not curses.isendwin():
                curses.endwin()

    def _release_quietly(self) -> None:
        try:
            self._release()
        except (TerminalError, curses.error) as exc:
            logger.debug("Terminal release failed: %s", exc)

    # Root handlers write to the same terminal curses is drawing on
    def _mute_logging(self) -> None:
        self._muted = [(handler, handler.level) for handler in logging.getLogger().handlers]
        for handler, _ in self._muted:
            handler.setLevel(logging.CRITICAL + 1)

    def _unmute_logging(self) -> None:
        for handler, level in self._muted:
            handler.setLevel(level)
        self._muted = []

    @property
    def window(self) -> curses.window:
        if self._stdscr is None:
            raise TerminalError("terminal session is not active")
        return self._stdscr

    # ── Screen ───────────────────────────────────────────────────

    def size(self) -> tuple[int, int]:
        return self.window.getmaxyx()

    def render(self, rows: Sequence[str], highlight: int | None, footer: str) -> None:
        win = self.window
        win.erase()
        height, width = win.getmaxyx()
        for y, row in enumerate(rows[: max(height - 1, 0)]):
            attr = curses.A_REVERSE if y == highlight else curses.A_NORMAL
            self._addstr(y, row, attr, width)
        self._addstr(height - 1, footer, curses.A_BOLD, width)
        win.refresh()

    def _addstr(self, y: int, text: str, attr: int, width: int) -> None:
        # Writing into the bottom-right cell raises even when the text lands
        try:
            self.window.addnstr(y, 0, text, max(width - 1, 0), attr)
        except curses.error:
            pass

    def poll(self, timeout: float) -> str | None:
        """Wait at most `timeout` seconds for a key; None if none arrived."""
        win = self.window
        win.timeout(int(timeout * 1000))
        try:
            key = win.get_wch()
        except curses.error:
            return None
        if isinstance(key, int):
            return curses.keyname(key).decode("ascii", "replace")
        return key
