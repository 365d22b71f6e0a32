"""Scrollable pager fed from a worker thread.

The view owns the terminal and polls its own keys, so it cannot also
produce its content.  A second task pushes the text into the view's
buffer and signals completion; `open_pager` joins it before returning.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Union

from .terminal import Screen, TerminalSession

logger = logging.getLogger("fours.pager")

Body = Union[str, Callable[[], str]]

QUIT_KEYS = frozenset({"q", "\x03"})
DOWN_KEYS = frozenset({"j", "KEY_DOWN", "\n"})
UP_KEYS = frozenset({"k", "KEY_UP"})
PAGE_DOWN_KEYS = frozenset({" ", "KEY_NPAGE"})
PAGE_UP_KEYS = frozenset({"b", "KEY_PPAGE"})
TOP_KEYS = frozenset({"g", "KEY_HOME"})
BOTTOM_KEYS = frozenset({"G", "KEY_END"})


class Pager:
    """Line buffer plus scroll position.

    `push_str` and `finish` may be called from any thread; the view methods
    belong to the thread that owns the screen.
    """

    def __init__(self, prompt: str, poll_interval: float = 0.05) -> None:
        self.prompt = prompt
        self.poll_interval = poll_interval
        self.top = 0
        self.failed = False
        self._lines: list[str] = []
        self._partial = ""
        self._lock = threading.Lock()
        self._done = threading.Event()

    # ── feeding side ─────────────────────────────────────────────

    def push_str(self, text: str) -> None:
        with self._lock:
            *complete, self._partial = (self._partial + text).split("\n")
            self._lines.extend(complete)

    def finish(self, failed: bool = False) -> None:
        with self._lock:
            if self._partial:
                self._lines.append(self._partial)
                self._partial = ""
            self.failed = failed
        self._done.set()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def lines(self) -> list[str]:
        with self._lock:
            return list(self._lines)

    # ── view side ────────────────────────────────────────────────

    def scroll(self, delta: int, height: int) -> None:
        last = max(len(self.lines()) - height, 0)
        self.top = min(max(self.top + delta, 0), last)

    def footer(self, height: int) -> str:
        if self.failed:
            state = "(failed)"
        elif not self.done:
            state = "(loading)"
        else:
            total = len(self.lines())
            shown = min(self.top + height, total)
            state = f"({shown}/{total})"
        return f"{self.prompt} {state}"

    def handle_key(self, key: str, height: int) -> bool:
        """Apply a key; returns False once the pager should close."""
        if key in QUIT_KEYS:
            return False
        if key in DOWN_KEYS:
            self.scroll(1, height)
        elif key in UP_KEYS:
            self.scroll(-1, height)
        elif key in PAGE_DOWN_KEYS:
            self.scroll(height, height)
        elif key in PAGE_UP_KEYS:
            self.scroll(-height, height)
        elif key in TOP_KEYS:
            self.top = 0
        elif key in BOTTOM_KEYS:
            self.scroll(len(self.lines()), height)
        return True

    def run(self, screen: Screen) -> None:
        """Show the buffer until the user quits."""
        running = True
        while running:
            rows, _ = screen.size()
            height = max(rows - 1, 1)
            visible = self.lines()[self.top : self.top + height]
            screen.render(visible, None, self.footer(height))
            key = screen.poll(self.poll_interval)
            if key is not None:
                running = self.handle_key(key, height)


def open_pager(
    prompt: str,
    body: Body,
    screen: Screen | None = None,
    *,
    poll_interval: float = 0.05,
) -> Pager:
    """Page `body` (text, or a callable producing it) until dismissed.

    Without a screen, a terminal session is acquired for the pager alone.
    Errors raised by the view or by the feeding task are re-raised here.
    """
    pager = Pager(prompt, poll_interval)

    def feed() -> None:
        try:
            pager.push_str(body() if callable(body) else body)
        except Exception:
            pager.finish(failed=True)
            raise
        pager.finish()

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="fours-pager") as pool:
        feeder = pool.submit(feed)
        if screen is None:
            with TerminalSession() as session:
                pager.run(session)
        else:
            pager.run(screen)
        feeder.result()
    logger.debug("Pager closed after %d lines", len(pager.lines()))
    return pager
