from __future__ import annotations

from typing import Sequence

import pytest

from fours.config import FourChanConfig
from fours.errors import FetchError
from fours.models import Page, Post


class FakeAPI:
    """Stands in for FourChanAPI; records every fetch."""

    def __init__(self, pages: Sequence[Page] = (), threads: dict | None = None):
        self.cfg = FourChanConfig(request_delay=0.0)
        self.pages = list(pages)
        self.threads = threads or {}
        self.calls: list[tuple] = []
        self.closed = False

    def fetch_catalog(self, board: str) -> list[Page]:
        self.calls.append(("catalog", board))
        return self.pages

    def fetch_thread(self, board: str, thread_no: int) -> list[Post]:
        self.calls.append(("thread", board, thread_no))
        found = self.threads.get(thread_no)
        if isinstance(found, Exception):
            raise found
        if found is None:
            raise FetchError(f"/{board}/{thread_no}: HTTP 404")
        return found

    def fetch_boards(self) -> list[dict]:
        self.calls.append(("boards",))
        return [{"board": "g", "title": "Technology", "ws_board": 1}]

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> FakeAPI:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class FakeScreen:
    """Scripted keys in, rendered frames out.  Quits once the script runs dry."""

    def __init__(self, keys: Sequence[str | None] = (), rows: int = 24, cols: int = 80, on_poll=None):
        self.keys = list(keys)
        self.rows = rows
        self.cols = cols
        self.frames: list[tuple[list[str], int | None, str]] = []
        self.on_poll = on_poll

    def size(self) -> tuple[int, int]:
        return self.rows, self.cols

    def render(self, rows, highlight, footer) -> None:
        self.frames.append((list(rows), highlight, footer))

    def poll(self, timeout: float) -> str | None:
        if self.on_poll is not None:
            self.on_poll()
        if self.keys:
            return self.keys.pop(0)
        return "q"


class FakeSession:
    """Callable that hands out a FakeScreen as a terminal session."""

    def __init__(self, screen: FakeScreen):
        self.screen = screen
        self.entered = 0
        self.exited = 0

    @property
    def active(self) -> bool:
        return self.entered > self.exited

    def __call__(self) -> FakeSession:
        return self

    def __enter__(self) -> FakeScreen:
        self.entered += 1
        return self.screen

    def __exit__(self, *args: object) -> None:
        self.exited += 1


@pytest.fixture
def two_pages() -> list[Page]:
    return [
        Page(page=1, threads=(Post(no=1, sub="Foo", com="op one"), Post(no=2))),
        Page(page=2, threads=(Post(no=3, sub="Bar", tim=1700000000123, ext=".png"),)),
    ]


@pytest.fixture
def thread_posts() -> list[Post]:
    return [
        Post(no=1, sub="Foo", com="first<br>line", tim=1700000000001, ext=".jpg"),
        Post(no=4, com='<a href="#p1" class="quotelink">&gt;&gt;1</a><br>reply'),
    ]


@pytest.fixture
def fake_api(two_pages, thread_posts) -> FakeAPI:
    return FakeAPI(two_pages, {1: thread_posts})
