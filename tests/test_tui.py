from __future__ import annotations

import pytest

from conftest import FakeAPI, FakeScreen, FakeSession
from fours.errors import FetchError, RenderError
from fours.models import Page, Post
from fours.render import leftpad
from fours.thread import Catalog, Thread
from fours.tui import BrowseLoop, State


class RecordingPager:
    def __init__(self, loop_ref=None, error=None):
        self.calls = []
        self.loop = loop_ref
        self.error = error
        self.states = []

    def __call__(self, prompt, body, screen, **kwargs):
        self.calls.append((prompt, body, screen))
        if self.loop is not None:
            self.states.append(self.loop.state)
        if self.error is not None:
            raise self.error


def _loop(catalog, keys, pager=None, on_poll=None):
    screen = FakeScreen(keys, on_poll=on_poll)
    session = FakeSession(screen)
    loop = BrowseLoop(catalog, session=session, pager=pager or RecordingPager(), poll_interval=0.0)
    return loop, screen, session


def test_quit_keys_exit(two_pages):
    for key in ("q", "x"):
        loop, _, session = _loop(Catalog("g", two_pages), [key, "j"])
        assert loop.run() == []
        assert loop.state is State.EXITED
        assert (session.entered, session.exited) == (1, 1)


def test_moves_are_clamped_and_drawn(two_pages):
    catalog = Catalog("g", two_pages)
    loop, screen, _ = _loop(catalog, ["j", "j", "j", "k", "k", "q"])
    loop.run()
    highlights = [frame[1] for frame in screen.frames]
    assert highlights == [0, 1, 1, 1, 0, 0]
    assert screen.frames[0][0] == ["Foo", "Bar"]


def test_idle_polls_change_nothing(two_pages):
    catalog = Catalog("g", two_pages)
    loop, screen, _ = _loop(catalog, [None, None, "q"])
    loop.run()
    assert len(screen.frames) == 3
    assert catalog.cursor == 0


def test_open_pages_the_selected_thread(fake_api, two_pages):
    catalog = Catalog("g", two_pages, fake_api)
    pager = RecordingPager()
    loop, screen, _ = _loop(catalog, ["l", "q"], pager)
    pager.loop = loop
    loop.run()

    [(prompt, body, used_screen)] = pager.calls
    assert prompt == leftpad("https://boards.4chan.org/g/thread/1")
    assert body == Thread("g", 1, fake_api.threads[1]).render()
    assert used_screen is screen
    assert pager.states == [State.PAGING]
    assert fake_api.calls == [("thread", "g", 1)]


def test_fetch_failure_keeps_browsing_with_terminal_held(two_pages):
    api = FakeAPI(two_pages, {1: FetchError("HTTP 500")})
    catalog = Catalog("g", two_pages, api)
    seen = []
    loop, screen, session = _loop(catalog, ["l", "j", "q"], on_poll=lambda: seen.append((loop.state, session.active)))
    pager = RecordingPager()
    loop._pager = pager

    errors = loop.run()

    assert [type(e) for e in errors] == [FetchError]
    assert pager.calls == []
    assert seen == [(State.BROWSING, True)] * 3
    assert (session.entered, session.exited) == (1, 1)
    assert screen.frames[1][2].startswith("error:")
    assert catalog.cursor == 1


def test_render_failure_is_recoverable(fake_api, two_pages, monkeypatch):
    def broken(self, **kwargs):
        raise RenderError("bad markup")

    monkeypatch.setattr(Thread, "render", broken)
    catalog = Catalog("g", two_pages, fake_api)
    pager = RecordingPager()
    loop, _, _ = _loop(catalog, ["l", "q"], pager)
    errors = loop.run()
    assert [type(e) for e in errors] == [RenderError]
    assert pager.calls == []


def test_unexpected_error_still_releases_terminal(fake_api, two_pages):
    catalog = Catalog("g", two_pages, fake_api)
    loop, _, session = _loop(catalog, ["l"], RecordingPager(error=RuntimeError("boom")))
    with pytest.raises(RuntimeError):
        loop.run()
    assert (session.entered, session.exited) == (1, 1)
    assert loop.state is State.EXITED


def test_empty_catalog_ignores_navigation():
    catalog = Catalog("g", [Page(1, (Post(1),))])
    pager = RecordingPager()
    loop, screen, _ = _loop(catalog, ["l", "j", "k", "q"], pager)
    assert loop.run() == []
    assert pager.calls == []
    assert all(frame[1] is None for frame in screen.frames)


def test_list_scrolls_to_keep_cursor_visible():
    posts = tuple(Post(i, sub=f"thread {i}") for i in range(30))
    catalog = Catalog("g", [Page(1, posts)])
    loop, screen, _ = _loop(catalog, ["j"] * 12 + ["q"])
    screen.rows = 6
    loop.run()
    rows, highlight, _ = screen.frames[-1]
    assert rows[highlight] == "thread 12"
    assert len(rows) == 5


def test_catalog_browse_runs_the_loop(two_pages):
    session = FakeSession(FakeScreen(["j", "q"]))
    catalog = Catalog("g", two_pages)
    assert catalog.browse(session=session, poll_interval=0.0) == []
    assert catalog.cursor == 1
