"""Catalog and Thread – the boards as the reader sees them."""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import Callable, Iterable, Sequence

from .api import FourChanAPI
from .config import FourChanConfig
from .errors import FetchError, FormatError, FoursError, NotFound
from .models import Page, Post
from .pager import Pager, open_pager
from .render import WIDTH, leftpad, render_thread
from .terminal import Screen, TerminalSession

logger = logging.getLogger("fours.thread")


class Thread:
    """An OP and its replies, in the order the API returned them."""

    def __init__(
        self,
        board: str,
        thread_no: int,
        posts: Iterable[Post],
        cfg: FourChanConfig | None = None,
    ) -> None:
        self.board = board
        self.thread_no = thread_no  # equivalent to the OP's `no`
        self.posts: tuple[Post, ...] = tuple(posts)
        self.cfg = cfg or FourChanConfig()

    @classmethod
    def fetch(cls, board: str, thread_no: int, api: FourChanAPI | None = None) -> Thread:
        """Fetch a thread.  Raises FetchError or FormatError."""
        if api is None:
            with FourChanAPI() as own:
                return cls.fetch(board, thread_no, own)
        return cls(board, thread_no, api.fetch_thread(board, thread_no), api.cfg)

    @property
    def url(self) -> str:
        return f"{self.cfg.boards_base}/{self.board}/thread/{self.thread_no}"

    @property
    def subject(self) -> str | None:
        return self.posts[0].title if self.posts else None

    def render(self, *, banner: bool = False, width: int = WIDTH) -> str:
        return render_thread(self, banner=banner, width=width, image_base=self.cfg.image_base)

    def page(
        self,
        screen: Screen | None = None,
        *,
        banner: bool = False,
        width: int = WIDTH,
        poll_interval: float = 0.05,
    ) -> Pager:
        """Open the thread in the pager; rendering happens on the feeder."""
        return open_pager(
            leftpad(self.url, width),
            lambda: self.render(banner=banner, width=width),
            screen,
            poll_interval=poll_interval,
        )

    def __repr__(self) -> str:
        return f"Thread(/{self.board}/{self.thread_no}, {len(self.posts)} posts)"


class Catalog:
    """Every active thread on a board, flattened to the OPs with a subject.

    The flattened list is fixed at construction.  `cursor` indexes into it,
    and is None when there is nothing to select.
    """

    def __init__(self, board: str, pages: Iterable[Page], api: FourChanAPI | None = None) -> None:
        self.board = board
        self.pages: tuple[Page, ...] = tuple(pages)
        self.posts: tuple[Post, ...] = tuple(
            post for page in self.pages for post in page.threads if post.sub
        )
        self.cursor: int | None = 0 if self.posts else None
        self._api = api

    @classmethod
    def fetch(cls, board: str, api: FourChanAPI | None = None) -> Catalog:
        """Fetch a board's catalog.  Raises FetchError or FormatError."""
        api = api or FourChanAPI()
        return cls(board, api.fetch_catalog(board), api)

    @property
    def api(self) -> FourChanAPI:
        if self._api is None:
            self._api = FourChanAPI()
        return self._api

    @property
    def subjects(self) -> Sequence[str]:
        return [post.title or "" for post in self.posts]

    # ── selection ────────────────────────────────────────────────

    @property
    def selected(self) -> Post | None:
        if self.cursor is None:
            return None
        return self.posts[self.cursor]

    def move_down(self) -> None:
        if self.cursor is not None:
            self.cursor = min(self.cursor + 1, len(self.posts) - 1)

    def move_up(self) -> None:
        if self.cursor is not None:
            self.cursor = max(self.cursor - 1, 0)

    # ── lookup ───────────────────────────────────────────────────

    def find_post(self, subject: str) -> Post:
        """First OP whose subject contains `subject` (case-sensitive)."""
        for post in self.posts:
            if post.title and subject in post.title:
                return post
        raise NotFound(f"no thread on /{self.board}/ matches {subject!r}")

    def open(self, post: Post) -> Thread:
        return Thread.fetch(self.board, post.no, self.api)

    def find_thread(self, subject: str) -> Thread | None:
        try:
            post = self.find_post(subject)
        except NotFound:
            return None
        try:
            return self.open(post)
        except (FetchError, FormatError) as exc:
            logger.warning("Could not fetch /%s/%d: %s", self.board, post.no, exc)
            return None

    def browse(
        self,
        *,
        session: Callable[[], AbstractContextManager[Screen]] = TerminalSession,
        pager: Callable[..., object] = open_pager,
        poll_interval: float = 0.05,
        banner: bool = False,
        width: int = WIDTH,
    ) -> list[FoursError]:
        """Run the interactive browser; returns the errors it recovered from."""
        from .tui import BrowseLoop

        loop = BrowseLoop(
            self,
            session=session,
            pager=pager,
            poll_interval=poll_interval,
            banner=banner,
            width=width,
        )
        return loop.run()

    # ── lifecycle ────────────────────────────────────────────────

    def close(self) -> None:
        if self._api is not None:
            self._api.close()

    def __enter__(self) -> Catalog:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
