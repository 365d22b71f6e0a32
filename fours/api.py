"""4chan API client – rate-limited JSON fetcher."""

from __future__ import annotations

import time
import logging
from typing import Any

import httpx

from .config import FourChanConfig
from .errors import FetchError, FormatError
from .models import Page, Post, parse_catalog, parse_thread

logger = logging.getLogger("fours.api")


class FourChanAPI:
    """Thin wrapper around the 4chan JSON API with rate limiting.

    Every request is made exactly once: transport and HTTP status failures
    raise FetchError, undecodable or misshapen payloads raise FormatError.
    """

    def __init__(
        self,
        cfg: FourChanConfig | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.cfg = cfg or FourChanConfig()
        self._last_request: float = 0.0
        self._client = httpx.Client(
            timeout=self.cfg.timeout,
            headers={"User-Agent": "fours/0.1"},
            follow_redirects=True,
            transport=transport,
        )

    # ── rate limiting ────────────────────────────────────────────
    def _throttle(self) -> None:
        elapsed = time.monotonic() - self._last_request
        if elapsed < self.cfg.request_delay:
            time.sleep(self.cfg.request_delay - elapsed)
        self._last_request = time.monotonic()

    def _get_json(self, url: str) -> Any:
        self._throttle()
        logger.debug("GET %s", url)
        try:
            resp = self._client.get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(f"{url}: HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"{url}: {exc}") from exc
        try:
            return resp.json()
        except ValueError as exc:
            raise FormatError(f"{url}: response is not JSON") from exc

    # ── public API ───────────────────────────────────────────────

    def fetch_boards(self) -> list[dict]:
        """Fetch all boards from boards.json."""
        data = self._get_json(f"{self.cfg.api_base}/boards.json")
        if not isinstance(data, dict) or not isinstance(data.get("boards"), list):
            raise FormatError("boards.json has no 'boards' list")
        return data["boards"]

    def fetch_catalog(self, board: str) -> list[Page]:
        """Fetch the catalog for a board (pages with OPs)."""
        pages = parse_catalog(self._get_json(f"{self.cfg.api_base}/{board}/catalog.json"))
        logger.debug("Catalog /%s/: %d pages", board, len(pages))
        return pages

    def fetch_thread(self, board: str, thread_no: int) -> list[Post]:
        """Fetch a full thread (OP + all replies)."""
        posts = parse_thread(self._get_json(f"{self.cfg.api_base}/{board}/thread/{thread_no}.json"))
        logger.debug("Thread /%s/%d: %d posts", board, thread_no, len(posts))
        return posts

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> FourChanAPI:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
