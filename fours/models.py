"""Post and Page records decoded from 4chan API JSON."""

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Any

from .errors import FormatError


def _optional(data: dict, key: str, kind: type) -> Any:
    value = data.get(key)
    if value is None:
        return None
    # bool is an int subclass; a flag is never a post number or image ref
    if not isinstance(value, kind) or isinstance(value, bool):
        raise FormatError(f"field {key!r} should be {kind.__name__}, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Post:
    """A single post.  Only `no` is guaranteed; `sub` is set on OPs."""

    no: int
    com: str | None = None
    tim: int | None = None
    ext: str | None = None
    sub: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Post:
        if not isinstance(data, dict):
            raise FormatError(f"post should be an object, got {type(data).__name__}")
        no = _optional(data, "no", int)
        if no is None:
            raise FormatError("post has no 'no' field")
        return cls(
            no=no,
            com=_optional(data, "com", str),
            tim=_optional(data, "tim", int),
            ext=_optional(data, "ext", str),
            sub=_optional(data, "sub", str),
        )

    @property
    def title(self) -> str | None:
        """Subject with HTML entities decoded, as the API escapes it."""
        return html.unescape(self.sub) if self.sub else None


@dataclass(frozen=True)
class Page:
    """One page of a catalog listing."""

    page: int
    threads: tuple[Post, ...]

    @classmethod
    def from_dict(cls, data: Any) -> Page:
        if not isinstance(data, dict):
            raise FormatError(f"catalog page should be an object, got {type(data).__name__}")
        threads = data.get("threads")
        if not isinstance(threads, list):
            raise FormatError("catalog page has no 'threads' list")
        return cls(
            page=_optional(data, "page", int) or 0,
            threads=tuple(Post.from_dict(t) for t in threads),
        )


def parse_catalog(payload: Any) -> list[Page]:
    """Decode catalog.json (an array of pages)."""
    if not isinstance(payload, list):
        raise FormatError("catalog should be an array of pages")
    return [Page.from_dict(p) for p in payload]


def parse_thread(payload: Any) -> list[Post]:
    """Decode thread/<no>.json (an object holding a 'posts' array)."""
    if not isinstance(payload, dict):
        raise FormatError("thread should be an object")
    posts = payload.get("posts")
    if not isinstance(posts, list):
        raise FormatError("thread has no 'posts' list")
    return [Post.from_dict(p) for p in posts]
