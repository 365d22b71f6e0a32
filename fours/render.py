"""Text pipeline – turn post markup into padded, wrapped plain text."""

from __future__ import annotations

import html
import textwrap
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import (
    CData,
    NavigableString,
    RubyParenthesisString,
    RubyTextString,
    Script,
    Stylesheet,
    TemplateString,
)

from .config import FourChanConfig
from .errors import RenderError
from .models import Post

if TYPE_CHECKING:
    from .thread import Thread

WIDTH = 69
FILL = "-"

# get_text() skips the raw-text containers by default
TEXT_NODES = (
    NavigableString,
    CData,
    Script,
    Stylesheet,
    TemplateString,
    RubyTextString,
    RubyParenthesisString,
)


def leftpad(label: str, width: int = WIDTH) -> str:
    """Right-justify `label` with dashes; longer labels come back untouched."""
    if len(label) <= width:
        return label.rjust(width, FILL)
    return label


def selective_wrap(text: str, width: int = WIDTH) -> str:
    """Wrap lines of text, but not lines with URLs."""
    return "\n".join(
        line if "http" in line else textwrap.fill(line, width)
        for line in text.split("\n")
    )


def decode(post: Post) -> str | None:
    """Sanitise HTML line breaks, decode entities and flatten to plain text.

    Every text node counts, including the contents of script, style and
    template elements.  Returns None when the post has no comment.
    """
    if post.com is None:
        return None
    fragment = html.unescape(post.com.replace("<wbr>", "").replace("<br>", "\n"))
    try:
        soup = BeautifulSoup(fragment, "lxml")
    except ParserRejectedMarkup as exc:
        raise RenderError(f"post {post.no}: {exc}") from exc
    return soup.get_text(types=TEXT_NODES)


def image_url(post: Post, board: str, image_base: str = FourChanConfig.image_base) -> str | None:
    if post.tim is None:
        return None
    return f"{image_base}/{board}/{post.tim}{post.ext or '.jpg'}"


def render_post(
    post: Post,
    board: str,
    *,
    width: int = WIDTH,
    image_base: str = FourChanConfig.image_base,
) -> str:
    """Order: post id (leftpadded), image, comment.

    Either image or comment will be present, sometimes both.  A post with
    neither renders as nothing.
    """
    if post.com is None and post.tim is None:
        return ""
    out = [leftpad(str(post.no), width), "\n"]
    url = image_url(post, board, image_base)
    if url is not None:
        out += [url, "\n"]
    body = decode(post)
    if body is not None:
        out += [selective_wrap(body, width), "\n"]
    return "".join(out)


def render_thread(
    thread: Thread,
    *,
    banner: bool = False,
    width: int = WIDTH,
    image_base: str = FourChanConfig.image_base,
) -> str:
    posts = "".join(
        render_post(post, thread.board, width=width, image_base=image_base)
        for post in thread.posts
    )
    if not banner:
        return posts
    rule = leftpad(thread.url, width) + "\n"
    return rule + posts + rule
