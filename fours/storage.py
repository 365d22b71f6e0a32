"""Disk output – write rendered threads to plain-text files."""

from __future__ import annotations

import logging
from pathlib import Path

from .render import WIDTH
from .thread import Thread

logger = logging.getLogger("fours.storage")


def thread_path(thread: Thread, directory: Path) -> Path:
    """`{board}-{subject}` lowercased, falling back to the thread number."""
    name = thread.subject or str(thread.thread_no)
    name = name.replace("/", "_").replace("\0", "")
    return Path(directory) / f"{thread.board}-{name}".lower()


def write_thread(
    thread: Thread,
    directory: Path,
    *,
    banner: bool = False,
    width: int = WIDTH,
) -> Path:
    path = thread_path(thread, directory)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(thread.render(banner=banner, width=width), encoding="utf-8")
    logger.info("Wrote %r to %s", thread, path)
    return path
