"""CLI entry-point for fours."""

from __future__ import annotations

import logging
import sys
from dataclasses import replace
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .api import FourChanAPI
from .config import FoursConfig
from .errors import FoursError, NotFound
from .storage import write_thread
from .thread import Catalog, Thread

console = Console()

_FOURCHAN_OPTIONS = ("api_base", "image_base", "boards_base", "request_delay", "timeout")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, console=console)],
    )
    # Suppress noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _fail(message: str) -> None:
    console.print(f"[red]✗[/red] {message}")
    sys.exit(1)


def _show(cfg: FoursConfig, thread: Thread, pager: bool, banner: bool, output_dir: Path | None) -> None:
    """Page a thread, or write it to disk and print where."""
    banner = banner or cfg.banner
    if pager:
        thread.page(banner=banner, width=cfg.width, poll_interval=cfg.poll_interval)
        return
    path = write_thread(thread, output_dir or cfg.output_dir, banner=banner, width=cfg.width)
    console.print(f"[green]✓[/green] /{thread.board}/{thread.thread_no} written to [bold]{path}[/bold]")


_output_options = [
    click.option("--pager", is_flag=True, help="Open in the pager instead of writing a file"),
    click.option("--banner", is_flag=True, help="Frame the text with the thread URL"),
    click.option(
        "--output-dir",
        type=click.Path(file_okay=False, path_type=Path),
        default=None,
        help="Directory for written threads (default /tmp)",
    ),
]


def output_options(func):  # type: ignore[no-untyped-def]
    for option in reversed(_output_options):
        func = option(func)
    return func


@click.group()
@click.option("--api-base", default=None, help="4chan JSON API base URL [env FOURS_API_BASE]")
@click.option("--image-base", default=None, help="Image host base URL [env FOURS_IMAGE_BASE]")
@click.option("--boards-base", default=None, help="Thread page base URL [env FOURS_BOARDS_BASE]")
@click.option("--request-delay", default=None, type=float, help="Seconds between API requests [env FOURS_REQUEST_DELAY]")
@click.option("--timeout", default=None, type=float, help="HTTP timeout in seconds [env FOURS_TIMEOUT]")
@click.option("--width", default=None, type=click.IntRange(min=1), help="Wrap width for rendered text [env FOURS_WIDTH]")
@click.option("--banner/--no-banner", default=None, help="Frame threads with the thread URL [env FOURS_BANNER]")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, **kwargs: object) -> None:
    """fours – read 4chan boards from the terminal.

    Browse a board's catalog, or fetch a single thread and page it or
    write it to a text file.  Settings come from FOURS_* environment
    variables; options given here take precedence.
    """
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    given = {key: value for key, value in kwargs.items() if value is not None}
    cfg = FoursConfig.from_env()
    fourchan = {key: given.pop(key) for key in _FOURCHAN_OPTIONS if key in given}
    ctx.obj["cfg"] = replace(cfg, fourchan=replace(cfg.fourchan, **fourchan), **given)


# ─── Commands ────────────────────────────────────────────────────


@cli.command()
@click.argument("board")
@click.option("--banner", is_flag=True, help="Frame paged threads with the thread URL")
@click.pass_context
def browse(ctx: click.Context, board: str, banner: bool) -> None:
    """Browse a board's catalog interactively.

    j/k move, l opens the thread in the pager, q leaves.

    Example: fours browse g
    """
    cfg: FoursConfig = ctx.obj["cfg"]
    with FourChanAPI(cfg.fourchan) as api:
        try:
            catalog = Catalog.fetch(board, api)
            errors = catalog.browse(
                poll_interval=cfg.poll_interval,
                banner=banner or cfg.banner,
                width=cfg.width,
            )
        except FoursError as exc:
            _fail(str(exc))
            return
    for exc in errors:
        console.print(f"[yellow]![/yellow] {exc}")


@cli.command()
@click.argument("board")
@click.argument("thread_no", type=int)
@output_options
@click.pass_context
def thread(ctx: click.Context, board: str, thread_no: int, pager: bool, banner: bool, output_dir: Path | None) -> None:
    """Fetch a single thread by number.

    Example: fours thread g 12345678 --pager
    """
    cfg: FoursConfig = ctx.obj["cfg"]
    with FourChanAPI(cfg.fourchan) as api:
        try:
            t = Thread.fetch(board, thread_no, api)
            _show(cfg, t, pager, banner, output_dir)
        except FoursError as exc:
            _fail(f"/{board}/{thread_no}: {exc}")


@cli.command()
@click.argument("board")
@click.argument("subject")
@output_options
@click.pass_context
def find(ctx: click.Context, board: str, subject: str, pager: bool, banner: bool, output_dir: Path | None) -> None:
    """Fetch the first catalog thread whose subject contains SUBJECT.

    Example: fours find g "desktop thread"
    """
    cfg: FoursConfig = ctx.obj["cfg"]
    with FourChanAPI(cfg.fourchan) as api:
        try:
            catalog = Catalog.fetch(board, api)
            post = catalog.find_post(subject)
            t = catalog.open(post)
            _show(cfg, t, pager, banner, output_dir)
        except NotFound as exc:
            _fail(str(exc))
        except FoursError as exc:
            _fail(f"/{board}/: {exc}")


@cli.command()
@click.argument("board")
@click.option("--limit", default=10, type=int, help="Number of threads to show")
@click.pass_context
def preview(ctx: click.Context, board: str, limit: int) -> None:
    """Preview the subjects a browse session would list.

    Example: fours preview g --limit 5
    """
    cfg: FoursConfig = ctx.obj["cfg"]
    with FourChanAPI(cfg.fourchan) as api:
        try:
            catalog = Catalog.fetch(board, api)
        except FoursError as exc:
            _fail(str(exc))
            return
    table = Table(title=f"/{board}/ Catalog Preview", show_header=True, header_style="bold cyan")
    table.add_column("No", style="bold", justify="right")
    table.add_column("Subject", max_width=60)
    table.add_column("Has File", justify="center")
    for post in catalog.posts[:limit]:
        table.add_row(str(post.no), post.title or "", "✓" if post.tim else "")
    console.print(table)


@cli.command(name="boards")
@click.pass_context
def list_boards(ctx: click.Context) -> None:
    """List all available 4chan boards."""
    cfg: FoursConfig = ctx.obj["cfg"]
    with FourChanAPI(cfg.fourchan) as api:
        try:
            boards = api.fetch_boards()
        except FoursError as exc:
            _fail(str(exc))
            return
    table = Table(title="4chan Boards", show_header=True, header_style="bold cyan")
    table.add_column("Board", style="bold")
    table.add_column("Title")
    table.add_column("SFW", justify="center")
    for b in sorted(boards, key=lambda x: x.get("board", "")):
        sfw = "✓" if b.get("ws_board", 0) else "✗"
        table.add_row(f"/{b.get('board', '?')}/", b.get("title", ""), sfw)
    console.print(table)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
