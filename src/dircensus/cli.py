"""CLI interface for dircensus."""

import logging
import time
from pathlib import Path
from typing import Optional

import click
import typer
from pydantic import ValidationError
from typer.core import TyperGroup

from dircensus import __version__
from dircensus.cache import CensusCache
from dircensus.config import BrowserConfig
from dircensus.dispatcher import WorkDispatcher
from dircensus.display import console, show_census, show_counting_progress
from dircensus.navigation import NavigationEngine

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

# Top-level options that take a value
VALUE_OPTIONS = {"--log-file", "--log-level"}


class BrowseByDefaultGroup(TyperGroup):
    """Route `dircensus [PATH]` and a bare `dircensus` to the browse command."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        args = list(args)
        i = 0
        while i < len(args):
            arg = args[i]
            if arg in VALUE_OPTIONS:
                i += 2
                continue
            if arg.startswith("-"):
                i += 1
                continue
            if arg not in self.commands:
                args.insert(i, "browse")
            break
        else:
            args.append("browse")
        return super().parse_args(ctx, args)


# Create Typer app
app = typer.Typer(
    name="dircensus",
    cls=BrowseByDefaultGroup,
    help="Browse directories with recursive file counts computed in the background",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"dircensus version {__version__}")
        raise typer.Exit()


def configure_logging(log_file: Optional[Path], log_level: str) -> None:
    """Send package logs to a file, or nowhere.

    The browser owns the whole terminal, so logs are never written to it.
    """
    package_logger = logging.getLogger("dircensus")
    package_logger.setLevel(getattr(logging, log_level.upper()))
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    if log_file is None:
        package_logger.addHandler(logging.NullHandler())
        return

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s")
    )
    package_logger.addHandler(handler)
    logger.debug(f"Set logging level to {log_level}")


def resolve_start_dir(path: Optional[Path]) -> Path:
    """Validate the starting directory, defaulting to the working directory."""
    start_dir = path if path is not None else Path.cwd()
    if not start_dir.exists():
        console.print(f"[red]Error: {start_dir} does not exist[/red]")
        raise typer.Exit(1)
    if not start_dir.is_dir():
        console.print(f"[red]Error: {start_dir} is not a directory[/red]")
        raise typer.Exit(1)
    return start_dir


def build_config(**options) -> BrowserConfig:
    """Validate options into a BrowserConfig or exit with an error."""
    try:
        return BrowserConfig.from_options(**options)
    except ValidationError as e:
        console.print("[red]Invalid configuration:[/red]")
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            console.print(f"  • {field}: {error['msg']}")
        raise typer.Exit(1)


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        envvar="DIRCENSUS_LOG_FILE",
        help="Write logs to this file (nothing is logged otherwise).",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        envvar="DIRCENSUS_LOG_LEVEL",
        help=f"Logging level: {', '.join(LOG_LEVELS)}.",
    ),
) -> None:
    """dircensus - browse directories with recursive file counts."""
    if log_level.upper() not in LOG_LEVELS:
        console.print(f"[red]Unknown log level: {log_level}[/red]")
        raise typer.Exit(1)

    configure_logging(log_file, log_level)


@app.command()
def browse(
    path: Optional[Path] = typer.Argument(None, help="Directory to start in (default: current directory)"),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", envvar="DIRCENSUS_WORKERS", help="Counting threads (default: CPU count)"
    ),
    poll_interval: Optional[float] = typer.Option(
        None, "--poll-interval", envvar="DIRCENSUS_POLL_INTERVAL", help="Seconds between UI refreshes"
    ),
    hide_hidden: bool = typer.Option(False, "--hide-hidden", help="Don't list dot-files"),
) -> None:
    """Interactive directory browser (default)."""
    start_dir = resolve_start_dir(path)
    config = build_config(
        workers=workers,
        poll_interval=poll_interval,
        show_hidden=not hide_hidden,
    )

    from dircensus.tui import run_tui

    logger.info(f"Browsing {start_dir} with {config.workers} workers")
    run_tui(start_dir, config=config)


@app.command()
def count(
    path: Optional[Path] = typer.Argument(None, help="Directory to count (default: current directory)"),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", envvar="DIRCENSUS_WORKERS", help="Counting threads (default: CPU count)"
    ),
    hide_hidden: bool = typer.Option(False, "--hide-hidden", help="Don't list dot-files"),
) -> None:
    """Print the recursive file count of every subdirectory and exit."""
    start_dir = resolve_start_dir(path)
    config = build_config(workers=workers, show_hidden=not hide_hidden)

    dispatcher = WorkDispatcher(CensusCache(), max_workers=config.workers)
    try:
        engine = NavigationEngine(start_dir, dispatcher, show_hidden=config.show_hidden)

        with show_counting_progress() as progress:
            pending = [e for e in engine.items if e.is_counting]
            task = progress.add_task("Counting files...", total=len(pending) + 1)

            while engine.has_pending_counts:
                engine.poll()
                done = sum(1 for e in pending if e.file_count is not None)
                if engine.current_dir_count is not None:
                    done += 1
                progress.update(task, completed=done)
                time.sleep(config.poll_interval)

        show_census(engine.header_text(), engine.items)
    finally:
        dispatcher.shutdown(wait=False)


if __name__ == "__main__":
    app()
