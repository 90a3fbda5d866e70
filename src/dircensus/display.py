"""Rich terminal display for dircensus."""

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from dircensus.models import DirectoryEntry

console = Console()


def type_label(entry: DirectoryEntry) -> str:
    """Styled Type cell for a listing row."""
    if entry.is_dir:
        return "[blue]Dir[/blue]"
    return "[bright_black]File[/bright_black]"


def count_label(entry: DirectoryEntry, spinner: str = "...") -> str:
    """Count cell: the count for directories, a dash for files."""
    if not entry.is_dir:
        return "-"
    if entry.file_count is None:
        return spinner
    return str(entry.file_count)


def show_census(header: str, entries: list[DirectoryEntry]) -> None:
    """Display a sorted listing with its counts."""
    console.print(f"[bold]{escape(header)}[/bold]", soft_wrap=True)
    console.print()

    if not entries:
        console.print("[dim]Directory is empty or unreadable[/dim]")
        return

    table = Table(title="File Counter", show_header=True, header_style="bold yellow")
    table.add_column("Type")
    table.add_column("Name")
    table.add_column("Count", justify="right")

    for entry in entries:
        name = escape(entry.name)
        if entry.is_parent:
            name = f"[green]{name}[/green]"
        table.add_row(type_label(entry), name, count_label(entry))

    console.print(table)


def show_counting_progress() -> Progress:
    """Create spinner for a blocking census."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
