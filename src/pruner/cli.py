"""Command line interface for pruner."""

import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from pruner.branches import build_working_set
from pruner.console import console, held_logs, setup_logging, stderr_console
from pruner.errors import PrunerError
from pruner.git import GitRepo
from pruner.review import ReviewSession, ReviewSummary
from pruner.terminal import Terminal

app = typer.Typer(help="Review local git branches one at a time and prune the stale ones")


def fail(err: PrunerError) -> typer.Exit:
    """Report an error on stderr and build the exit to raise."""
    stderr_console.print(f"[red]Error:[/red] {escape(str(err))}", highlight=False)
    return typer.Exit(code=1)


def get_repo(path: Path) -> GitRepo:
    """Get git repository instance."""
    try:
        return GitRepo(path)
    except PrunerError as err:
        raise fail(err) from err


def create_summary_table(summary: ReviewSummary) -> Table:
    """Create a table listing what happened to each reviewed branch."""
    table = Table(
        title="Review Summary",
        show_header=True,
        header_style="bold",
        title_style="bold blue",
        show_edge=True,
    )
    table.add_column("Branch", style="cyan", no_wrap=True)
    table.add_column("Result", justify="center", no_wrap=True)

    for branch in summary.deleted:
        table.add_row(escape(branch), "[red]deleted[/red]")
    for branch in summary.restored:
        table.add_row(escape(branch), "[green]restored[/green]")
    for branch in summary.kept:
        table.add_row(escape(branch), "kept")
    for branch in summary.skipped:
        table.add_row(escape(branch), "[turquoise2]current[/turquoise2]")
    if summary.quit:
        table.caption = "quit early, later branches were not reviewed"
    return table


@app.command()
def review(
    path: Annotated[Path, typer.Option(help="Path to git repository", envvar="PRUNER_PATH")] = Path("."),
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging", envvar="PRUNER_VERBOSE")
    ] = False,
) -> None:
    """Review local branches, oldest last commit first, and delete the ones you no longer need."""
    setup_logging(verbose)
    repo = get_repo(path)

    try:
        branches = build_working_set(repo)
        # Logs are held until raw mode is released
        with held_logs(), Terminal(sys.stdin, console) as terminal:
            summary = ReviewSession(repo, terminal).run(branches)
    except PrunerError as err:
        raise fail(err) from err

    if summary.kept or summary.deleted or summary.restored or summary.skipped:
        console.print()  # Add a blank line
        console.print(create_summary_table(summary))


if __name__ == "__main__":
    app()
