"""Typer CLI entrypoint for book_finder."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .config import ConfigRepository, FinderConfig
from .engine import HttpFetcher
from .errors import ValidationError
from .logging_conf import configure_logging, tail_log
from .models import Book, BookOptions
from .orchestrator import BookFinder

app = typer.Typer(
    help="Search a book catalog and print enriched, filtered results.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
config_app = typer.Typer(
    name="config",
    help="Inspect the effective configuration.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
app.add_typer(config_app, name="config")

console = Console()


@dataclass
class AppState:
    repository: ConfigRepository
    config: FinderConfig


def build_state(verbose: bool) -> AppState:
    repository = ConfigRepository()
    config = repository.load()
    repository.locator.ensure_directories()
    configure_logging(verbose=verbose, log_dir=repository.locator.logs_dir)
    return AppState(repository=repository, config=config)


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if not isinstance(state, AppState):
        raise typer.Exit(code=1)
    return state


def _render_books_table(query: str, books: list[Book]) -> Table:
    table = Table(title=f"Results for “{query}”", box=box.SIMPLE_HEAVY)
    table.add_column("Id", justify="right", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Avg", justify="right")
    table.add_column("Ratings", justify="right")
    table.add_column("Year", justify="right")
    table.add_column("Pages", justify="right")
    for book in books:
        table.add_row(
            str(book.id),
            book.title,
            book.author,
            f"{book.rating.avg:.2f}",
            f"{book.rating.count:,}",
            str(book.publisher_year or "-"),
            str(book.page_count or "-"),
        )
    return table


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging.", is_flag=True),
) -> None:
    ctx.obj = build_state(verbose)


@app.command("search", help="Search the catalog and enrich each hit from its detail page.")
def search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Search terms."),
    limit: int = typer.Option(10, "--limit", "-n", help="Maximum number of books to return."),
    min_ratings: Optional[int] = typer.Option(None, "--min-ratings", help="Minimum rating count."),
    min_rating_avg: Optional[float] = typer.Option(
        None, "--min-rating-avg", help="Minimum average rating (0-5)."
    ),
    require_author: Optional[bool] = typer.Option(
        None, "--require-author/--allow-unknown-author", help="Drop books without a real author."
    ),
    keep_dups: bool = typer.Option(False, "--keep-dups", help="Do not drop repeated ids.", is_flag=True),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Concurrent detail fetches."),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON.", is_flag=True),
) -> None:
    state = _get_state(ctx)
    config = state.config.merged(pool_size=workers)
    defaults = config.default_options
    options = BookOptions(
        min_ratings=defaults.min_ratings if min_ratings is None else min_ratings,
        min_rating_avg=defaults.min_rating_avg if min_rating_avg is None else min_rating_avg,
        require_author=defaults.require_author if require_author is None else require_author,
        remove_dups=False if keep_dups else defaults.remove_dups,
    )
    with HttpFetcher(config) as fetcher:
        finder = BookFinder(fetcher, config)
        try:
            books = finder.find_books(query, limit, options)
        except ValidationError as exc:
            console.print(f"Invalid search: {exc}", style="red")
            raise typer.Exit(code=2) from exc
        finder.wait_drained()
    if as_json:
        typer.echo(json.dumps([book.to_dict() for book in books], ensure_ascii=False, indent=2))
        return
    if not books:
        console.print("No books matched.", style="yellow")
        return
    console.print(_render_books_table(query, books))


@config_app.command("show", help="Print the effective configuration as JSON.")
def config_show(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    typer.echo(json.dumps(state.config.model_dump(mode="json"), ensure_ascii=False, indent=2))
    typer.echo(f"# {state.repository.locator.config_path}")


@app.command("logs", help="Show the last lines of the application log.")
def logs(
    ctx: typer.Context,
    tail: int = typer.Option(50, "--tail", help="Number of lines to show."),
    errors_only: bool = typer.Option(False, "--errors", help="Show error.log instead.", is_flag=True),
) -> None:
    state = _get_state(ctx)
    name = "error.log" if errors_only else "finder.log"
    lines = tail_log(state.repository.locator.logs_dir / name, tail)
    if not lines:
        console.print("Log is empty.", style="dim")
        return
    for line in lines:
        typer.echo(line.rstrip("\n"))


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()
