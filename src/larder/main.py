"""
Larder - CLI Entry Point.

Usage:
    larder scrape URL                 Scrape a recipe page
    larder scrape URL --html page.html  Extract from a saved page
    larder normalize "1½ cups flour"  Normalize ingredient lines
    larder scale "2 tbsp butter" --factor 3
    larder serve                      Start the HTTP API
    larder --help                     Show help
"""

import asyncio
import logging
import os
import sys
from dataclasses import asdict
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from larder.config import settings
from larder.ingredients import (
    NormalizationOptions,
    normalize_ingredients,
    scale_ingredient,
    scale_servings,
    split_leading_measurement,
)
from larder.recipe_import import (
    InvalidRecipeUrl,
    RetrievalFailure,
    create_repository,
    import_recipe,
)

app = typer.Typer(
    name="larder",
    help="Larder - Recipe import and ingredient normalization.",
    add_completion=False,
)
console = Console()


def setup_logging(verbose: bool = False):
    """Setup logging to stderr at LOG_LEVEL, or DEBUG when verbose."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Quiet down noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Larder - Recipe import and ingredient normalization."""
    setup_logging(verbose)


def _emphasize(line: str) -> str:
    """Rich markup with the leading measurement in bold."""
    split = split_leading_measurement(line)
    if split is None:
        return escape(line)
    measurement, rest = split
    return f"[bold]{escape(measurement)}[/bold] {escape(rest)}"


@app.command()
def scrape(
    url: str = typer.Argument(..., help="Recipe page URL"),
    html_file: Path | None = typer.Option(None, "--html", help="Extract from a saved HTML file instead of fetching"),
    as_json: bool = typer.Option(False, "--json", help="Print the recipe as JSON"),
) -> None:
    """Scrape a recipe from a URL."""
    html = html_file.read_text(encoding="utf-8") if html_file else None

    try:
        outcome = asyncio.run(import_recipe(url, html, repository=create_repository()))
    except InvalidRecipeUrl as e:
        console.print(f"[red]Invalid URL:[/red] {escape(str(e))}")
        raise typer.Exit(2)
    except RetrievalFailure as e:
        console.print(f"[red]Could not load page:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if as_json:
        console.print_json(data=asdict(outcome.data))
        return

    data = outcome.data
    header = f"[bold green]{escape(data.title or 'Untitled recipe')}[/bold green]"
    if data.description:
        header += f"\n{escape(data.description)}"
    details = [
        f"Prep: {data.prep_time} min" if data.prep_time else None,
        f"Cook: {data.cook_time} min" if data.cook_time else None,
        f"Serves: {data.servings}" if data.servings else None,
        f"Cuisine: {data.cuisine}" if data.cuisine else None,
    ]
    details_line = " | ".join(d for d in details if d)
    if details_line:
        header += f"\n[dim]{escape(details_line)}[/dim]"
    console.print(Panel.fit(header, title=escape(data.source_url), border_style="green"))

    console.print("\n[bold]Ingredients[/bold]")
    for line in data.ingredients:
        console.print(f"  • {_emphasize(line)}")

    console.print("\n[bold]Instructions[/bold]")
    for i, step in enumerate(data.instructions, 1):
        console.print(f"  {i}. {escape(step)}")

    if data.nutrition:
        console.print("\n[bold]Nutrition[/bold]")
        for label, value in data.nutrition.items():
            console.print(f"  {escape(label)}: {escape(value)}")

    stats = outcome.stats
    console.print(
        f"\n[dim]Fields: {stats.successful}/{stats.total} "
        f"({stats.from_ld_json} LD+JSON, {stats.from_selectors} selectors)"
        f"{' - custom selectors' if outcome.used_custom_selectors else ''}[/dim]"
    )


@app.command()
def normalize(
    lines: list[str] = typer.Argument(..., help="Ingredient lines"),
    metric: bool = typer.Option(False, "--metric", help="Use metric units (ml, g)"),
    decimal: bool = typer.Option(False, "--decimal", help="Show decimal amounts instead of fractions"),
    decimals: int | None = typer.Option(None, "--decimals", help="Decimal places (with --decimal)"),
    round_to: float = typer.Option(0.125, "--round", help="Fraction step (with fractions)"),
) -> None:
    """Normalize ingredient lines."""
    options = NormalizationOptions(
        unit_system="metric" if metric else "imperial",
        amount_format="decimal" if decimal else "fraction",
        round_to_fraction=round_to,
        decimals=decimals,
    )

    table = Table(show_header=True, header_style="bold")
    table.add_column("Input", style="dim")
    table.add_column("Normalized")
    table.add_column("Amount", justify="right")
    table.add_column("Unit")

    for item in normalize_ingredients(lines, options):
        amount = "" if item.amount is None else f"{item.amount:g}"
        if item.amount_min is not None and item.amount_max is not None:
            amount = f"{amount} ({item.amount_min:g}-{item.amount_max:g})"
        table.add_row(
            escape(item.original_text),
            _emphasize(item.display),
            amount,
            escape(item.unit),
        )

    console.print(table)


@app.command()
def scale(
    lines: list[str] = typer.Argument(..., help="Ingredient lines"),
    factor: float = typer.Option(..., "--factor", "-f", help="Scale factor, e.g. 2 or 0.5"),
    servings: str | None = typer.Option(None, "--servings", "-s", help="Original servings"),
) -> None:
    """Scale ingredient lines by a factor."""
    if factor <= 0:
        console.print("[red]Factor must be positive[/red]")
        raise typer.Exit(2)

    for line in lines:
        console.print(_emphasize(scale_ingredient(line, factor)))

    if servings is not None:
        console.print(f"\n[dim]Servings: {escape(str(scale_servings(servings, factor)))}[/dim]")


@app.command()
def serve(
    port: int = typer.Option(8000, "--port", "-p", help="Port to run on"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload for development"),
) -> None:
    """Start the HTTP API server."""
    import uvicorn

    actual_port = int(os.environ.get("PORT", port))

    console.print("\n[bold green]Larder API[/bold green]")
    console.print(f"Starting server on http://localhost:{actual_port}")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run(
        "larder.web.app:app",
        host="0.0.0.0",
        port=actual_port,
        reload=reload,
    )


@app.command()
def version() -> None:
    """Show version information."""
    from larder import __version__

    console.print(f"Larder version {__version__}")


if __name__ == "__main__":
    app()
