"""
Kochbuch - CLI Entry Point.

Usage:
    kochbuch extract URL          Import a recipe and show the result
    kochbuch extract URL --json   Print the recipe payload as JSON
    kochbuch preview URL          Show which extractor a URL would use
    kochbuch parse "3 EL Öl"      Run the ingredient parser on lines
    kochbuch sites                List sites with a dedicated extractor
    kochbuch health               Show configuration
"""

import json
import logging
import sys

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

app = typer.Typer(
    name="kochbuch",
    help="Kochbuch - recipe import tools.",
    add_completion=False,
)
console = Console()


def setup_logging(level: str = "INFO") -> None:
    """Log to stderr with timestamps and logger names."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Quiet down noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
) -> None:
    from kochbuch.config import settings

    setup_logging("DEBUG" if verbose else settings.log_level)


@app.command()
def extract(
    url: str = typer.Argument(..., help="Recipe page URL"),
    as_json: bool = typer.Option(False, "--json", help="Print the recipe payload as JSON"),
) -> None:
    """Import a recipe from a URL."""
    from kochbuch.recipe_import import RecipeImportError, import_recipe

    try:
        result = import_recipe(url)
    except RecipeImportError as e:
        console.print(f"[red]FAIL[/red] {e}")
        raise typer.Exit(1)

    if as_json:
        document = result.payload.to_document()
        console.print_json(json.dumps({"recipe": document, "warnings": result.warnings}))
        return

    data = result.data
    header = f"[bold green]{data.title}[/bold green]"
    if data.subtitle:
        header += f"\n[dim]{data.subtitle}[/dim]"
    header += f"\n\n[dim]Extractor: {result.strategy_name}[/dim]"
    console.print(Panel.fit(header, title="Rezept", border_style="green"))

    facts = [
        ("Portionen", data.servings),
        ("Schwierigkeit", data.difficulty),
        ("Kategorie", data.category),
        ("Bild", data.image_url),
    ]
    for label, value in facts:
        if value:
            console.print(f"   {label}: {value}")
    for entry in data.time_entries:
        console.print(f"   {entry.label}: {entry.minutes} Min.")
    if data.keywords:
        console.print(f"   Schlagworte: {', '.join(data.keywords)}")

    table = Table(title="Zutaten")
    table.add_column("Menge", justify="right")
    table.add_column("Einheit")
    table.add_column("Zutat")
    table.add_column("Beschreibung", style="dim")
    for group in result.payload.ingredient_groups:
        for ingredient in group.ingredients:
            quantity = ingredient.quantities[0]
            table.add_row(
                f"{quantity.amount:g}" if quantity.amount else "",
                quantity.unit,
                ingredient.name,
                ingredient.description or "",
            )
    console.print(table)

    console.print("\n[bold]Zubereitung[/bold]")
    for number, step in enumerate(data.instructions, start=1):
        console.print(f"  {number}. {step}")

    if result.warnings:
        console.print("\n[bold yellow]Hinweise[/bold yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")


@app.command()
def preview(url: str = typer.Argument(..., help="Recipe page URL")) -> None:
    """Show which extractor a URL would use and what it supports."""
    from kochbuch.recipe_import import can_extract_from_url, get_extractor_preview

    if not can_extract_from_url(url):
        console.print(f"[red]FAIL[/red] Not a valid http(s) URL: {url}")
        raise typer.Exit(1)

    info = get_extractor_preview(url)
    kind = "site-specific" if info.is_specific else "generic"
    console.print(f"\n[bold]{info.name}[/bold] [dim]({kind})[/dim]")
    console.print(f"[dim]{info.description}[/dim]\n")

    table = Table()
    table.add_column("Funktion")
    table.add_column("Status")
    colors = {"supported": "green", "experimental": "yellow", "unsupported": "red"}
    for capability in info.capabilities.values():
        value = capability["value"]
        table.add_row(capability["title"], f"[{colors[value]}]{value}[/{colors[value]}]")
    console.print(table)


@app.command()
def parse(lines: list[str] = typer.Argument(..., help="Ingredient lines")) -> None:
    """Run the ingredient parser on one or more lines."""
    from kochbuch.recipe_import import parse_multiple_ingredients

    table = Table()
    table.add_column("Eingabe", style="dim")
    table.add_column("Menge", justify="right")
    table.add_column("Einheit")
    table.add_column("Zutat")
    table.add_column("Beschreibung")
    for line in lines:
        for ingredient in parse_multiple_ingredients(line):
            quantity = ingredient.quantity
            table.add_row(
                line,
                f"{quantity.amount:g}",
                quantity.unit,
                ingredient.name,
                ingredient.description or "",
            )
    console.print(table)


@app.command()
def sites() -> None:
    """List sites with a dedicated extractor."""
    from kochbuch.recipe_import import get_supported_sites

    console.print("\n[bold]Supported Sites[/bold]\n")
    for site in get_supported_sites():
        console.print(f"  • {site['name']}: {', '.join(site['domains'])}")
    console.print("\n[dim]All other sites use the generic JSON-LD extractor.[/dim]")


@app.command()
def health() -> None:
    """Check configuration."""
    from kochbuch.config import get_settings

    console.print("\n[bold]Kochbuch Health Check[/bold]\n")

    try:
        settings = get_settings()
    except ValueError as e:
        console.print(f"\n[red]FAIL Configuration error: {e}[/red]")
        console.print("[dim]Check the KOCHBUCH_* variables in your environment or .env file.[/dim]")
        raise typer.Exit(1)

    console.print("[green]OK[/green] Configuration loaded")
    console.print(f"   Environment: {settings.kochbuch_env}")
    console.print(f"   Log level: {settings.log_level}")
    console.print(f"   Fetch timeout: {settings.kochbuch_fetch_timeout:g}s")
    console.print(f"   Accept-Language: {settings.kochbuch_accept_language}")
    console.print(f"   Max HTML items: {settings.kochbuch_max_html_items}")


@app.command()
def version() -> None:
    """Show version information."""
    from kochbuch import __version__

    console.print(f"Kochbuch version {__version__}")


if __name__ == "__main__":
    app()
