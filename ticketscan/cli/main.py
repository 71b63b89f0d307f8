"""
Command-line interface for TicketScan.
Rich-formatted flight searches, destination comparison and saved searches.
"""

import asyncio
import json
import sys
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ticketscan import __app_name__, __version__
from ticketscan.cli.validators import (
    adults_callback,
    airport_code_callback,
    airport_codes_list_callback,
    date_callback,
    infants_callback,
)
from ticketscan.config import settings
from ticketscan.exceptions import AggregationError
from ticketscan.models import SavedSearchParams, SearchRequest, SearchResult
from ticketscan.orchestration import FlightOrchestrator
from ticketscan.storage import SavedSearchStore, summarize_results
from ticketscan.utils.airport_utils import JAPANESE_AIRPORTS, POPULAR_DESTINATIONS, airport_label
from ticketscan.utils.date_utils import parse_date
from ticketscan.utils.logging_config import configure_logging
from ticketscan.utils.price_utils import format_price

# Create Typer app
app = typer.Typer(
    name="ticketscan",
    help="TicketScan - family flight fare meta-search",
    add_completion=False,
)

# Create sub-commands
saved_app = typer.Typer(help="Manage saved searches")
app.add_typer(saved_app, name="saved")

console = Console()


# ============================================================================
# Utility Functions
# ============================================================================

def handle_error(e: Exception, message: str = "An error occurred"):
    """Handle errors with nice formatting."""
    console.print(f"\n[bold red]✗ {message}[/bold red]")
    console.print(f"[red]{type(e).__name__}: {str(e)}[/red]\n")
    if settings.debug:
        console.print_exception()
    raise typer.Exit(code=1)


def success(message: str):
    """Print success message."""
    console.print(f"[bold green]✓ {message}[/bold green]")


def info(message: str):
    """Print info message."""
    console.print(f"[blue]{message}[/blue]")


def warning(message: str):
    """Print warning message."""
    console.print(f"[yellow]⚠ {message}[/yellow]")


def resolve_dates(departure: Optional[str], return_: Optional[str]) -> Tuple[date, date]:
    """
    Resolve CLI date options.

    Defaults: departure 60 days from today, return 7 days after departure.
    """
    dep_date = parse_date(departure) if departure else date.today() + timedelta(days=60)
    ret_date = parse_date(return_) if return_ else dep_date + timedelta(days=7)
    if ret_date < dep_date:
        raise typer.BadParameter(
            f"Return date ({ret_date}) must not be before departure date ({dep_date})"
        )
    return dep_date, ret_date


def source_flags(result: SearchResult) -> str:
    flags = result.sources.model_dump()
    used = [name for name, on in flags.items() if on]
    return ", ".join(used) if used else "none"


def offers_table(result: SearchResult, limit: int) -> Table:
    """Build the results table for one search."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Airline", style="yellow")
    table.add_column("Source", style="cyan")
    table.add_column("Outbound", style="blue")
    table.add_column("Stops", justify="center")
    table.add_column("Duration")
    table.add_column("Adult", style="green", justify="right")
    table.add_column("Infant", style="green", justify="right")
    table.add_column("Total", style="bold green", justify="right")

    for index, offer in enumerate(result.offers[:limit], start=1):
        first = offer.outbound[0] if offer.outbound else None
        last = offer.outbound[-1] if offer.outbound else None
        outbound = (
            f"{first.departure.airport} {first.departure.time} → "
            f"{last.arrival.airport} {last.arrival.time}"
            if first and last
            else "-"
        )
        currency = offer.price.currency
        table.add_row(
            str(index),
            offer.airline,
            offer.source.value,
            outbound,
            "Direct" if offer.stops == 0 else str(offer.stops),
            offer.duration,
            format_price(offer.price.adult, currency),
            format_price(offer.price.infant, currency),
            format_price(offer.price.total, currency),
        )
    return table


# ============================================================================
# Version Callback
# ============================================================================

def version_callback(value: bool):
    """Show version and exit."""
    if value:
        console.print(Panel(
            f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]\n"
            f"Family flight fare meta-search",
            title="✈ TicketScan",
            border_style="blue",
        ))
        raise typer.Exit()


# ============================================================================
# Main Callback
# ============================================================================

@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """
    TicketScan CLI - compare family flight fares across providers.

    Use 'ticketscan COMMAND --help' for command-specific help.
    """
    # The CLI reports fallbacks itself; only errors are logged unless debugging
    configure_logging(settings, level=None if settings.debug else "ERROR", stream=sys.stderr)


@app.command()
def version():
    """Show version information."""
    version_callback(True)


# ============================================================================
# SEARCH Command
# ============================================================================

@app.command()
def search(
    destination: str = typer.Option(..., help="Destination IATA code (e.g., BKK)", callback=airport_code_callback),
    origin: str = typer.Option(settings.default_origin, help="Origin IATA code", callback=airport_code_callback),
    departure: Optional[str] = typer.Option(None, help="Departure date (YYYY-MM-DD). Default: 60 days from today", callback=date_callback),
    return_date: Optional[str] = typer.Option(None, "--return", help="Return date (YYYY-MM-DD). Default: 7 days after departure", callback=date_callback),
    adults: int = typer.Option(settings.default_adults, help="Number of adults", callback=adults_callback),
    infants: int = typer.Option(settings.default_infants, help="Number of lap infants", callback=infants_callback),
    limit: int = typer.Option(10, help="Number of offers to show"),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
):
    """
    Search round-trip offers across all providers.

    Examples:
        ticketscan search --destination BKK
        ticketscan search --origin HND --destination SIN --departure 2025-12-20 --return 2025-12-27
    """
    dep_date, ret_date = resolve_dates(departure, return_date)
    request = SearchRequest(
        origin=origin,
        destination=destination,
        departure_date=dep_date,
        return_date=ret_date,
        adults=adults,
        infants=infants,
    )

    if not as_json:
        console.print(
            f"\n[yellow]Searching {airport_label(origin)} → {airport_label(destination)} "
            f"({dep_date} - {ret_date}, {adults} adults, {infants} infants)...[/yellow]\n"
        )

    try:
        result = asyncio.run(FlightOrchestrator().search(request))
    except AggregationError as e:
        handle_error(e, "Search failed")

    if as_json:
        console.print_json(result.model_dump_json())
        return

    if not result.offers:
        warning("No offers found")
        return

    if result.sources.mock:
        warning("No provider returned offers - showing mock data")

    success(f"Found {len(result.offers)} offers (sources: {source_flags(result)})")
    console.print(offers_table(result, limit))

    best = result.best_by_source()
    if len(best) > 1:
        info("Best per source: " + ", ".join(
            f"{tag.value} {format_price(offer.price.total, offer.price.currency)}"
            for tag, offer in best.items()
        ))
    console.print()


# ============================================================================
# COMPARE Command
# ============================================================================

@app.command()
def compare(
    destinations: str = typer.Option(..., help="Comma-separated destination codes (e.g., BKK,SIN,HNL)", callback=airport_codes_list_callback),
    origin: str = typer.Option(settings.default_origin, help="Origin IATA code", callback=airport_code_callback),
    departure: Optional[str] = typer.Option(None, help="Departure date (YYYY-MM-DD)", callback=date_callback),
    return_date: Optional[str] = typer.Option(None, "--return", help="Return date (YYYY-MM-DD)", callback=date_callback),
    adults: int = typer.Option(settings.default_adults, help="Number of adults", callback=adults_callback),
    infants: int = typer.Option(settings.default_infants, help="Number of lap infants", callback=infants_callback),
    save: bool = typer.Option(False, help="Save this search"),
    note: Optional[str] = typer.Option(None, help="Note stored with a saved search"),
):
    """
    Compare the cheapest offer across several destinations.

    Examples:
        ticketscan compare --destinations BKK,SIN,HNL
        ticketscan compare --destinations ICN,TPE --save --note "Spring break"
    """
    dep_date, ret_date = resolve_dates(departure, return_date)
    codes: List[str] = destinations.split(",")

    console.print(
        f"\n[yellow]Comparing {len(codes)} destinations from {airport_label(origin)} "
        f"({dep_date} - {ret_date})...[/yellow]\n"
    )

    try:
        results: Dict[str, SearchResult] = asyncio.run(
            FlightOrchestrator().search_many(
                origin=origin,
                destinations=codes,
                departure_date=dep_date,
                return_date=ret_date,
                adults=adults,
                infants=infants,
            )
        )
    except AggregationError as e:
        handle_error(e, "Comparison failed")

    summaries = summarize_results(codes, results)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Destination", style="cyan")
    table.add_column("Cheapest total", style="green", justify="right")
    table.add_column("Airline", style="yellow")
    table.add_column("Offers", justify="right")
    table.add_column("Data", style="dim")

    for summary in sorted(
        summaries,
        key=lambda s: (s.cheapest_price is None, s.cheapest_price or 0),
    ):
        result = results.get(summary.destination)
        table.add_row(
            airport_label(summary.destination),
            format_price(summary.cheapest_price, settings.default_currency)
            if summary.cheapest_price is not None
            else "-",
            summary.airline or "-",
            str(summary.flight_count),
            "mock" if result and result.sources.mock else "live",
        )

    console.print(table)
    console.print()

    if save:
        store = SavedSearchStore()
        saved = store.save(
            SavedSearchParams(
                origin=origin,
                destinations=codes,
                departure_date=dep_date,
                return_date=ret_date,
                adults=adults,
                infants=infants,
            ),
            summaries,
            note=note,
        )
        success(f"Saved search {saved.id}")


# ============================================================================
# PROVIDERS / AIRPORTS Commands
# ============================================================================

@app.command()
def providers():
    """Show which flight providers are enabled and configured."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Provider", style="cyan")
    table.add_column("Enabled")
    table.add_column("Credentials")

    rows = [
        ("Amadeus", settings.enable_amadeus, settings.amadeus_configured),
        ("Skyscanner", settings.enable_skyscanner, settings.rapidapi_configured),
        ("Google Flights", settings.enable_google_flights, settings.rapidapi_configured),
    ]
    for name, enabled, configured in rows:
        table.add_row(
            name,
            "[green]✓[/green]" if enabled else "[red]✗[/red]",
            "[green]✓[/green]" if configured else "[red]missing[/red]",
        )

    console.print(table)
    if not settings.get_available_providers():
        warning(
            "No provider is usable - searches will return mock offers"
            if settings.enable_mock_fallback
            else "No provider is usable and mock fallback is disabled"
        )


@app.command()
def airports():
    """List departure airports and popular destinations."""
    for title, rows in (("Departure airports", JAPANESE_AIRPORTS), ("Destinations", POPULAR_DESTINATIONS)):
        table = Table(title=title, show_header=True, header_style="bold magenta")
        table.add_column("Code", style="cyan")
        table.add_column("City", style="yellow")
        table.add_column("Airport")
        for airport in rows:
            table.add_row(airport.code, airport.city, airport.name)
        console.print(table)


# ============================================================================
# SAVED Commands
# ============================================================================

@saved_app.command("list")
def saved_list(
    as_json: bool = typer.Option(False, "--json", help="Print as JSON"),
):
    """List saved searches, newest first."""
    searches = SavedSearchStore().list()

    if as_json:
        console.print_json(json.dumps([s.model_dump(mode="json") for s in searches]))
        return

    if not searches:
        info("No saved searches")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Saved", style="blue")
    table.add_column("Route", style="cyan")
    table.add_column("Dates")
    table.add_column("Cheapest", style="green")
    table.add_column("Note", style="yellow")

    for saved in searches:
        priced = [r for r in saved.results if r.cheapest_price is not None]
        cheapest = min(priced, key=lambda r: r.cheapest_price) if priced else None
        table.add_row(
            saved.id,
            saved.saved_at.strftime("%Y-%m-%d %H:%M"),
            f"{saved.params.origin} → {', '.join(saved.params.destinations)}",
            f"{saved.params.departure_date} - {saved.params.return_date}",
            f"{cheapest.destination} {format_price(cheapest.cheapest_price)}" if cheapest else "-",
            saved.note or "",
        )

    console.print(table)


@saved_app.command("delete")
def saved_delete(search_id: str = typer.Argument(..., help="Saved search id")):
    """Delete a saved search."""
    if not SavedSearchStore().delete(search_id):
        console.print(f"[red]✗ Saved search '{search_id}' not found[/red]")
        raise typer.Exit(code=1)
    success(f"Deleted {search_id}")


@saved_app.command("note")
def saved_note(
    search_id: str = typer.Argument(..., help="Saved search id"),
    text: str = typer.Argument(..., help="New note (empty string clears it)"),
):
    """Replace the note of a saved search."""
    updated = SavedSearchStore().update_note(search_id, text or None)
    if updated is None:
        console.print(f"[red]✗ Saved search '{search_id}' not found[/red]")
        raise typer.Exit(code=1)
    success(f"Updated note for {search_id}")


if __name__ == "__main__":
    app()
