"""Main CLI application using Typer."""
import asyncio
import logging
import os
from contextlib import aclosing

import typer
from dotenv import load_dotenv
from rich.console import Console, Group
from rich.live import Live
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..chat import ChatSession, FragmentReceived, ReplyFinalized, SpotAdded, TurnFailed
from ..errors import ConfigurationError, GeocodingError, TripChatError
from ..formatting import render_markdown
from ..itinerary import ItineraryStore, TransportMode
from .providers import get_geocoder, get_llm, get_router

load_dotenv()

app = typer.Typer(
    name="tripchat",
    help="Trip planner chat that can add spots to your itinerary",
    no_args_is_help=True,
    add_completion=True,
)

console = Console()

EXIT_WORDS = ("exit", "quit", "q")
EDITABLE_FIELDS = {
    "name": "name",
    "notes": "description",
    "date": "date_time",
    "mode": "transport_mode",
}

HELP_TEXT = """[bold]Commands[/bold]
  /itinerary         show the itinerary
  /remove <n>        remove spot number n
  /move <from> <to>  reorder spots
  /edit <n> <field> <value>
                     change name, notes, date or mode of spot n
  /search <text>     look up places
  /route             route through spots with coordinates
  exit               leave"""


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        os.getenv("TRIPCHAT_LOG_LEVEL", "WARNING"),
        "--log-level",
        "-L",
        help="Logging level: DEBUG, INFO, WARNING or ERROR"
    )
):
    """Configure logging for every command."""
    configure_logging(log_level)


def itinerary_table(store: ItineraryStore) -> Table:
    table = Table(title="Itinerary", show_lines=False)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Date/Time")
    table.add_column("Transport")
    table.add_column("Notes", style="dim")
    for i, spot in enumerate(store, 1):
        table.add_row(
            str(i),
            spot.name or "[dim](unnamed)[/dim]",
            spot.date_time.replace("T", " "),
            spot.transport_mode.label,
            spot.description,
        )
    return table


def spot_index(store: ItineraryStore, position: str) -> int:
    """Zero-based index of a 1-based spot number typed by the user."""
    number = int(position)
    if not 1 <= number <= len(store):
        raise ValueError(f"No spot number {number}; the itinerary has {len(store)} spots.")
    return number - 1


async def run_turn(session: ChatSession, user_input: str) -> None:
    """Send one message and stream the reply to the console."""
    with Live(console=console, refresh_per_second=12) as live:
        async with aclosing(session.send(user_input)) as events:
            async for event in events:
                if isinstance(event, FragmentReceived):
                    live.update(Group(Text("AI:", style="bold green"), render_markdown(event.text)))
                elif isinstance(event, ReplyFinalized):
                    live.update(Group(Text("AI:", style="bold green"), render_markdown(event.message.text)))
                elif isinstance(event, SpotAdded):
                    live.console.print(f"[bold green]AI:[/bold green] {escape(event.confirmation.text)}")
                elif isinstance(event, TurnFailed):
                    live.update(Text(event.message.text, style="red"))

    if session.error:
        console.print(Panel(session.error, style="red", title="Error"))


async def run_command(session: ChatSession, line: str) -> None:
    """Handle a slash command typed at the chat prompt."""
    name, _, arg = line[1:].partition(" ")
    store = session.itinerary

    if name == "itinerary":
        if len(store):
            console.print(itinerary_table(store))
        else:
            console.print("[dim]Your itinerary is empty.[/dim]")

    elif name == "remove":
        spot = store.spots[spot_index(store, arg)]
        store.remove(spot.id)
        console.print(f"[dim]Removed {escape(spot.name)}[/dim]")

    elif name == "move":
        positions = arg.split()
        if len(positions) != 2:
            raise ValueError("Usage: /move <from> <to>")
        old, new = (spot_index(store, n) for n in positions)
        store.move(old, new)
        console.print(itinerary_table(store))

    elif name == "edit":
        position, field, value = (arg.split(maxsplit=2) + ["", "", ""])[:3]
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"Field must be one of: {', '.join(EDITABLE_FIELDS)}")
        spot = store.spots[spot_index(store, position)]
        store.edit(spot.id, **{EDITABLE_FIELDS[field]: value})
        console.print(itinerary_table(store))

    elif name == "search":
        async with get_geocoder() as geocoder:
            places = await geocoder.search(arg)
        if not places:
            console.print("[dim]No places found.[/dim]")
        for place in places:
            lon, lat = place.coordinates
            console.print(f"[cyan]{escape(place.display_name)}[/cyan] [dim]({lon:.4f}, {lat:.4f})[/dim]")

    elif name == "route":
        coordinates = [spot.coordinates for spot in store.plottable()]
        async with get_router() as router:
            geometry = await router.route(coordinates)
        if geometry is None:
            console.print("[dim]No route: add coordinates to at least two spots.[/dim]")
        else:
            console.print(f"[green]Route with {len(geometry.coordinates)} points[/green]")

    else:
        console.print(HELP_TEXT)


@app.command()
def chat():
    """Interactive chat with the trip planning assistant."""
    async def _chat():
        try:
            llm = get_llm()
        except ConfigurationError as e:
            session = ChatSession.unavailable(str(e))
            console.print(Panel(session.error, style="red", title="Configuration"))
            console.print(f"[red]{escape(session.transcript.messages[-1].text)}[/red]")
            raise typer.Exit(code=1)

        async with ChatSession(llm) as session:
            console.print("[bold cyan]Trip Planner Chat[/bold cyan]")
            console.print(f"[bold green]AI:[/bold green] {escape(session.transcript.messages[0].text)}")
            console.print("[dim]Type /help for commands, 'exit' to leave[/dim]\n")

            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ").strip()
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                if not user_input:
                    continue
                if user_input.lower() in EXIT_WORDS:
                    console.print("[dim]Goodbye![/dim]")
                    break

                try:
                    if user_input.startswith("/"):
                        await run_command(session, user_input)
                    else:
                        await run_turn(session, user_input)
                except (TripChatError, ValueError, IndexError, KeyError) as e:
                    console.print(f"[red]Error: {e}[/red]")

    asyncio.run(_chat())


@app.command()
def search(query: str = typer.Argument(..., help="Place to look up")):
    """Search for places (Mapbox geocoding, biased to Japan)."""
    async def _search():
        try:
            async with get_geocoder() as geocoder:
                places = await geocoder.search(query)
        except (ConfigurationError, GeocodingError) as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)

        table = Table(title=f"Results for '{query}'")
        table.add_column("Place", style="cyan")
        table.add_column("Longitude", justify="right")
        table.add_column("Latitude", justify="right")
        for place in places:
            lon, lat = place.coordinates
            table.add_row(place.display_name, f"{lon:.5f}", f"{lat:.5f}")
        console.print(table)

    asyncio.run(_search())


@app.command()
def modes():
    """List the transport modes a spot can use."""
    for mode in TransportMode:
        console.print(f"[cyan]{mode.value}[/cyan]  {mode.label}")


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
