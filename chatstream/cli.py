"""chatstream CLI — Typer + Rich terminal interface.

Commands: demo, config.
``demo`` simulates a model streaming a reply and renders the paced reveal
live, so pace and chunk settings can be tried out before wiring the
registry into a real presentation layer.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from chatstream import __version__
from chatstream.display import RevealDisplay
from chatstream.registry import StreamRegistry
from chatstream.schemas.streaming import (
    RevealConfig,
    StreamChunk,
    StreamEvent,
    StreamEventType,
    StreamingPhase,
)
from chatstream.settings import load_reveal_config

console = Console()

DEMO_TEXT = (
    "Streaming replies arrive in uneven bursts. chatstream reveals them at a "
    "steady pace, keeps the message marked as streaming until the reveal "
    "catches up, and only then settles it. 👩‍💻 Emoji and accents like café "
    "are revealed whole."
)

app = typer.Typer(
    name="chatstream",
    help="Streaming message lifecycle and typewriter reveal.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ───────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"chatstream {__version__}")
        raise typer.Exit()


# ── App Callback ────────────────────────────────────────────────


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Log lifecycle transitions and reveal progress.",
    ),
) -> None:
    """chatstream — paced reveal of streamed chat messages."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


# ── Helpers ──────────────────────────────────────────────────────


def _load_config(config_path: Path | None) -> RevealConfig:
    """Load reveal config, exit on error."""
    try:
        return load_reveal_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading config:[/red] {e}")
        raise typer.Exit(1) from None


async def _run_demo(
    text: str,
    config: RevealConfig,
    *,
    message_id: str,
    delta_size: int,
    delta_delay: float,
    animate: bool,
) -> RevealDisplay:
    registry = StreamRegistry(config, animated=animate)
    display = RevealDisplay(console)
    settled = asyncio.Event()

    def _on_settled(event: StreamEvent) -> None:
        if (
            event.type == StreamEventType.PHASE_CHANGED
            and event.phase is StreamingPhase.SETTLED
        ):
            settled.set()

    registry.subscribe(display.create_listener())
    registry.subscribe(_on_settled)

    with display:
        registry.start_producing(message_id)
        accumulated = ""
        for count, start in enumerate(range(0, len(text), delta_size), start=1):
            delta = text[start:start + delta_size]
            accumulated += delta
            registry.ingest(
                message_id,
                StreamChunk(delta=delta, accumulated=accumulated, token_count=count),
            )
            await asyncio.sleep(delta_delay)
        registry.mark_production_complete(message_id)
        await settled.wait()

    registry.release_all()
    return display


# ── Commands ─────────────────────────────────────────────────────


@app.command()
def demo(
    text: str = typer.Argument(DEMO_TEXT, help="Text the simulated model streams."),
    pace: float = typer.Option(
        None, "--pace", help="Seconds between reveal ticks (overrides config).",
    ),
    chunk: int = typer.Option(
        None, "--chunk", help="Characters revealed per tick (overrides config).",
    ),
    delta_size: int = typer.Option(
        8, "--delta-size", min=1, help="Characters per simulated model delta.",
    ),
    delta_delay: float = typer.Option(
        0.02, "--delta-delay", min=0.0, help="Seconds between model deltas.",
    ),
    no_animate: bool = typer.Option(
        False, "--no-animate", help="Show text as it arrives, without the typewriter effect.",
    ),
    message_id: str = typer.Option("demo", "--id", help="Message identifier."),
    config_path: Path = typer.Option(
        None, "--config", "-c", help="TOML file with a [reveal] table.",
    ),
) -> None:
    """Stream TEXT through the registry and render the reveal live."""
    config = _load_config(config_path)
    overrides: dict[str, float | int] = {}
    if pace is not None:
        overrides["pace_interval"] = pace
    if chunk is not None:
        overrides["chunk_size"] = chunk
    if overrides:
        try:
            config = RevealConfig(**{**config.model_dump(), **overrides})
        except ValueError as e:
            console.print(f"[red]Invalid reveal settings:[/red] {e}")
            raise typer.Exit(1) from None

    display = asyncio.run(
        _run_demo(
            text,
            config,
            message_id=message_id,
            delta_size=delta_size,
            delta_delay=delta_delay,
            animate=not no_animate,
        )
    )
    console.print(
        f"[green]✓[/green] {message_id} {display.phase(message_id).value}: "
        f"{len(display.text(message_id))} characters revealed"
    )


@app.command("config")
def config_show(
    config_path: Path = typer.Option(
        None, "--config", "-c", help="TOML file with a [reveal] table.",
    ),
) -> None:
    """Show the effective reveal configuration."""
    config = _load_config(config_path)

    table = Table(title="Reveal Configuration", show_header=False, show_lines=True)
    table.add_column("Setting", style="bold")
    table.add_column("Value")

    table.add_row("Pace Interval", f"{config.pace_interval}s")
    table.add_row("Chunk Size", str(config.chunk_size))
    table.add_row("Min Animated Length", str(config.min_animated_length))
    table.add_row("History Limit", str(config.history_limit))

    console.print(table)
