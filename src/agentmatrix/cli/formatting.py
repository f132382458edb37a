"""Rich formatting helpers for the agentmatrix CLI.

Provides functions that format batch results and catalogs for terminal
display. Rich auto-detects TTY and degrades gracefully when piped (no ANSI
codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from agentmatrix.frameworks import FrameworkPersona
    from agentmatrix.models.records import BatchResult, Highlights
    from agentmatrix.pricing import ModelInfo


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def format_batch(batch: BatchResult, console: Console) -> None:
    """Display one row per combination, in combination order."""
    if not len(batch):
        console.print("[dim]No combinations selected.[/dim]")
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Framework", style="cyan")
    table.add_column("Model")
    table.add_column("Latency", justify="right")
    table.add_column("Tokens", justify="right", style="green")
    table.add_column("Cost", justify="right")
    table.add_column("Quality", justify="right")
    table.add_column("Coverage", justify="right")
    table.add_column("Safety", justify="right")
    table.add_column("Status")

    for run in batch:
        record = run.record
        if record.failed:
            status = f"[red]error[/red] {escape(record.error or '')}"
        elif record.source.value == "mock":
            status = "[yellow]mock[/yellow]"
        else:
            status = "[green]live[/green]"
        table.add_row(
            run.combination.framework_id,
            run.combination.model_id,
            f"{run.latency:.1f}s",
            str(record.tokens),
            f"${record.cost:.4f}",
            f"{record.quality:g}",
            f"{record.coverage:g}",
            f"{record.safety:g}",
            status,
        )

    console.print(table)


def format_highlights(highlights: Highlights | None, console: Console) -> None:
    """Display the batch highlights, or a no-data notice."""
    if highlights is None:
        console.print("[dim]No successful runs to summarize.[/dim]")
        return

    console.print()
    console.print(
        f"  Fastest:          [cyan]{highlights.fastest.combination.key}[/cyan] "
        f"({highlights.fastest.latency:.1f}s)"
    )
    console.print(
        f"  Cheapest:         [cyan]{highlights.cheapest.combination.key}[/cyan] "
        f"(${highlights.cheapest.record.cost:.3f})"
    )
    console.print(
        f"  Highest quality:  [cyan]{highlights.highest_quality.combination.key}[/cyan] "
        f"({highlights.highest_quality.record.quality:g})"
    )
    console.print(f"  Average tokens:   [green]{highlights.average_tokens}[/green]")


def format_outputs(batch: BatchResult, console: Console) -> None:
    """Display the full output text of every combination."""
    for i, run in enumerate(batch):
        if i > 0:
            console.print()
        console.print(f"[yellow]== {run.combination.key}[/yellow]")
        for step in run.record.steps:
            console.print(f"  - {escape(step)}")
        console.print(escape(run.record.output))


def format_frameworks(personas: list[FrameworkPersona], console: Console) -> None:
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Strengths", style="dim")
    table.add_column("Description")
    for persona in personas:
        table.add_row(
            persona.id,
            persona.name,
            escape(", ".join(persona.strengths)),
            escape(persona.description),
        )
    console.print(table)


def format_models(models: list[ModelInfo], fallback_rate: float, console: Console) -> None:
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Vendor")
    table.add_column("$/1k tokens", justify="right", style="green")
    for model in models:
        table.add_row(model.id, model.name, model.vendor, f"{model.cost_per_1k:g}")
    console.print(table)
    console.print(f"[dim]Unknown models are priced at ${fallback_rate:g} per 1k tokens.[/dim]")


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {message}", highlight=False)
