"""agentmatrix frameworks / models -- list what can be selected."""

from __future__ import annotations

import click

from agentmatrix.cli.formatting import format_frameworks, format_models, get_console
from agentmatrix.pricing import DEFAULT_FALLBACK_RATE, DEFAULT_MODELS


@click.command()
@click.pass_context
def frameworks(ctx: click.Context) -> None:
    """List registered agent frameworks."""
    format_frameworks(list(ctx.obj["registry"]), get_console())


@click.command()
def models() -> None:
    """List target models and their cost per 1000 tokens."""
    format_models(list(DEFAULT_MODELS), DEFAULT_FALLBACK_RATE, get_console())
