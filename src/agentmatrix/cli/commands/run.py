"""agentmatrix run -- fan one task out across frameworks and models."""

from __future__ import annotations

import json

import click

from agentmatrix.cli.formatting import (
    format_batch,
    format_error,
    format_highlights,
    format_outputs,
    get_console,
)
from agentmatrix.pricing import DEFAULT_MODELS

# The first two catalog models, as selected by default in the dashboard.
_DEFAULT_MODEL_IDS = tuple(m.id for m in DEFAULT_MODELS[:2])


@click.command()
@click.argument("task")
@click.option(
    "-f",
    "--framework",
    "framework_ids",
    multiple=True,
    help="Framework id to include (repeatable). Default: all registered frameworks.",
)
@click.option(
    "-m",
    "--model",
    "model_ids",
    multiple=True,
    help=f"Model id to include (repeatable). Default: {', '.join(_DEFAULT_MODEL_IDS)}.",
)
@click.option("--json", "as_json", is_flag=True, help="Print runs and highlights as JSON.")
@click.option("-v", "--verbose", is_flag=True, help="Also print steps and full output text.")
@click.pass_context
def run(
    ctx: click.Context,
    task: str,
    framework_ids: tuple[str, ...],
    model_ids: tuple[str, ...],
    as_json: bool,
    verbose: bool,
) -> None:
    """Run TASK on every selected (framework, model) combination."""
    from agentmatrix.aggregator import summarize
    from agentmatrix.cli import _load_config
    from agentmatrix.dispatcher import Dispatcher

    console = get_console()
    config = _load_config(ctx)
    try:
        dispatcher = Dispatcher.from_config(config, registry=ctx.obj["registry"])
        batch = dispatcher.run_batch(
            task,
            framework_ids or dispatcher.framework_ids,
            model_ids or _DEFAULT_MODEL_IDS,
        )
    except SystemExit:
        raise
    except Exception as e:
        format_error(str(e), console)
        raise SystemExit(1) from None

    highlights = summarize(batch.runs)
    if as_json:
        payload = batch.to_dict()
        payload["highlights"] = highlights.to_dict() if highlights is not None else None
        click.echo(json.dumps(payload, indent=2))
        return

    format_batch(batch, console)
    format_highlights(highlights, console)
    if verbose:
        console.print()
        format_outputs(batch, console)
