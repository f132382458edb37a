"""agentmatrix CLI -- run one task across frameworks and models from a terminal.

This module is NEVER imported from agentmatrix/__init__.py.
It is only loaded via the ``agentmatrix`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

import logging

try:
    import click
    from dotenv import find_dotenv, load_dotenv
except ImportError:
    raise ImportError(
        "CLI dependencies not installed. Install with: pip install agentmatrix[cli]"
    ) from None

from agentmatrix.cli.formatting import format_error, get_console
from agentmatrix.exceptions import ConfigError
from agentmatrix.frameworks import FrameworkRegistry, default_registry
from agentmatrix.models.config import MatrixConfig

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--env-file",
    default=None,
    type=click.Path(dir_okay=False),
    help="Load environment variables from this .env file (default: ./.env if present).",
)
@click.option(
    "--log-level",
    default=None,
    envvar="AGENTMATRIX_LOG_LEVEL",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    help="Logging verbosity (default: WARNING).",
)
@click.pass_context
def cli(ctx: click.Context, env_file: str | None, log_level: str | None) -> None:
    """agentmatrix: compare agent frameworks and models on the same task."""
    dotenv_path = env_file or find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path, override=False)
    ctx.ensure_object(dict)
    ctx.obj["registry"] = default_registry()
    ctx.obj["log_level"] = log_level


def _load_config(ctx: click.Context) -> MatrixConfig:
    """Build the MatrixConfig from the environment and configure logging.

    Exits with status 1 on invalid configuration.
    """
    registry: FrameworkRegistry = ctx.obj["registry"]
    try:
        config = MatrixConfig.from_env(framework_ids=registry.ids())
    except ConfigError as e:
        format_error(str(e), get_console())
        raise SystemExit(1) from None

    level = (ctx.obj.get("log_level") or config.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return config


# Register subcommands after cli group is defined
from agentmatrix.cli.commands.run import run  # noqa: E402
from agentmatrix.cli.commands.catalog import frameworks, models  # noqa: E402

cli.add_command(run)
cli.add_command(frameworks)
cli.add_command(models)
