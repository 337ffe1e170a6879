"""Root CLI group for leafpress with global flags and command registration."""

from __future__ import annotations

import click

from leafpress import __version__
from leafpress.commands import register_commands
from leafpress.commands._context import AppContext
from leafpress.config.settings import LeafSettings
from leafpress.domain.errors import ConfigurationError


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="leafpress")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and stage timings.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--env",
    "env",
    envvar="LEAFPRESS_ENV",
    default=None,
    help="Build environment (search export runs only in the export environment).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    env: str | None,
) -> None:
    """leafpress — content pipeline for documentation and article sites."""
    ctx.ensure_object(dict)
    try:
        settings = LeafSettings.from_cli(
            config_path=config_path,
            json_output=json_output or None,
            quiet=quiet or None,
            verbose=verbose or None,
            log_json=log_json or None,
            env=env,
        )
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
