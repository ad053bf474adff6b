"""Main CLI entry point for SIP Test Utility.

This module provides the main Click command group for the sip-test-util CLI.
"""

from pathlib import Path
from typing import Optional

import click

from sip_test_util import __version__
from sip_test_util.config import apply_polling_config, load_config
from sip_test_util.logging_audit import configure_logging
from sip_test_util.models.status_codes import StatusCode, reason_phrase_for
from sip_test_util.utils.exceptions import ConfigurationError


@click.group()
@click.version_option(version=__version__, prog_name="sip-test-util")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: ./config/config.json)",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging (DEBUG level)")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to log file (overrides config file)",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: bool,
    log_file: Optional[Path],
) -> None:
    """SIP Test Utility - assertion and polling helpers for SIP tests.

    Common usage:

        # Check a configuration file
        sip-test-util config validate config/config.json

        # Show the effective configuration
        sip-test-util config show

        # Look up a reason phrase
        sip-test-util reason 486
    """
    ctx.ensure_object(dict)

    try:
        config_obj = load_config(config)
    except ConfigurationError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        ctx.exit(1)
        return

    ctx.obj["config"] = config_obj
    ctx.obj["verbose"] = verbose

    # Precedence: CLI flags > config file > defaults
    log_level = "DEBUG" if verbose else config_obj.logging.level
    log_file_path = log_file if log_file else config_obj.logging.log_file
    configure_logging(
        level=log_level,
        log_file=log_file_path,
        redact_credentials=config_obj.logging.redact_credentials,
    )
    apply_polling_config(config_obj)


@cli.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command()
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
def validate(config_file: Path) -> None:
    """Validate a configuration file.

    Example:
        sip-test-util config validate config/config.json
    """
    try:
        config_obj = load_config(config_file)
    except ConfigurationError as e:
        click.echo(click.style("✗", fg="red", bold=True) + " Configuration validation failed")
        click.echo(f"\n{e}", err=True)
        raise click.exceptions.Exit(1)

    click.echo(click.style("✓", fg="green", bold=True) + " Configuration is valid")
    click.echo(f"\nConfiguration file: {config_file}")
    _echo_config(config_obj)


@config.command()
@click.pass_context
def show(ctx: click.Context) -> None:
    """Show the effective configuration (file, environment and defaults)."""
    _echo_config(ctx.obj["config"])


def _echo_config(config_obj) -> None:
    click.echo("\nPolling:")
    click.echo(f"  Poll interval: {config_obj.polling.poll_interval}s")
    click.echo(f"  Timeout:       {config_obj.polling.timeout}s")

    click.echo("\nLogging:")
    click.echo(f"  Level:         {config_obj.logging.level}")
    click.echo(f"  Log file:      {config_obj.logging.log_file}")
    click.echo(f"  Redact creds:  {config_obj.logging.redact_credentials}")


@cli.command()
@click.argument("code", type=int)
def reason(code: int) -> None:
    """Print the canonical reason phrase for a SIP status CODE.

    Exits with status 1 for codes outside the registry.
    """
    phrase = reason_phrase_for(code)
    if not phrase:
        click.echo(f"{code}: unknown status code", err=True)
        raise click.exceptions.Exit(1)
    click.echo(f"{code} {phrase} ({StatusCode(code).name})")


@cli.command()
def version() -> None:
    """Display version information."""
    click.echo(f"sip-test-util version {__version__}")


if __name__ == "__main__":
    cli()
