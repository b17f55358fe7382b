"""Main CLI entry point for posture-audit.

Defines the CLI group and registers all subcommands.

Commands:
    check     - Audit collected facts against a profile or config file
    verify    - Verify a signed report file or a directory of reports
    profiles  - List built-in profiles or show one as JSON

Subcommand help:
    posture-audit COMMAND -h         Show help for a specific command
"""

from __future__ import annotations

__all__ = ["cli", "main"]

import logging
import sys
from pathlib import Path

import click

from posture_audit import __version__
from posture_audit.constants import SECRET_ENV_VAR
from posture_audit.utils.file_helpers import get_log_dir
from posture_audit.utils.logging.system_logger import (
    configure_system_logger_file,
    set_console_level,
)

from .commands.check import check
from .commands.profiles import profiles
from .commands.verify import verify


class ReorderedGroup(click.Group):
    """Group that appends usage examples after the command list."""

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        formatter.write(
            f"""
Quick Start:
  export {SECRET_ENV_VAR}=...               Required to sign and verify reports
  posture-audit check --facts facts.json --output report.txt
  posture-audit verify report.txt

Profiles (for check --profile):
  default, strict, relaxed, developer
"""
        )


@click.group(
    cls=ReorderedGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option("--verbose", is_flag=True, help="Show informational log messages on stderr")
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="POSTURE_AUDIT_LOG_DIR",
    help="Directory for system.jsonl (default: platform log directory)",
)
@click.pass_context
def cli(ctx: click.Context, version: bool, verbose: bool, log_dir: Path | None) -> None:
    """posture-audit: OS security posture auditing with tamper-evident reports."""
    if version:
        click.echo(f"posture-audit {__version__}")
        sys.exit(0)
    if verbose:
        set_console_level(logging.INFO)
    configure_system_logger_file(get_log_dir(log_dir) / "system.jsonl")
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(check)
cli.add_command(profiles)
cli.add_command(verify)


def main() -> None:
    """CLI entry point."""
    cli()
