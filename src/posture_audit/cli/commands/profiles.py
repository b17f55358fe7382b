"""Profiles command for posture-audit CLI."""

from __future__ import annotations

__all__ = ["profiles"]

import json
import sys
from pathlib import Path

import click

from posture_audit.profiles import DEFAULT_PROFILE, PROFILE_NAMES, get_profile

from ..styling import style_label, style_success


@click.command("profiles")
@click.argument("name", required=False, type=click.Choice(PROFILE_NAMES))
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Save the profile as a config file (use with NAME)",
)
def profiles(name: str | None, output_path: Path | None) -> None:
    """List built-in profiles, or show NAME as configuration JSON."""
    if name is None:
        if output_path is not None:
            raise click.UsageError("--output requires a profile NAME")
        click.echo(style_label("Profiles"))
        for profile_name in PROFILE_NAMES:
            marker = " (default)" if profile_name == DEFAULT_PROFILE else ""
            click.echo(f"  {profile_name}{marker}")
        return

    config = get_profile(name)
    if output_path is not None:
        try:
            config.save_to_file(output_path)
        except OSError as e:
            click.echo(f"Could not write {output_path}: {e}", err=True)
            sys.exit(1)
        click.echo(style_success(f"Profile '{name}' saved to {output_path}"))
        return

    click.echo(json.dumps(config.to_json_dict(), indent=2))
