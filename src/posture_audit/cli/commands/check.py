"""Check command for posture-audit CLI.

Runs the audit engine over a facts file and prints the report. With --output
(or --save) the full report is signed and written to disk.

Exit codes:
  0 - All checks passed
  1 - One or more checks failed, or the audit could not run
"""

from __future__ import annotations

__all__ = ["check"]

import asyncio
import sys
from pathlib import Path
from typing import NoReturn

import click

from posture_audit.audit.engine import audit_security
from posture_audit.audit.facts import PLATFORM_LABELS
from posture_audit.audit.static_provider import StaticFactsProvider
from posture_audit.config import SecurityConfig
from posture_audit.constants import DEFAULT_FACT_TIMEOUT_SECONDS
from posture_audit.exceptions import ConfigurationError, PostureAuditError
from posture_audit.profiles import DEFAULT_PROFILE, PROFILE_NAMES, get_profile
from posture_audit.report.assembler import create_tamper_evident_report
from posture_audit.report.render import RenderContext, render_full_report, render_quiet_report
from posture_audit.report.storage import save_signed_report
from posture_audit.utils.file_helpers import get_app_dir
from posture_audit.utils.logging.system_logger import get_system_logger

from ..styling import style_dim, style_error, style_label, style_success

EXIT_PASSED = 0
EXIT_FAILED = 1

# File name for --save, stamped with the report time
_REPORT_FILENAME_FORMAT = "security-report-{stamp}.txt"


def _load_config(config_path: Path | None, profile: str | None) -> tuple[SecurityConfig, str]:
    """Resolve the configuration and a label for report metadata."""
    if config_path is not None and profile is not None:
        raise ConfigurationError("Use either --config or --profile, not both")
    if config_path is not None:
        try:
            return SecurityConfig.load_from_file(config_path), "custom"
        except (FileNotFoundError, ValueError) as e:
            raise ConfigurationError(str(e)) from e
    name = profile or DEFAULT_PROFILE
    return get_profile(name), name


def _abort(error: PostureAuditError) -> NoReturn:
    get_system_logger().error(
        {
            "event": "check_aborted",
            "failure_type": error.failure_type,
            "exit_code": error.exit_code,
            "message": str(error),
        }
    )
    click.echo(style_error(str(error)), err=True)
    sys.exit(error.exit_code)


def _default_report_path(timestamp: str) -> Path:
    stamp = timestamp.replace(":", "").replace("-", "").replace(".", "")
    return get_app_dir() / "reports" / _REPORT_FILENAME_FORMAT.format(stamp=stamp)


@click.command("check")
@click.option(
    "--facts",
    "-f",
    "facts_path",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="JSON file with the device facts to audit",
)
@click.option(
    "--profile",
    "-p",
    type=click.Choice(PROFILE_NAMES),
    help=f"Built-in profile (default: {DEFAULT_PROFILE})",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration JSON file (instead of --profile)",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the signed report to this file",
)
@click.option("--save", is_flag=True, help="Write the signed report to the app reports directory")
@click.option("--quiet", "-q", is_flag=True, help="Print only the summary")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_FACT_TIMEOUT_SECONDS,
    show_default=True,
    help="Seconds allowed per check",
)
def check(
    facts_path: Path,
    profile: str | None,
    config_path: Path | None,
    output_path: Path | None,
    save: bool,
    quiet: bool,
    timeout: float,
) -> None:
    """Audit device facts against a security profile."""
    try:
        config, config_label = _load_config(config_path, profile)
        provider = StaticFactsProvider.from_file(facts_path)
    except ConfigurationError as e:
        _abort(e)
    except (FileNotFoundError, ValueError) as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(EXIT_FAILED)

    report = asyncio.run(audit_security(config, provider, fact_timeout_seconds=timeout))

    platform_label = PLATFORM_LABELS[provider.platform]
    system = f"{platform_label} ({provider.hostname})" if provider.hostname else platform_label
    context = RenderContext(platform_label=platform_label, system=system)
    full_text = render_full_report(report, context)

    if output_path is None and save:
        output_path = _default_report_path(report.timestamp)

    if output_path is not None:
        metadata = {"platform": provider.platform.value, "profile": config_label}
        if provider.hostname:
            metadata["hostname"] = provider.hostname
        try:
            signed_text, hashed = create_tamper_evident_report(full_text, metadata)
            save_signed_report(output_path, signed_text)
        except ConfigurationError as e:
            _abort(e)
        except OSError as e:
            click.echo(style_error(f"Could not write report to {output_path}: {e}"), err=True)
            sys.exit(EXIT_FAILED)

    click.echo(render_quiet_report(report, context) if quiet else full_text, nl=False)

    if output_path is not None:
        click.echo()
        click.echo(style_success(f"Signed report saved to {output_path}"))
        click.echo(f"{style_label('Hash')} {hashed.short_hash}")
        click.echo(style_dim(f"Verify with: posture-audit verify \"{output_path}\""))

    sys.exit(EXIT_PASSED if report.overall_passed else EXIT_FAILED)
