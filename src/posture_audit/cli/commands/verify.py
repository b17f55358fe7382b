"""Verify command for posture-audit CLI.

Verifies the signature of a report file, or of every signed report in a
directory.

Exit codes:
  0 - All reports verified
  1 - Tampering detected, nothing to verify, or unable to verify
"""

from __future__ import annotations

__all__ = ["verify"]

import sys
from pathlib import Path

import click

from posture_audit.report.render import render_verification_summary
from posture_audit.report.storage import FileStatus, load_and_verify_report, verify_directory

from ..styling import style_dim, style_error, style_label, style_success, style_warning

EXIT_PASSED = 0
EXIT_FAILED = 1


def _verify_file(path: Path) -> None:
    try:
        _text, result = load_and_verify_report(path)
    except (FileNotFoundError, OSError, UnicodeDecodeError) as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(EXIT_FAILED)

    click.echo(render_verification_summary(result), nl=False)
    if result.is_valid:
        click.echo(style_success("Report integrity verified"))
        sys.exit(EXIT_PASSED)
    click.echo(style_error(result.message))
    sys.exit(EXIT_FAILED)


def _verify_directory(path: Path) -> None:
    try:
        summary = verify_directory(path)
    except (FileNotFoundError, NotADirectoryError, ValueError) as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(EXIT_FAILED)

    click.echo(style_label(f"Verifying reports in {path}"))
    for outcome in summary.outcomes:
        if outcome.status is FileStatus.PASSED:
            status = style_success("verified")
        elif outcome.status is FileStatus.FAILED:
            status = style_error("FAILED")
        else:
            status = style_dim("skipped")
        click.echo(f"  {outcome.file:40} {status}")
        if outcome.status is not FileStatus.PASSED and outcome.message:
            click.echo(style_dim(f"  {'':40} {outcome.message}"))

    click.echo()
    counts = (
        f"{summary.passed_count} passed, {summary.failed_count} failed, "
        f"{summary.skipped_count} skipped ({summary.total_files} files)"
    )
    if summary.failed_count:
        click.echo(style_error(f"INTEGRITY CHECK FAILED: {counts}"))
        sys.exit(EXIT_FAILED)
    if summary.passed_count == 0:
        click.echo(style_warning(f"No signed reports found: {counts}"))
        sys.exit(EXIT_FAILED)
    click.echo(style_success(f"All signed reports verified: {counts}"))
    sys.exit(EXIT_PASSED)


@click.command("verify")
@click.argument("path", type=click.Path(path_type=Path))
def verify(path: Path) -> None:
    """Verify a signed report file or a directory of reports.

    Requires the same POSTURE_AUDIT_SECRET that was used for signing.
    """
    if path.is_dir():
        _verify_directory(path)
    else:
        _verify_file(path)
