"""CLI output styling helpers.

Visual language:
- Cyan bold for labels
- Green with checkmark for success
- Red with cross for errors
- Yellow bold for warnings
- Dim for neutral detail lines
"""

from __future__ import annotations

__all__ = [
    "style_dim",
    "style_error",
    "style_label",
    "style_success",
    "style_warning",
]

import click


def style_label(label: str) -> str:
    """Cyan bold label with a colon suffix, e.g. "Hash:"."""
    return click.style(f"{label}:", fg="cyan", bold=True)


def style_success(message: str) -> str:
    """Green message with checkmark prefix.

    Example:
        >>> click.echo(style_success("Report integrity verified"))
        ✓ Report integrity verified
    """
    return click.style(f"✓ {message}", fg="green")


def style_error(message: str) -> str:
    """Red message with cross prefix.

    Example:
        >>> click.echo(style_error("Report has been tampered with"), err=True)
        ✗ Report has been tampered with
    """
    return click.style(f"✗ {message}", fg="red")


def style_warning(message: str) -> str:
    return click.style(f"Warning: {message}", fg="yellow", bold=True)


def style_dim(message: str) -> str:
    return click.style(message, dim=True)
