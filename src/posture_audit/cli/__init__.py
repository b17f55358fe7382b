"""Command-line interface for posture-audit.

Provides commands for running an audit, verifying signed reports, and
inspecting the built-in profiles.
"""

from .main import cli, main

__all__ = ["cli", "main"]
