"""Report assembly, rendering, explanations and storage."""

from __future__ import annotations

__all__ = [
    "HashedReport",
    "RenderContext",
    "create_hashed_report",
    "create_tamper_evident_report",
    "group_failed_by_severity",
    "load_and_verify_report",
    "render_full_report",
    "render_quiet_report",
    "render_verification_summary",
    "save_signed_report",
    "sign_report",
    "sign_text",
    "verify_directory",
]

from .assembler import (
    HashedReport,
    create_hashed_report,
    create_tamper_evident_report,
    sign_report,
    sign_text,
)
from .explanations import group_failed_by_severity
from .render import (
    RenderContext,
    render_full_report,
    render_quiet_report,
    render_verification_summary,
)
from .storage import load_and_verify_report, save_signed_report, verify_directory
