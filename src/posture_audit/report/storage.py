"""Saving and verifying signed report files.

Files are read and written byte-for-byte as UTF-8 with newline translation
disabled, since any change to line endings would break the hash.
"""

from __future__ import annotations

__all__ = [
    "DirectoryVerificationSummary",
    "FileStatus",
    "FileVerificationOutcome",
    "load_and_verify_report",
    "save_hashed_report",
    "save_signed_report",
    "verify_directory",
]

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from posture_audit.report.assembler import HashedReport, sign_report
from posture_audit.signing.envelope import extract_signature
from posture_audit.signing.verifier import VerificationResult, verify_signed_text
from posture_audit.utils.file_helpers import atomic_write_text
from posture_audit.utils.logging.system_logger import get_system_logger


def save_signed_report(path: Path, signed_text: str) -> None:
    """Write signed report text atomically (owner-only permissions)."""
    atomic_write_text(path, signed_text, secure=True)


def save_hashed_report(hashed: HashedReport, path: Path) -> None:
    save_signed_report(path, sign_report(hashed))


def _read_text(path: Path, errors: str = "strict") -> str:
    with open(path, "r", encoding="utf-8", errors=errors, newline="") as f:
        return f.read()


def load_and_verify_report(path: Path, secret: str | None = None) -> tuple[str, VerificationResult]:
    """Read a signed report and verify it.

    Returns:
        (file_text, verification_result)

    Raises:
        FileNotFoundError: If the file doesn't exist.
    """
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")

    text = _read_text(path)
    return text, verify_signed_text(text, secret)


class FileStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class FileVerificationOutcome:
    file: str
    status: FileStatus
    message: str = ""
    result: VerificationResult | None = None


@dataclass(frozen=True, slots=True)
class DirectoryVerificationSummary:
    """Per-file outcomes of verifying a directory of reports."""

    directory: Path
    outcomes: list[FileVerificationOutcome] = field(default_factory=list)

    def _count(self, status: FileStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)

    @property
    def total_files(self) -> int:
        return len(self.outcomes)

    @property
    def passed_count(self) -> int:
        return self._count(FileStatus.PASSED)

    @property
    def failed_count(self) -> int:
        return self._count(FileStatus.FAILED)

    @property
    def skipped_count(self) -> int:
        return self._count(FileStatus.SKIPPED)

    @property
    def all_passed(self) -> bool:
        """True when no file failed (skipped files don't count)."""
        return self.failed_count == 0


def verify_directory(directory: Path, secret: str | None = None) -> DirectoryVerificationSummary:
    """Verify every signed report in a directory (not recursive).

    Files without a signature block are skipped; unreadable files fail.

    Raises:
        FileNotFoundError: If the directory doesn't exist.
        NotADirectoryError: If the path is not a directory.
        ValueError: If the directory contains no files.
    """
    if not directory.exists():
        raise FileNotFoundError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {directory}")

    files = sorted(p for p in directory.iterdir() if p.is_file())
    if not files:
        raise ValueError(f"No files found in directory: {directory}")

    summary = DirectoryVerificationSummary(directory=directory)
    for path in files:
        try:
            text = _read_text(path, errors="replace")
        except OSError as e:
            summary.outcomes.append(
                FileVerificationOutcome(path.name, FileStatus.FAILED, f"Error: {e}")
            )
            continue

        if extract_signature(text) is None:
            summary.outcomes.append(
                FileVerificationOutcome(path.name, FileStatus.SKIPPED, "No security signature found")
            )
            continue

        result = verify_signed_text(text, secret)
        status = FileStatus.PASSED if result.is_valid else FileStatus.FAILED
        summary.outcomes.append(FileVerificationOutcome(path.name, status, result.message, result))

    if summary.failed_count:
        get_system_logger().warning(
            {
                "event": "directory_verification_failed",
                "directory": str(directory),
                "failed": summary.failed_count,
                "total": summary.total_files,
            }
        )
    return summary
