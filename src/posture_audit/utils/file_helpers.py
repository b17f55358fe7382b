"""Shared file utilities for posture-audit.

Provides common utilities used by config, profiles and report storage:
- get_app_dir: OS-appropriate application directory
- get_log_dir: Log directory (user-specified or platform default)
- set_secure_permissions: Owner-only file/directory permissions
- require_file_exists: Consistent "not found" errors
- load_validated_json: JSON file -> validated Pydantic model
- atomic_write_text: temp file + rename so no partial file is left behind
"""

from __future__ import annotations

import json
import os
import sys
import tempfile
from pathlib import Path
from typing import TypeVar

import click
from platformdirs import user_log_dir
from pydantic import BaseModel, ValidationError

from posture_audit.constants import APP_NAME

# Type variable for Pydantic models
T = TypeVar("T", bound=BaseModel)

__all__ = [
    "atomic_write_text",
    "get_app_dir",
    "get_log_dir",
    "load_validated_json",
    "require_file_exists",
    "set_secure_permissions",
]


def get_app_dir() -> Path:
    """Get the OS-appropriate application directory.

    Uses click.get_app_dir() which returns:
    - macOS: ~/Library/Application Support/posture-audit
    - Linux: ~/.config/posture-audit (XDG compliant)
    - Windows: C:\\Users\\<user>\\AppData\\Roaming\\posture-audit

    Returns:
        Path to the application directory.
    """
    return Path(click.get_app_dir(APP_NAME))


def get_log_dir(log_dir: Path | None = None) -> Path:
    """Get the log directory.

    Args:
        log_dir: User-specified directory. If None, uses platform default
            (e.g. ~/Library/Logs/posture-audit, ~/.local/state/posture-audit/log).
    """
    return log_dir.expanduser() if log_dir else Path(user_log_dir(APP_NAME))


def set_secure_permissions(path: Path, *, is_directory: bool = False) -> None:
    """Restrict a file (0o600) or directory (0o700) to its owner.

    Does nothing on Windows. Permission errors are ignored.
    """
    if sys.platform == "win32":
        return

    try:
        mode = 0o700 if is_directory else 0o600
        path.chmod(mode)
    except OSError:
        pass  # Permission changes might fail on some systems


def require_file_exists(file_path: Path, file_type: str = "file") -> None:
    """Raise FileNotFoundError if file doesn't exist.

    Args:
        file_path: Path to check.
        file_type: Description for error message (e.g., "configuration", "facts").

    Raises:
        FileNotFoundError: If file doesn't exist.
    """
    if file_path.exists():
        return

    raise FileNotFoundError(f"{file_type.capitalize()} file not found: {file_path}")


def load_validated_json(
    file_path: Path,
    model_class: type[T],
    file_type: str = "file",
    recovery_hint: str | None = None,
) -> T:
    """Load JSON file and validate against Pydantic model.

    Combines file reading, JSON parsing, and Pydantic validation with
    consistent error messages.

    Args:
        file_path: Path to JSON file.
        model_class: Pydantic model class to validate against.
        file_type: Description for error messages (e.g., "config", "facts").
        recovery_hint: Optional hint appended to validation errors.

    Returns:
        Validated Pydantic model instance.

    Raises:
        ValueError: If JSON is invalid or validation fails.
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_type} file {file_path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Could not read {file_type} file {file_path}: {e}") from e

    try:
        return model_class.model_validate(data)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            errors.append(f"  - {loc}: {error['msg']}")

        hint = f"\n\n{recovery_hint}" if recovery_hint else ""
        raise ValueError(
            f"Invalid {file_type} in {file_path}:\n" + "\n".join(errors) + hint
        ) from e


def atomic_write_text(path: Path, text: str, *, secure: bool = False) -> None:
    """Write text to path atomically.

    Writes to a temp file in the target directory, fsyncs, then renames over
    the destination. The temp file is removed on every failure path.

    Args:
        path: Destination file.
        text: Content to write (UTF-8).
        secure: If True, restrict the resulting file to its owner.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_path, path)
    except BaseException:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise

    if secure:
        set_secure_permissions(path)
