"""Path utilities (safe resolution)."""

from __future__ import annotations
from pathlib import Path

from ..errors import E_FILE_MISSING, E_PATH_ESCAPE, FileMissingError

__all__ = ["safe_file_path"]


def safe_file_path(base_dir: Path, file_path: str) -> Path:
    """Resolve ``file_path`` under ``base_dir``; it may not escape it."""
    try:
        base_dir = Path(base_dir).resolve()
        resolved = (base_dir / file_path).resolve()
    except (OSError, ValueError) as e:
        # e.g. an embedded NUL byte or a symlink loop
        raise FileMissingError(
            code=E_FILE_MISSING,
            message=f"Unusable data file path {file_path!r}: {e}",
            context={"path": file_path, "base_dir": str(base_dir)},
        ) from e
    try:
        resolved.relative_to(base_dir)
    except ValueError as e:
        raise FileMissingError(
            code=E_PATH_ESCAPE,
            message=f"Path escapes data folder: {file_path}",
            context={"path": file_path, "base_dir": str(base_dir)},
        ) from e
    return resolved
