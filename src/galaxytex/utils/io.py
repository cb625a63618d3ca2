"""Binary file reads for particle data."""

from __future__ import annotations
from pathlib import Path

from ..errors import (
    E_FILE_MISSING,
    E_UPSTREAM_IO,
    FileMissingError,
    encode_error,
)
from .paths import safe_file_path

__all__ = ["DEFAULT_MAX_FILE_SIZE", "read_binary", "read_data_file"]

DEFAULT_MAX_FILE_SIZE = 512 * 1024 * 1024


def read_binary(path: Path, max_size: int = DEFAULT_MAX_FILE_SIZE) -> bytes:
    if not path.is_file():
        raise FileMissingError(
            code=E_FILE_MISSING,
            message=f"File missing: {path}",
            context={"path": str(path)},
        )
    try:
        size = path.stat().st_size
        if size > max_size:
            raise encode_error(
                E_UPSTREAM_IO,
                f"File too large: {size}>{max_size}",
                {"path": str(path), "size": size},
            )
        return path.read_bytes()
    except OSError as e:
        raise encode_error(
            E_UPSTREAM_IO,
            f"Could not read {path}: {e}",
            {"path": str(path)},
        ) from e


def read_data_file(
    base_dir: Path, relative: str, max_size: int = DEFAULT_MAX_FILE_SIZE
) -> bytes:
    """Read a manifest-relative data file under ``base_dir``."""
    return read_binary(safe_file_path(base_dir, relative), max_size)
