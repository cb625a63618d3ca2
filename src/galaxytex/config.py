"""Loader configuration.

Options come either from code (``LoaderOptions(...)``) or from a small
YAML/JSON file::

    data_dir: GalaxyExport
    particle_cap: 1000
    oversize: truncate
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional
import json

import yaml

from .encoding import OversizePolicy
from .utils import DEFAULT_MAX_FILE_SIZE

__all__ = ["LoaderOptions", "load_options", "DEFAULT_MANIFEST_NAME"]

DEFAULT_MANIFEST_NAME = "manifest.json"


@dataclass(slots=True)
class LoaderOptions:
    data_dir: Path
    manifest_name: str = DEFAULT_MANIFEST_NAME
    # Caps the particle count announced to render targets only; encoding
    # always uses the manifest count.
    particle_cap: Optional[int] = None
    oversize: OversizePolicy = OversizePolicy.PASSTHROUGH
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    # Reject attributes whose declared min is above max.
    strict_ranges: bool = True

    def __post_init__(self) -> None:
        self.data_dir = Path(self.data_dir)
        if not isinstance(self.oversize, OversizePolicy):
            try:
                self.oversize = OversizePolicy(str(self.oversize).lower())
            except ValueError as e:
                raise ValueError(
                    f"Unsupported oversize policy: {self.oversize!r}"
                ) from e
        if self.particle_cap is not None and self.particle_cap <= 0:
            raise ValueError("particle_cap must be positive when set")
        if self.max_file_size <= 0:
            raise ValueError("max_file_size must be positive")

    @property
    def manifest_path(self) -> Path:
        return self.data_dir / self.manifest_name

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], *, base_dir: Path | None = None
    ) -> "LoaderOptions":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown option(s): {', '.join(unknown)}")
        if "data_dir" not in data:
            raise ValueError("Missing required option: data_dir")
        values = dict(data)
        data_dir = Path(values["data_dir"])
        if base_dir is not None and not data_dir.is_absolute():
            data_dir = base_dir / data_dir
        values["data_dir"] = data_dir
        return cls(**values)


def load_options(path: str | Path) -> LoaderOptions:
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in {".yaml", ".yml"}:
        data: Any = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Root of options file must be an object")
    return LoaderOptions.from_mapping(data, base_dir=p.parent)
