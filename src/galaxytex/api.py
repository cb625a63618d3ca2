"""High-level entry points for GalaxyTex."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .config import LoaderOptions
from .encoding import OversizePolicy, TextureBuffer, encode
from .loader import FamilyLoader, TargetMap
from .logging import ensure_logging, section
from .manifest import GalaxyManifest, load_manifest
from .utils import DEFAULT_MAX_FILE_SIZE, read_binary

__all__ = [
    "LoaderOptions",
    "open_manifest",
    "load_galaxy",
    "encode_file",
]


def open_manifest(options: LoaderOptions) -> GalaxyManifest:
    """Decode ``options.manifest_path``; ManifestError is fatal."""
    return load_manifest(options.manifest_path)


def load_galaxy(
    options: LoaderOptions, targets: Optional[TargetMap] = None
) -> FamilyLoader:
    """Open the manifest and load every family that has a render target."""
    logger = ensure_logging()
    with section(f"Galaxy {options.data_dir.name}"):
        manifest = open_manifest(options)
        loader = FamilyLoader(manifest, options, targets)
        states = loader.load_all()
    logger.info(
        "Galaxy loaded: %s",
        " ".join(f"{k.value}={s.value}" for k, s in states.items()),
    )
    return loader


def encode_file(
    path: str | Path,
    particle_count: int,
    stride: int,
    *,
    oversize: OversizePolicy = OversizePolicy.PASSTHROUGH,
    max_size: int = DEFAULT_MAX_FILE_SIZE,
) -> TextureBuffer:
    return encode(
        read_binary(Path(path), max_size),
        particle_count,
        stride,
        oversize=oversize,
        max_size=max_size,
    )
