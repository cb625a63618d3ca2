"""Manifest loading (JSON/YAML) for GalaxyTex."""

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Mapping
import json

import yaml

from ..errors import (
    E_MANIFEST_MISSING,
    E_MANIFEST_PARSE,
    manifest_error,
)
from ..logging import get_logger
from .models import (
    AttributeManifest,
    FamilyKind,
    FamilyManifest,
    GalaxyManifest,
)
from .schema import validate_manifest_doc

YAML_SUFFIXES = {".yaml", ".yml"}


def load_manifest(path: str | Path) -> GalaxyManifest:
    p = Path(path)
    if not p.is_file():
        raise manifest_error(
            E_MANIFEST_MISSING,
            f"Manifest not found at: {p}",
            {"path": str(p)},
        )
    try:
        text = p.read_text(encoding="utf-8")
        if p.suffix.lower() in YAML_SUFFIXES:
            data: Any = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (OSError, UnicodeDecodeError, ValueError, yaml.YAMLError) as e:
        raise manifest_error(
            E_MANIFEST_PARSE,
            f"Could not decode manifest {p.name}: {e}",
            {"path": str(p)},
        ) from e
    manifest = parse_manifest_dict(data)
    get_logger().info(
        "Manifest loaded successfully: %s (%d particles)",
        p.name,
        manifest.total_particles,
    )
    return manifest


def parse_manifest_dict(data: Any) -> GalaxyManifest:
    validate_manifest_doc(data)
    families: Dict[str, FamilyManifest] = {}
    for kind in FamilyKind:
        raw = data.get(kind.value)
        families[kind.value] = (
            _parse_family(raw) if raw is not None else FamilyManifest()
        )
    return GalaxyManifest(**families)


def _parse_family(raw: Mapping[str, Any]) -> FamilyManifest:
    # A missing count is accepted and leaves the family inert.
    return FamilyManifest(
        count=int(raw.get("count", 0)),
        position_file=raw.get("position_file"),
        attributes=tuple(
            _parse_attribute(a) for a in raw.get("attributes") or []
        ),
    )


def _parse_attribute(raw: Mapping[str, Any]) -> AttributeManifest:
    return AttributeManifest(
        name=raw["name"],
        file=raw["file"],
        min=float(raw["min"]),
        max=float(raw["max"]),
        is_log=bool(raw["is_log"]),
        units=raw["units"],
    )


__all__ = ["load_manifest", "parse_manifest_dict"]
