from .models import (
    FamilyKind,
    AttributeManifest,
    FamilyManifest,
    GalaxyManifest,
)
from .loader import load_manifest, parse_manifest_dict
from .schema import validate_manifest_doc

__all__ = [
    "FamilyKind",
    "AttributeManifest",
    "FamilyManifest",
    "GalaxyManifest",
    "load_manifest",
    "parse_manifest_dict",
    "validate_manifest_doc",
]
