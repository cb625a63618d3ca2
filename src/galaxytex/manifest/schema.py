"""JSON Schema validation of decoded manifest documents."""

from __future__ import annotations

from functools import lru_cache
from importlib import resources
from typing import Any, Dict
import json

import jsonschema
from jsonschema.exceptions import best_match

from ..errors import E_MANIFEST_SHAPE, manifest_error

SCHEMA_RESOURCE = "manifest.schema.json"


@lru_cache(maxsize=1)
def load_schema() -> Dict[str, Any]:
    """Return the packaged manifest schema."""
    text = (
        resources.files(__package__)
        .joinpath(SCHEMA_RESOURCE)
        .read_text(encoding="utf-8")
    )
    return json.loads(text)


def _format_path(error: jsonschema.ValidationError) -> str:
    parts = [str(p) for p in error.absolute_path]
    return "->".join(parts) if parts else "(root)"


def validate_manifest_doc(doc: Any) -> None:
    """Raise ManifestError (E_MANIFEST_SHAPE) when ``doc`` breaks the schema.

    Only the most relevant failure is reported; for a family that is
    neither null nor a valid object this descends into the object branch.
    """
    validator = jsonschema.Draft7Validator(load_schema())
    error = best_match(validator.iter_errors(doc))
    if error is None:
        return
    path = _format_path(error)
    raise manifest_error(
        E_MANIFEST_SHAPE,
        f"Manifest validation failed at {path}: {error.message}",
        {"path": path},
    )


__all__ = ["load_schema", "validate_manifest_doc"]
