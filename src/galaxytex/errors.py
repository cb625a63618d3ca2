"""Error definitions for GalaxyTex."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_MANIFEST_MISSING = "E_MANIFEST_MISSING"
E_MANIFEST_PARSE = "E_MANIFEST_PARSE"
E_MANIFEST_SHAPE = "E_MANIFEST_SHAPE"
E_FILE_MISSING = "E_FILE_MISSING"
E_PATH_ESCAPE = "E_PATH_ESCAPE"
E_EMPTY_INPUT = "E_EMPTY_INPUT"
E_UPSTREAM_IO = "E_UPSTREAM_IO"
E_OVERSIZE_INPUT = "E_OVERSIZE_INPUT"
E_TEXTURE_LIMIT = "E_TEXTURE_LIMIT"
E_RANGE = "E_RANGE"
E_UPLOAD_REJECTED = "E_UPLOAD_REJECTED"
E_UNKNOWN_FAMILY = "E_UNKNOWN_FAMILY"


@dataclass
class GalaxyTexError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class ManifestError(GalaxyTexError):
    """The manifest is missing or malformed; nothing can be loaded."""


class FileMissingError(GalaxyTexError):
    pass


class EncodeError(GalaxyTexError):
    pass


class UploadError(GalaxyTexError):
    """A render target refused a texture buffer."""


class UnknownFamilyError(GalaxyTexError):
    pass


def manifest_error(
    code: str, message: str, context: Optional[Dict[str, Any]] = None
) -> ManifestError:
    return ManifestError(code=code, message=message, context=context)


def encode_error(
    code: str, message: str, context: Optional[Dict[str, Any]] = None
) -> EncodeError:
    return EncodeError(code=code, message=message, context=context)


def unknown_family(name: Any) -> UnknownFamilyError:
    return UnknownFamilyError(
        code=E_UNKNOWN_FAMILY,
        message=f"Unknown particle family: {name!r}",
        context={"family": str(name)},
    )


__all__ = [
    "GalaxyTexError",
    "ManifestError",
    "FileMissingError",
    "EncodeError",
    "UploadError",
    "UnknownFamilyError",
    "manifest_error",
    "encode_error",
    "unknown_family",
    "E_MANIFEST_MISSING",
    "E_MANIFEST_PARSE",
    "E_MANIFEST_SHAPE",
    "E_FILE_MISSING",
    "E_PATH_ESCAPE",
    "E_EMPTY_INPUT",
    "E_UPSTREAM_IO",
    "E_OVERSIZE_INPUT",
    "E_TEXTURE_LIMIT",
    "E_RANGE",
    "E_UPLOAD_REJECTED",
    "E_UNKNOWN_FAMILY",
]
