"""Pixel formats and sampling modes understood by render targets."""

from __future__ import annotations
from enum import Enum

__all__ = [
    "PixelFormat",
    "FilterMode",
    "WrapMode",
    "OversizePolicy",
    "VECTOR_STRIDE",
    "SCALAR_STRIDE",
]

# Component strides used by the export: positions are x, y, z plus one
# unused pad component; attributes are one float per particle.
VECTOR_STRIDE = 4
SCALAR_STRIDE = 1


class PixelFormat(Enum):
    R_FLOAT = ("RFloat", 1)
    RGBA_FLOAT = ("RGBAFloat", 4)

    def __init__(self, label: str, components: int) -> None:
        self.label = label
        self.components = components

    @property
    def bytes_per_pixel(self) -> int:
        return 4 * self.components

    @property
    def struct_format(self) -> str:
        return f"<{self.components}f"


class FilterMode(Enum):
    POINT = "point"


class WrapMode(Enum):
    CLAMP = "clamp"


class OversizePolicy(Enum):
    """What to do with input longer than the derived texture needs."""

    PASSTHROUGH = "passthrough"
    TRUNCATE = "truncate"
    REJECT = "reject"
