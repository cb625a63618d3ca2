"""Raw float buffers to texture-ready pixel buffers.

Particles are laid out one per pixel in row-major order on the smallest
near-square rectangle that holds them. Input shorter than that rectangle
is zero padded; the trailing pixels of the last row normally stay empty.

All functions are side-effect free.
"""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import Optional, Tuple

from ..errors import (
    E_EMPTY_INPUT,
    E_OVERSIZE_INPUT,
    E_TEXTURE_LIMIT,
    encode_error,
)
from .formats import FilterMode, OversizePolicy, PixelFormat, WrapMode

__all__ = [
    "TextureBuffer",
    "texture_dimensions",
    "select_format",
    "expected_byte_size",
    "encode",
]


@dataclass(frozen=True, slots=True)
class TextureBuffer:
    data: bytes
    width: int
    height: int
    format: PixelFormat
    particle_count: int
    padding: int = 0
    filter_mode: FilterMode = FilterMode.POINT
    wrap_mode: WrapMode = WrapMode.CLAMP

    @property
    def bytes_per_pixel(self) -> int:
        return self.format.bytes_per_pixel

    @property
    def expected_size(self) -> int:
        return self.width * self.height * self.bytes_per_pixel

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def texel(self, index: int) -> Tuple[float, ...]:
        """Decode pixel ``index`` (row-major) as floats."""
        if index < 0 or index >= self.pixel_count:
            raise IndexError(f"texel {index} outside {self.width}x{self.height}")
        return struct.unpack_from(
            self.format.struct_format, self.data, index * self.bytes_per_pixel
        )


def texture_dimensions(particle_count: int) -> Tuple[int, int]:
    """Return (width, height) with width = ceil(sqrt(n)), height = ceil(n / width)."""
    if particle_count <= 0:
        return 0, 0
    width = math.isqrt(particle_count)
    if width * width < particle_count:
        width += 1
    height = -(-particle_count // width)
    return width, height


def select_format(stride: int) -> PixelFormat:
    return PixelFormat.RGBA_FLOAT if stride >= 4 else PixelFormat.R_FLOAT


def expected_byte_size(particle_count: int, stride: int) -> int:
    width, height = texture_dimensions(particle_count)
    return width * height * select_format(stride).bytes_per_pixel


def encode(
    data: bytes | bytearray | memoryview,
    particle_count: int,
    stride: int,
    *,
    oversize: OversizePolicy = OversizePolicy.PASSTHROUGH,
    max_size: Optional[int] = None,
) -> TextureBuffer:
    """Lay ``data`` out as a ``width x height`` float texture.

    ``max_size`` caps the texture byte size; a larger texture raises
    E_TEXTURE_LIMIT before anything is allocated.
    """
    width, height = texture_dimensions(particle_count)
    if width == 0 or height == 0:
        raise encode_error(
            E_EMPTY_INPUT,
            f"Cannot build a texture for {particle_count} particles",
            {"particle_count": particle_count, "stride": stride},
        )
    fmt = select_format(stride)
    expected = width * height * fmt.bytes_per_pixel
    if max_size is not None and expected > max_size:
        raise encode_error(
            E_TEXTURE_LIMIT,
            f"Texture {width}x{height} needs {expected} bytes (limit {max_size})",
            {
                "particle_count": particle_count,
                "expected": expected,
                "limit": max_size,
            },
        )
    size = len(data)
    padding = 0
    if size < expected:
        padded = bytearray(expected)
        padded[:size] = data
        payload = bytes(padded)
        padding = expected - size
    elif size > expected and oversize is OversizePolicy.TRUNCATE:
        payload = bytes(data[:expected])
    elif size > expected and oversize is OversizePolicy.REJECT:
        raise encode_error(
            E_OVERSIZE_INPUT,
            f"Input holds {size} bytes, texture {width}x{height} takes {expected}",
            {"size": size, "expected": expected},
        )
    else:
        payload = bytes(data)
    return TextureBuffer(
        data=payload,
        width=width,
        height=height,
        format=fmt,
        particle_count=particle_count,
        padding=padding,
    )
