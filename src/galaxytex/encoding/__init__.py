from .formats import (
    PixelFormat,
    FilterMode,
    WrapMode,
    OversizePolicy,
    VECTOR_STRIDE,
    SCALAR_STRIDE,
)
from .encoder import (
    TextureBuffer,
    texture_dimensions,
    select_format,
    expected_byte_size,
    encode,
)

__all__ = [
    "PixelFormat",
    "FilterMode",
    "WrapMode",
    "OversizePolicy",
    "VECTOR_STRIDE",
    "SCALAR_STRIDE",
    "TextureBuffer",
    "texture_dimensions",
    "select_format",
    "expected_byte_size",
    "encode",
]
