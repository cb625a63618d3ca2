"""Render target interface consumed by the family loader.

A render target is the visual-effect object that owns a family's
particles. The loader only pushes values into it; upload, shading and
playback are the target's business.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Protocol, runtime_checkable

from .encoding import TextureBuffer
from .errors import E_UPLOAD_REJECTED, UploadError

__all__ = [
    "PARTICLE_COUNT",
    "POSITION_MAP",
    "COLOR_MAP",
    "MIN_VALUE",
    "MAX_VALUE",
    "RenderTarget",
    "RecordingTarget",
]

PARTICLE_COUNT = "ParticleCount"
POSITION_MAP = "PositionMap"
COLOR_MAP = "ColorMap"
MIN_VALUE = "MinVal"
MAX_VALUE = "MaxVal"


@runtime_checkable
class RenderTarget(Protocol):
    def set_int(self, name: str, value: int) -> None: ...

    def set_float(self, name: str, value: float) -> None: ...

    def set_texture(self, name: str, texture: TextureBuffer) -> None:
        """Bind ``texture``; raise UploadError to refuse it."""
        ...

    def play(self) -> None: ...


@dataclass
class RecordingTarget:
    """In-memory render target.

    Keeps the last value pushed under each name. Textures whose data is
    shorter than their dimensions require are rejected; with ``strict``
    any size mismatch is.
    """

    strict: bool = False
    ints: Dict[str, int] = field(default_factory=dict)
    floats: Dict[str, float] = field(default_factory=dict)
    textures: Dict[str, TextureBuffer] = field(default_factory=dict)
    play_count: int = 0
    uploads: int = 0

    def set_int(self, name: str, value: int) -> None:
        self.ints[name] = int(value)

    def set_float(self, name: str, value: float) -> None:
        self.floats[name] = float(value)

    def set_texture(self, name: str, texture: TextureBuffer) -> None:
        size = len(texture.data)
        expected = texture.expected_size
        if size < expected or (self.strict and size != expected):
            raise UploadError(
                code=E_UPLOAD_REJECTED,
                message=(
                    f"{name}: {size} bytes for a {texture.width}x"
                    f"{texture.height} {texture.format.label} texture "
                    f"({expected} expected)"
                ),
                context={"name": name, "size": size, "expected": expected},
            )
        self.textures[name] = texture
        self.uploads += 1

    def play(self) -> None:
        self.play_count += 1

    @property
    def is_playing(self) -> bool:
        return self.play_count > 0

    @property
    def touched(self) -> bool:
        return bool(self.ints or self.floats or self.textures or self.play_count)
