"""Dataclass models for the exported galaxy manifest."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple


class FamilyKind(str, Enum):
    """Particle families; the value is the manifest key."""

    GAS = "gas"
    STAR = "star"
    DARK_MATTER = "dm"

    @classmethod
    def parse(cls, value: "FamilyKind | str") -> "FamilyKind":
        """Return the member for ``value``; raises ValueError when unknown."""
        if isinstance(value, cls):
            return value
        return cls(str(value).lower())


@dataclass(frozen=True, slots=True)
class AttributeManifest:
    name: str
    file: str
    min: float
    max: float
    is_log: bool = False
    units: str = ""

    @property
    def has_valid_range(self) -> bool:
        return self.min <= self.max

    @property
    def is_constant(self) -> bool:
        return self.min == self.max


@dataclass(frozen=True, slots=True)
class FamilyManifest:
    count: int = 0
    position_file: Optional[str] = None
    attributes: Tuple[AttributeManifest, ...] = field(default_factory=tuple)

    @property
    def is_active(self) -> bool:
        return self.count > 0

    @property
    def default_attribute(self) -> Optional[AttributeManifest]:
        return self.attributes[0] if self.attributes else None

    def attribute(self, name: str) -> AttributeManifest:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        raise KeyError(name)


@dataclass(frozen=True, slots=True)
class GalaxyManifest:
    gas: FamilyManifest = field(default_factory=FamilyManifest)
    star: FamilyManifest = field(default_factory=FamilyManifest)
    dm: FamilyManifest = field(default_factory=FamilyManifest)

    def family(self, kind: FamilyKind) -> FamilyManifest:
        return getattr(self, kind.value)

    def __getitem__(self, kind: FamilyKind) -> FamilyManifest:
        return self.family(kind)

    def items(self) -> Iterator[tuple[FamilyKind, FamilyManifest]]:
        for kind in FamilyKind:
            yield kind, self.family(kind)

    @property
    def total_particles(self) -> int:
        return sum(fam.count for _, fam in self.items())


__all__ = [
    "FamilyKind",
    "AttributeManifest",
    "FamilyManifest",
    "GalaxyManifest",
]
