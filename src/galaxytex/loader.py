"""Per-family loading of galaxy textures into render targets.

For every family with a render target and at least one particle the
loader encodes the position file (stride 4) into the ``PositionMap``,
the first attribute (stride 1) into the ``ColorMap`` with its value
range, and starts playback. A failure on one file is logged and only
costs that map; the family still ends up ``READY``.

Families move ``INACTIVE -> LOADING -> READY``; attribute switches pass
through ``SWITCHING`` and return to ``READY``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .config import LoaderOptions
from .encoding import SCALAR_STRIDE, VECTOR_STRIDE, TextureBuffer, encode
from .errors import (
    E_FILE_MISSING,
    E_RANGE,
    EncodeError,
    FileMissingError,
    GalaxyTexError,
    UploadError,
    encode_error,
    unknown_family,
)
from .logging import get_logger
from .manifest import AttributeManifest, FamilyKind, GalaxyManifest
from .reporting import TaskStatus, get_reporter, task
from .targets import (
    COLOR_MAP,
    MAX_VALUE,
    MIN_VALUE,
    PARTICLE_COUNT,
    POSITION_MAP,
    RenderTarget,
)
from .utils import read_data_file

__all__ = ["FamilyState", "FamilyStatus", "FamilyLoader"]

TargetMap = Mapping[FamilyKind | str, Optional[RenderTarget]]


class FamilyState(Enum):
    INACTIVE = "inactive"
    LOADING = "loading"
    READY = "ready"
    SWITCHING = "switching"


def _texture_info(tex: TextureBuffer) -> Dict[str, Any]:
    return {
        "width": tex.width,
        "height": tex.height,
        "format": tex.format.label,
        "bytes": len(tex.data),
        "padding": tex.padding,
    }


@dataclass(slots=True)
class FamilyStatus:
    kind: FamilyKind
    state: FamilyState = FamilyState.INACTIVE
    announced_count: Optional[int] = None
    position: Optional[Dict[str, Any]] = None
    color: Optional[Dict[str, Any]] = None
    active_attribute: Optional[AttributeManifest] = None
    errors: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        attr = self.active_attribute
        return {
            "state": self.state.value,
            "announced_count": self.announced_count,
            "position": self.position,
            "color": self.color,
            "attribute": (
                {
                    "name": attr.name,
                    "min": attr.min,
                    "max": attr.max,
                    "is_log": attr.is_log,
                    "units": attr.units,
                }
                if attr is not None
                else None
            ),
            "errors": list(self.errors),
        }


class FamilyLoader:
    def __init__(
        self,
        manifest: GalaxyManifest,
        options: LoaderOptions,
        targets: Optional[TargetMap] = None,
    ) -> None:
        self.manifest = manifest
        self.options = options
        self._targets: Dict[FamilyKind, RenderTarget] = {}
        for key, target in (targets or {}).items():
            kind = self._kind(key)
            if target is not None:
                self._targets[kind] = target
        self._status = {kind: FamilyStatus(kind) for kind in FamilyKind}
        self._log = get_logger()

    # Lookups -----------------------------------------------------------------
    @staticmethod
    def _kind(family: FamilyKind | str) -> FamilyKind:
        try:
            return FamilyKind.parse(family)
        except ValueError:
            raise unknown_family(family) from None

    def particle_count(self, family: FamilyKind | str) -> int:
        return self.manifest.family(self._kind(family)).count

    def target(self, family: FamilyKind | str) -> Optional[RenderTarget]:
        return self._targets.get(self._kind(family))

    def state(self, family: FamilyKind | str) -> FamilyState:
        return self._status[self._kind(family)].state

    def status(self, family: FamilyKind | str) -> FamilyStatus:
        return self._status[self._kind(family)]

    def active_attribute(
        self, family: FamilyKind | str
    ) -> Optional[AttributeManifest]:
        return self._status[self._kind(family)].active_attribute

    # Loading -----------------------------------------------------------------
    def load_all(self) -> Dict[FamilyKind, FamilyState]:
        return {kind: self.load_family(kind) for kind in FamilyKind}

    def load_family(self, family: FamilyKind | str) -> FamilyState:
        kind = self._kind(family)
        manifest = self.manifest.family(kind)
        status = self._status[kind]
        target = self._targets.get(kind)
        task_id = f"family.{kind.value}"
        rep = get_reporter()
        if target is None or not manifest.is_active:
            self._log.debug(
                "Skipping %s (particles=%d, target=%s)",
                kind.value,
                manifest.count,
                "yes" if target is not None else "no",
            )
            rep.start_task(task_id, f"Load {kind.value}", total=0)
            rep.end_task(task_id, TaskStatus.SKIPPED, particles=manifest.count)
            return status.state

        count = manifest.count
        self._log.info("Loading %s: %d particles...", kind.value, count)
        status.state = FamilyState.LOADING
        status.errors.clear()
        status.position = status.color = status.active_attribute = None
        steps = 1 + (1 if manifest.attributes else 0)
        try:
            with task(task_id, f"Load {kind.value}", total=steps) as stats:
                stats["particles"] = count
                self._load_maps(kind, target, stats)
                target.play()
        finally:
            status.state = FamilyState.READY
        rep.status(self._summary_line(status, count))
        return status.state

    def _load_maps(
        self, kind: FamilyKind, target: RenderTarget, stats: Dict[str, Any]
    ) -> None:
        manifest = self.manifest.family(kind)
        status = self._status[kind]
        task_id = f"family.{kind.value}"
        rep = get_reporter()
        count = manifest.count
        announced = count
        if self.options.particle_cap is not None:
            announced = min(count, self.options.particle_cap)
        target.set_int(PARTICLE_COUNT, announced)
        status.announced_count = announced

        tex = None
        if manifest.position_file:
            tex = self._encode_file(
                kind, manifest.position_file, count, VECTOR_STRIDE
            )
        else:
            self._record(
                kind,
                FileMissingError(
                    code=E_FILE_MISSING,
                    message=f"No position file declared for {kind.value}",
                ),
            )
        delivered = tex is not None and self._deliver(
            kind, target, POSITION_MAP, tex
        )
        if delivered:
            status.position = _texture_info(tex)
            stats.update(
                width=tex.width,
                height=tex.height,
                bytes=len(tex.data),
                padded=tex.padding,
            )
        rep.advance(task_id, current_item=POSITION_MAP)

        default = manifest.default_attribute
        if default is not None:
            self._apply_attribute(kind, default, target)
            rep.advance(task_id, current_item=COLOR_MAP)

    def switch_attribute(
        self, attribute: AttributeManifest | str, family: FamilyKind | str
    ) -> bool:
        """Re-encode ``attribute`` into the family's color map.

        Positions are left alone. Returns True when the new map and range
        reached the render target.
        """
        kind = self._kind(family)
        status = self._status[kind]
        target = self._targets.get(kind)
        if status.state is not FamilyState.READY or target is None:
            self._log.warning(
                "Cannot switch %s attribute: family is %s",
                kind.value,
                status.state.value,
            )
            return False
        if isinstance(attribute, str):
            try:
                attribute = self.manifest.family(kind).attribute(attribute)
            except KeyError:
                self._log.error(
                    "Unknown attribute %r for %s", attribute, kind.value
                )
                return False
        status.state = FamilyState.SWITCHING
        try:
            return self._apply_attribute(kind, attribute, target)
        finally:
            status.state = FamilyState.READY

    # Internals ---------------------------------------------------------------
    def _record(self, kind: FamilyKind, err: GalaxyTexError) -> None:
        self._status[kind].errors.append(err.to_dict())
        self._log.error("[%s] %s", kind.value, err)

    def _encode_file(
        self, kind: FamilyKind, relative: str, count: int, stride: int
    ) -> Optional[TextureBuffer]:
        try:
            data = read_data_file(
                self.options.data_dir, relative, self.options.max_file_size
            )
            tex = encode(
                data,
                count,
                stride,
                oversize=self.options.oversize,
                max_size=self.options.max_file_size,
            )
        except (FileMissingError, EncodeError) as e:
            self._record(kind, e)
            return None
        if tex.padding:
            self._log.debug(
                "Padded %s with %d bytes (%dx%d)",
                relative,
                tex.padding,
                tex.width,
                tex.height,
            )
        return tex

    def _deliver(
        self,
        kind: FamilyKind,
        target: RenderTarget,
        name: str,
        tex: TextureBuffer,
    ) -> bool:
        try:
            target.set_texture(name, tex)
        except UploadError as e:
            self._record(kind, e)
            return False
        return True

    def _apply_attribute(
        self,
        kind: FamilyKind,
        attr: AttributeManifest,
        target: RenderTarget,
    ) -> bool:
        if self.options.strict_ranges and not attr.has_valid_range:
            self._record(
                kind,
                encode_error(
                    E_RANGE,
                    f"Attribute {attr.name} has min {attr.min} > max {attr.max}",
                    {"attribute": attr.name},
                ),
            )
            return False
        tex = self._encode_file(
            kind, attr.file, self.manifest.family(kind).count, SCALAR_STRIDE
        )
        if tex is None or not self._deliver(kind, target, COLOR_MAP, tex):
            return False
        target.set_float(MIN_VALUE, attr.min)
        target.set_float(MAX_VALUE, attr.max)
        status = self._status[kind]
        status.color = _texture_info(tex)
        status.active_attribute = attr
        self._log.info("Switched %s to %s", kind.value, attr.name)
        return True

    @staticmethod
    def _summary_line(status: FamilyStatus, count: int) -> str:
        attr = status.active_attribute
        return (
            f"Family summary: name={status.kind.value} particles={count} "
            f"position={'ok' if status.position else 'unset'} "
            f"color={attr.name if attr else 'unset'} "
            f"errors={len(status.errors)}"
        )

    def summary(self) -> Dict[str, Any]:
        families = {
            kind.value: {
                "particles": self.manifest.family(kind).count,
                **self._status[kind].to_dict(),
            }
            for kind in FamilyKind
        }
        ready = sum(
            1 for s in self._status.values() if s.state is FamilyState.READY
        )
        return {
            "families": families,
            "counts": {
                "families_ready": ready,
                "particles_total": self.manifest.total_particles,
                "errors": sum(len(s.errors) for s in self._status.values()),
            },
        }
