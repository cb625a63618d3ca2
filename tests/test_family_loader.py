"""Family orchestration: which maps reach the render target, and when."""

from pathlib import Path

import pytest

from galaxytex.config import LoaderOptions
from galaxytex.encoding import PixelFormat
from galaxytex.errors import (
    E_FILE_MISSING,
    E_PATH_ESCAPE,
    E_RANGE,
    E_TEXTURE_LIMIT,
    E_UPLOAD_REJECTED,
)
from galaxytex.loader import FamilyLoader, FamilyState
from galaxytex.manifest import FamilyKind, load_manifest, parse_manifest_dict
from galaxytex.reporting import SilentReporter, set_reporter
from galaxytex.targets import (
    COLOR_MAP,
    MAX_VALUE,
    MIN_VALUE,
    PARTICLE_COUNT,
    POSITION_MAP,
    RecordingTarget,
)

from export_helper import family_doc, make_export, position_values, write_floats


@pytest.fixture(autouse=True)
def _quiet_reporter():
    set_reporter(SilentReporter())


def _loader(root: Path, targets, **opts) -> FamilyLoader:
    manifest = load_manifest(root / "manifest.json")
    return FamilyLoader(manifest, LoaderOptions(data_dir=root, **opts), targets)


def _codes(loader: FamilyLoader, kind) -> list[str]:
    return [e["code"] for e in loader.status(kind).errors]


def _attr(name: str, file: str, lo: float, hi: float) -> dict:
    return {
        "name": name,
        "file": file,
        "min": lo,
        "max": hi,
        "is_log": False,
        "units": "",
    }


def test_family_loads_position_and_default_attribute(tmp_path: Path):
    root = make_export(tmp_path, {"gas": family_doc("gas", 1000)})
    gas = RecordingTarget(strict=True)
    loader = _loader(root, {FamilyKind.GAS: gas})

    assert loader.load_family(FamilyKind.GAS) is FamilyState.READY

    assert gas.ints[PARTICLE_COUNT] == 1000
    pos = gas.textures[POSITION_MAP]
    assert (pos.width, pos.height, pos.format) == (32, 32, PixelFormat.RGBA_FLOAT)
    assert len(pos.data) == 16384
    assert pos.texel(999) == (999.0, 499.5, -999.0, 0.0)
    assert pos.texel(1000) == (0.0, 0.0, 0.0, 0.0)

    color = gas.textures[COLOR_MAP]
    assert color.format is PixelFormat.R_FLOAT
    assert len(color.data) == 4096
    assert color.texel(3) == (0.75,)
    assert gas.floats == {MIN_VALUE: 3.0, MAX_VALUE: 7.5}
    assert gas.play_count == 1
    assert loader.active_attribute("gas").name == "Temperature"
    assert loader.status("gas").errors == []


def test_missing_attribute_file_leaves_color_unset(tmp_path: Path):
    root = make_export(
        tmp_path, {"gas": family_doc("gas", 50)}, skip_files=["gas_temp.bin"]
    )
    gas = RecordingTarget()
    loader = _loader(root, {"gas": gas})

    assert loader.load_family("gas") is FamilyState.READY

    assert POSITION_MAP in gas.textures
    assert COLOR_MAP not in gas.textures
    assert gas.floats == {}
    assert gas.is_playing
    assert _codes(loader, "gas") == [E_FILE_MISSING]
    assert loader.active_attribute("gas") is None


def test_missing_position_file_still_delivers_color(tmp_path: Path):
    root = make_export(
        tmp_path, {"star": family_doc("star", 9)}, skip_files=["star_pos.bin"]
    )
    star = RecordingTarget()
    loader = _loader(root, {"star": star})

    loader.load_family("star")

    assert POSITION_MAP not in star.textures
    assert COLOR_MAP in star.textures
    assert star.is_playing
    assert loader.state("star") is FamilyState.READY


def test_zero_count_family_is_never_touched(tmp_path: Path):
    # No data files exist at all for dm; nothing may try to read them.
    (tmp_path / "manifest.json").write_text(
        '{"dm": {"count": 0, "position_file": "dm_pos.bin",'
        ' "attributes": [{"name": "Mass", "file": "dm_m.bin",'
        ' "min": 0, "max": 1, "is_log": false, "units": ""}]}}',
        encoding="utf-8",
    )
    dm = RecordingTarget()
    loader = _loader(tmp_path, {"dm": dm})

    assert loader.load_family("dm") is FamilyState.INACTIVE
    assert not dm.touched
    assert loader.status("dm").errors == []


def test_family_without_target_is_skipped(tmp_path: Path):
    root = make_export(tmp_path, {"gas": family_doc("gas", 10)})
    loader = _loader(root, {"gas": None})
    assert loader.load_all()[FamilyKind.GAS] is FamilyState.INACTIVE


def test_load_all_mixed_families(tmp_path: Path):
    root = make_export(
        tmp_path,
        {
            "gas": family_doc("gas", 20),
            "star": family_doc("star", 0),
            "dm": family_doc("dm", 7, attributes=[]),
        },
    )
    targets = {k: RecordingTarget() for k in ("gas", "star", "dm")}
    loader = _loader(root, targets)

    states = loader.load_all()

    assert states == {
        FamilyKind.GAS: FamilyState.READY,
        FamilyKind.STAR: FamilyState.INACTIVE,
        FamilyKind.DARK_MATTER: FamilyState.READY,
    }
    assert not targets["star"].touched
    # dm has no attributes: positions only, playback still starts.
    assert set(targets["dm"].textures) == {POSITION_MAP}
    assert targets["dm"].is_playing


def test_particle_cap_only_limits_announced_count(tmp_path: Path):
    root = make_export(tmp_path, {"gas": family_doc("gas", 1000)})
    gas = RecordingTarget()
    loader = _loader(root, {"gas": gas}, particle_cap=100)

    loader.load_family("gas")

    assert gas.ints[PARTICLE_COUNT] == 100
    assert gas.textures[POSITION_MAP].particle_count == 1000
    assert len(gas.textures[POSITION_MAP].data) == 16384


def test_rejected_upload_leaves_map_unset(tmp_path: Path):
    root = make_export(tmp_path, {"gas": family_doc("gas", 4)})
    # An oversized position file passes through the encoder and a strict
    # target refuses it.
    write_floats(root / "gas_pos.bin", [1.0] * 40)
    gas = RecordingTarget(strict=True)
    loader = _loader(root, {"gas": gas})

    assert loader.load_family("gas") is FamilyState.READY

    assert POSITION_MAP not in gas.textures
    assert COLOR_MAP in gas.textures
    assert gas.is_playing
    assert _codes(loader, "gas") == [E_UPLOAD_REJECTED]


def test_inverted_range_attribute_rejected_before_read(tmp_path: Path):
    attrs = [_attr("Bad", "missing.bin", 5, 1)]
    root = make_export(
        tmp_path,
        {"gas": family_doc("gas", 4, attributes=attrs)},
        skip_files=["missing.bin"],
    )
    gas = RecordingTarget()
    loader = _loader(root, {"gas": gas})

    loader.load_family("gas")

    assert COLOR_MAP not in gas.textures
    assert _codes(loader, "gas") == [E_RANGE]


def test_inverted_range_allowed_when_not_strict(tmp_path: Path):
    attrs = [_attr("Flipped", "f.bin", 5, 1)]
    root = make_export(tmp_path, {"gas": family_doc("gas", 4, attributes=attrs)})
    gas = RecordingTarget()
    loader = _loader(root, {"gas": gas}, strict_ranges=False)

    loader.load_family("gas")

    assert gas.floats == {MIN_VALUE: 5.0, MAX_VALUE: 1.0}


def test_escaping_path_is_reported(tmp_path: Path):
    data_dir = tmp_path / "export"
    data_dir.mkdir()
    write_floats(tmp_path / "outside.bin", [0.0] * 16)
    manifest = parse_manifest_dict(
        {"gas": {"count": 4, "position_file": "../outside.bin"}}
    )
    gas = RecordingTarget()
    loader = FamilyLoader(manifest, LoaderOptions(data_dir=data_dir), {"gas": gas})

    loader.load_family("gas")

    assert POSITION_MAP not in gas.textures
    assert _codes(loader, "gas") == [E_PATH_ESCAPE]


def test_summary_reports_families(tmp_path: Path):
    root = make_export(tmp_path, {"gas": family_doc("gas", 1000)})
    loader = _loader(root, {"gas": RecordingTarget()})
    loader.load_all()

    summary = loader.summary()

    gas = summary["families"]["gas"]
    assert gas["state"] == "ready"
    assert gas["particles"] == 1000
    assert gas["position"] == {
        "width": 32,
        "height": 32,
        "format": "RGBAFloat",
        "bytes": 16384,
        "padding": 384,
    }
    assert gas["attribute"]["name"] == "Temperature"
    assert summary["families"]["star"]["state"] == "inactive"
    assert summary["counts"] == {
        "families_ready": 1,
        "particles_total": 1000,
        "errors": 0,
    }


def test_nul_byte_in_file_name_does_not_stop_other_families(tmp_path: Path):
    attrs = [_attr("Broken", "a\x00b.bin", 0, 1)]
    root = make_export(
        tmp_path,
        {
            "gas": family_doc("gas", 4, attributes=attrs),
            "star": family_doc("star", 4),
        },
        skip_files=["a\x00b.bin"],
    )
    gas, star = RecordingTarget(), RecordingTarget()
    loader = _loader(root, {"gas": gas, "star": star})

    states = loader.load_all()

    assert states[FamilyKind.GAS] is FamilyState.READY
    assert gas.is_playing
    assert POSITION_MAP in gas.textures
    assert COLOR_MAP not in gas.textures
    assert _codes(loader, "gas") == [E_FILE_MISSING]
    assert states[FamilyKind.STAR] is FamilyState.READY
    assert COLOR_MAP in star.textures


def test_huge_count_recorded_and_next_family_loaded(tmp_path: Path):
    write_floats(tmp_path / "gas_pos.bin", [0.0] * 16)
    write_floats(tmp_path / "star_pos.bin", position_values(4))
    manifest = parse_manifest_dict(
        {
            "gas": {"count": 2**44, "position_file": "gas_pos.bin"},
            "star": {"count": 4, "position_file": "star_pos.bin"},
        }
    )
    gas, star = RecordingTarget(), RecordingTarget()
    loader = FamilyLoader(
        manifest, LoaderOptions(data_dir=tmp_path), {"gas": gas, "star": star}
    )

    states = loader.load_all()

    assert states[FamilyKind.GAS] is FamilyState.READY
    assert POSITION_MAP not in gas.textures
    assert gas.is_playing
    assert _codes(loader, "gas") == [E_TEXTURE_LIMIT]
    assert states[FamilyKind.STAR] is FamilyState.READY
    assert star.textures[POSITION_MAP].width == 2


class _BrokenTarget(RecordingTarget):
    def play(self) -> None:
        raise RuntimeError("device lost")


def test_family_leaves_loading_state_when_target_fails(tmp_path: Path):
    root = make_export(tmp_path, {"gas": family_doc("gas", 4)})
    loader = _loader(root, {"gas": _BrokenTarget()})

    with pytest.raises(RuntimeError):
        loader.load_family("gas")

    assert loader.state("gas") is FamilyState.READY
