"""Tests for the library merge manager."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from kicad_e2k.config import KicadVersion
from kicad_e2k.exceptions import MergeError
from kicad_e2k.export import render_symbol
from kicad_e2k.library import (
    LibraryManager,
    MergeAction,
    lock_for,
    merge_legacy_library,
    merge_sexp_library,
)
from kicad_e2k.schema.kicad import KiPin, KiRectangle, KiSymbol, PinStyle, PinType
from kicad_e2k.sexp import parse


def _symbol(name: str, value: str | None = None) -> KiSymbol:
    return KiSymbol(
        name=name,
        reference="R",
        value=value or name,
        footprint=f"e2k:{name}",
        lcsc_id="C25804",
        pins=(KiPin("1", "A", PinType.PASSIVE, PinStyle.LINE, -5.08, 0.0, 0.0, 2.54),),
        rectangles=(KiRectangle(-2.54, 1.27, 2.54, -1.27, 0.254, True),),
    )


def _payload(name: str, version: KicadVersion = KicadVersion.V6, value: str | None = None) -> str:
    return render_symbol(_symbol(name, value), version)


# ── S-expression merge ──────────────────────────────────────────────


class TestMergeSexpLibrary:
    def test_add_to_missing_library(self) -> None:
        text, action = merge_sexp_library(None, "R1", _payload("R1"), False)
        assert action is MergeAction.ADDED
        assert text is not None
        tree = parse(text)
        assert tree.name == "kicad_symbol_lib"
        assert tree["version"].first_value == "20211014"
        assert [s.first_value for s in tree.find_all("symbol")] == ["R1"]

    def test_existing_key_skipped(self) -> None:
        text, _ = merge_sexp_library(None, "R1", _payload("R1"), False)
        new_text, action = merge_sexp_library(text, "R1", _payload("R1", value="changed"), False)
        assert action is MergeAction.SKIPPED
        assert new_text is None

    def test_overwrite_replaces_in_place(self) -> None:
        text, _ = merge_sexp_library(None, "R1", _payload("R1"), False)
        text, _ = merge_sexp_library(text, "R2", _payload("R2"), False)
        new_text, action = merge_sexp_library(text, "R1", _payload("R1", value="changed"), True)
        assert action is MergeAction.UPDATED
        assert new_text is not None
        symbols = parse(new_text).find_all("symbol")
        assert [s.first_value for s in symbols] == ["R1", "R2"]
        assert '"changed"' in new_text

    def test_overwrite_with_same_payload_is_idempotent(self) -> None:
        text, _ = merge_sexp_library(None, "R1", _payload("R1"), False)
        again, action = merge_sexp_library(text, "R1", _payload("R1"), True)
        assert action is MergeAction.UPDATED
        assert again == text

    def test_foreign_root_rejected(self) -> None:
        with pytest.raises(ValueError, match="not a symbol library"):
            merge_sexp_library("(footprint x)", "R1", _payload("R1"), False)

    def test_payload_key_mismatch_rejected(self) -> None:
        with pytest.raises(ValueError, match="payload"):
            merge_sexp_library(None, "R9", _payload("R1"), False)


# ── Legacy merge ────────────────────────────────────────────────────


class TestMergeLegacyLibrary:
    def test_add_to_missing_library(self) -> None:
        text, action = merge_legacy_library(None, "R1", _payload("R1", KicadVersion.V5), False)
        assert action is MergeAction.ADDED
        assert text is not None
        assert text.startswith("EESchema-Schematic-Library Version 2.4\n")
        assert text.endswith("#\n#End Library\n")
        assert "DEF R1 R 0 40 Y Y 1 F N" in text

    def test_records_inserted_before_footer(self) -> None:
        text, _ = merge_legacy_library(None, "R1", _payload("R1", KicadVersion.V5), False)
        text, _ = merge_legacy_library(text, "R2", _payload("R2", KicadVersion.V5), False)
        assert text is not None
        assert text.index("DEF R1") < text.index("DEF R2") < text.index("#End Library")

    def test_existing_key_skipped(self) -> None:
        text, _ = merge_legacy_library(None, "R1", _payload("R1", KicadVersion.V5), False)
        assert merge_legacy_library(text, "R1", "ignored", False) == (None, MergeAction.SKIPPED)

    def test_overwrite_replaces_record_and_banner(self) -> None:
        text, _ = merge_legacy_library(None, "R1", _payload("R1", KicadVersion.V5), False)
        text, _ = merge_legacy_library(text, "R2", _payload("R2", KicadVersion.V5), False)
        new_payload = _payload("R1", KicadVersion.V5, value="changed")
        new_text, action = merge_legacy_library(text, "R1", new_payload, True)
        assert action is MergeAction.UPDATED
        assert new_text is not None
        assert new_text.count("DEF R1 ") == 1
        assert new_text.count("# R1\n") == 1
        assert '"changed"' in new_text
        assert new_text.index("DEF R1") < new_text.index("DEF R2")

    def test_similar_prefix_not_matched(self) -> None:
        text, _ = merge_legacy_library(None, "R10", _payload("R10", KicadVersion.V5), False)
        _, action = merge_legacy_library(text, "R1", _payload("R1", KicadVersion.V5), False)
        assert action is MergeAction.ADDED

    def test_unterminated_record_rejected(self) -> None:
        broken = "EESchema-Schematic-Library Version 2.4\nDEF R1 R 0 40 Y Y 1 F N\nDRAW\n"
        with pytest.raises(ValueError, match="ENDDEF"):
            merge_legacy_library(broken, "R1", "x", True)


# ── Manager ─────────────────────────────────────────────────────────


class TestLibraryManager:
    def test_layout(self, tmp_path: Path) -> None:
        lib = LibraryManager(tmp_path)
        assert lib.symbol_lib_path == tmp_path / "e2k.kicad_sym"
        assert lib.footprint_path("X") == tmp_path / "e2k.pretty" / "X.kicad_mod"
        assert lib.model_path("X", ".wrl") == tmp_path / "e2k.3dshapes" / "X.wrl"
        assert LibraryManager(tmp_path, KicadVersion.V5).symbol_lib_path == tmp_path / "e2k.lib"

    def test_create_directories(self, tmp_path: Path) -> None:
        lib = LibraryManager(tmp_path / "out")
        lib.create_directories()
        assert lib.footprint_dir.is_dir()
        assert lib.model_dir.is_dir()

    def test_add_skip_update(self, tmp_path: Path) -> None:
        lib = LibraryManager(tmp_path)
        assert lib.add_symbol("R1", _payload("R1"), False) is MergeAction.ADDED
        first = lib.symbol_lib_path.read_bytes()

        assert lib.add_symbol("R1", _payload("R1", value="new"), False) is MergeAction.SKIPPED
        assert lib.symbol_lib_path.read_bytes() == first

        assert lib.add_symbol("R1", _payload("R1"), True) is MergeAction.UPDATED
        assert lib.symbol_lib_path.read_bytes() == first

    def test_corrupt_library_raises(self, tmp_path: Path) -> None:
        lib = LibraryManager(tmp_path)
        lib.symbol_lib_path.write_text("(kicad_symbol_lib (version", encoding="utf-8")
        with pytest.raises(MergeError) as exc_info:
            lib.add_symbol("R1", _payload("R1"), False)
        assert exc_info.value.path == str(lib.symbol_lib_path)

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        lib = LibraryManager(tmp_path)
        lib.add_symbol("R1", _payload("R1"), False)
        assert [p.name for p in tmp_path.iterdir()] == ["e2k.kicad_sym"]

    def test_list_records_v6(self, tmp_path: Path) -> None:
        lib = LibraryManager(tmp_path)
        lib.add_symbol("R1", _payload("R1"), False)
        lib.add_symbol("R2", _payload("R2"), False)
        records = lib.list_records()
        assert [r.name for r in records] == ["R1", "R2"]
        assert records[0].full_id == "e2k:R1"
        assert records[0].reference == "R"
        assert records[0].footprint == "e2k:R1"
        assert records[0].lcsc_id == "C25804"
        assert records[0].pin_count == 1

    def test_list_records_v5(self, tmp_path: Path) -> None:
        lib = LibraryManager(tmp_path, KicadVersion.V5)
        lib.add_symbol("R1", _payload("R1", KicadVersion.V5), False)
        (record,) = lib.list_records()
        assert record.name == "R1"
        assert record.value == "R1"
        assert record.footprint == "e2k:R1"
        assert record.lcsc_id == "C25804"
        assert record.pin_count == 1

    def test_list_records_missing_library(self, tmp_path: Path) -> None:
        assert LibraryManager(tmp_path).list_records() == []

    def test_footprint_files(self, tmp_path: Path) -> None:
        lib = LibraryManager(tmp_path)
        path, action = lib.write_footprint("B", "(footprint B)\n", False)
        assert action is MergeAction.ADDED
        assert path.read_text(encoding="utf-8") == "(footprint B)\n"

        _, action = lib.write_footprint("B", "(footprint other)\n", False)
        assert action is MergeAction.SKIPPED
        assert path.read_text(encoding="utf-8") == "(footprint B)\n"

        _, action = lib.write_footprint("B", "(footprint other)\n", True)
        assert action is MergeAction.UPDATED
        lib.write_footprint("A", "(footprint A)\n", False)
        assert lib.list_footprints() == ["A", "B"]

    def test_3d_model_file(self, tmp_path: Path) -> None:
        path, action = LibraryManager(tmp_path).write_3d_model("M", b"data", ".step", False)
        assert action is MergeAction.ADDED
        assert path == tmp_path / "e2k.3dshapes" / "M.step"
        assert path.read_bytes() == b"data"


class TestConcurrency:
    def test_lock_per_resolved_path(self, tmp_path: Path) -> None:
        lock = lock_for(tmp_path / "a.kicad_sym")
        assert lock_for(tmp_path / "x" / ".." / "a.kicad_sym") is lock
        assert lock_for(tmp_path / "b.kicad_sym") is not lock

    def test_lock_follows_symlinked_directory(self, tmp_path: Path) -> None:
        real = tmp_path / "real"
        real.mkdir()
        link = tmp_path / "link"
        link.symlink_to(real, target_is_directory=True)
        assert lock_for(link / "e2k.kicad_sym") is lock_for(real / "e2k.kicad_sym")
        assert LibraryManager(link).symbol_lib_path.resolve() == (real / "e2k.kicad_sym")

    def test_parallel_adds_all_land(self, tmp_path: Path) -> None:
        lib = LibraryManager(tmp_path)
        keys = [f"R{i}" for i in range(16)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            actions = list(pool.map(lambda k: lib.add_symbol(k, _payload(k), False), keys))
        assert actions == [MergeAction.ADDED] * len(keys)
        assert sorted(r.name for r in lib.list_records()) == sorted(keys)
