"""End-to-end conversion of the recorded NE555 into real library files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from kicad_e2k.config import ConversionOptions, KicadVersion
from kicad_e2k.exceptions import MergeError
from kicad_e2k.library import LibraryManager, MergeAction
from kicad_e2k.pipeline import convert_component
from kicad_e2k.sexp import parse

MODEL_NAME = "SOIC-8_L4_9-W3_9-P1_27"


def _convert(
    tmp_path: Path, source: Any, version: KicadVersion = KicadVersion.V6, **kwargs: Any
) -> Any:
    options = ConversionOptions.full(output=tmp_path, version=version, **kwargs)
    return convert_component("C2040", options, source, LibraryManager(tmp_path, version))


class TestFullConversion:
    def test_writes_every_artifact(self, tmp_path: Path, source: Any) -> None:
        result = _convert(tmp_path, source)
        assert result.status == "ok"
        assert [a.kind for a in result.artifacts] == [
            "symbol",
            "footprint",
            "model_wrl",
            "model_step",
        ]
        assert all(a.action is MergeAction.ADDED for a in result.artifacts)
        assert all(a.path.exists() for a in result.artifacts)

    def test_symbol_library_parses(self, tmp_path: Path, source: Any) -> None:
        _convert(tmp_path, source)
        tree = parse((tmp_path / "e2k.kicad_sym").read_text(encoding="utf-8"))
        assert tree.name == "kicad_symbol_lib"
        symbols = tree.find_all("symbol")
        assert [s.first_value for s in symbols] == ["NE555DR"]

    def test_footprint_references_model(self, tmp_path: Path, source: Any) -> None:
        _convert(tmp_path, source)
        text = (tmp_path / "e2k.pretty" / "NE555DR.kicad_mod").read_text(encoding="utf-8")
        assert text.startswith("(footprint")
        assert f"${{KIPRJMOD}}/e2k.3dshapes/{MODEL_NAME}.wrl" in text

    def test_model_files(self, tmp_path: Path, source: Any) -> None:
        _convert(tmp_path, source)
        wrl = (tmp_path / "e2k.3dshapes" / f"{MODEL_NAME}.wrl").read_text(encoding="utf-8")
        assert wrl.startswith("#VRML")
        step = (tmp_path / "e2k.3dshapes" / f"{MODEL_NAME}.step").read_bytes()
        assert step.startswith(b"ISO-10303-21;")

    def test_global_model_path(self, tmp_path: Path, source: Any) -> None:
        _convert(tmp_path, source, project_relative=False)
        text = (tmp_path / "e2k.pretty" / "NE555DR.kicad_mod").read_text(encoding="utf-8")
        assert f"${{KICAD6_3DMODEL_DIR}}/e2k.3dshapes/{MODEL_NAME}.wrl" in text


class TestRerun:
    def test_rerun_skips_without_touching_files(self, tmp_path: Path, source: Any) -> None:
        first = _convert(tmp_path, source)
        before = {a.path: a.path.read_bytes() for a in first.artifacts}

        second = _convert(tmp_path, source)
        assert all(a.action is MergeAction.SKIPPED for a in second.artifacts)
        assert {p: p.read_bytes() for p in before} == before

    def test_overwrite_is_idempotent(self, tmp_path: Path, source: Any) -> None:
        first = _convert(tmp_path, source)
        before = {a.path: a.path.read_bytes() for a in first.artifacts}

        second = _convert(tmp_path, source, overwrite=True)
        assert all(a.action is MergeAction.UPDATED for a in second.artifacts)
        assert {p: p.read_bytes() for p in before} == before

    def test_symbol_library_keeps_one_entry(self, tmp_path: Path, source: Any) -> None:
        _convert(tmp_path, source)
        _convert(tmp_path, source, overwrite=True)
        records = LibraryManager(tmp_path).list_records()
        assert [r.name for r in records] == ["NE555DR"]


class TestLegacyOutput:
    def test_v5_formats(self, tmp_path: Path, source: Any) -> None:
        result = _convert(tmp_path, source, version=KicadVersion.V5)
        assert result.status == "ok"
        lib = (tmp_path / "e2k.lib").read_text(encoding="utf-8")
        assert lib.startswith("EESchema-Schematic-Library Version 2.4")
        assert "DEF NE555DR" in lib
        footprint = (tmp_path / "e2k.pretty" / "NE555DR.kicad_mod").read_text(encoding="utf-8")
        assert footprint.startswith("(module")
        assert f"${{KIPRJMOD}}/e2k.3dshapes/{MODEL_NAME}.wrl" in footprint

    def test_v5_global_model_path(self, tmp_path: Path, source: Any) -> None:
        _convert(tmp_path, source, version=KicadVersion.V5, project_relative=False)
        footprint = (tmp_path / "e2k.pretty" / "NE555DR.kicad_mod").read_text(encoding="utf-8")
        assert "${KISYS3DMOD}/e2k.3dshapes/" in footprint


class TestPartialSelections:
    def test_footprint_only_embeds_no_model(self, tmp_path: Path, source: Any) -> None:
        options = ConversionOptions(output=tmp_path, footprint=True)
        result = convert_component("C2040", options, source, LibraryManager(tmp_path))
        assert [a.kind for a in result.artifacts] == ["footprint"]
        text = (tmp_path / "e2k.pretty" / "NE555DR.kicad_mod").read_text(encoding="utf-8")
        assert "(model" not in text
        assert not (tmp_path / "e2k.kicad_sym").exists()

    def test_component_without_model(self, tmp_path: Path, make_source: Any) -> None:
        result = _convert(tmp_path, make_source(with_model=False))
        assert result.status == "ok"
        assert result.warnings == []
        assert [a.kind for a in result.artifacts] == ["symbol", "footprint"]

    def test_wrl_failure_is_partial(self, tmp_path: Path, make_source: Any) -> None:
        result = _convert(tmp_path, make_source(obj=None))
        assert result.status == "partial"
        assert len(result.warnings) == 1
        assert result.warnings[0].startswith("wrl:")
        assert "model_step" in [a.kind for a in result.artifacts]

    def test_step_failure_is_partial(self, tmp_path: Path, make_source: Any) -> None:
        result = _convert(tmp_path, make_source(step=None))
        assert result.status == "partial"
        assert result.warnings[0].startswith("step:")
        assert "model_wrl" in [a.kind for a in result.artifacts]

    def test_model_write_failure_is_partial(self, tmp_path: Path, source: Any) -> None:
        library = LibraryManager(tmp_path)
        options = ConversionOptions.full(output=tmp_path)
        with patch.object(
            library, "write_3d_model", side_effect=MergeError("disk full", path=str(tmp_path))
        ):
            result = convert_component("C2040", options, source, library)
        assert result.status == "partial"
        assert result.warnings == ["wrl: disk full", "step: disk full"]
        assert [a.kind for a in result.artifacts] == ["symbol", "footprint"]
        assert (tmp_path / "e2k.kicad_sym").exists()
        assert (tmp_path / "e2k.pretty" / "NE555DR.kicad_mod").exists()


class TestLogging:
    def test_records_tagged_with_component(
        self, tmp_path: Path, source: Any, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="kicad_e2k"):
            _convert(tmp_path, source)
        records = [r for r in caplog.records if r.name.startswith("kicad_e2k.pipeline")]
        assert records
        assert all(r.component == "C2040" for r in records)
