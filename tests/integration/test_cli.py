"""Tests for the ``e2k`` command line."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from kicad_e2k.cli import build_parser, main, options_from_args, split_ids
from kicad_e2k.config import KicadVersion


@pytest.fixture
def no_logging_setup() -> Any:
    with patch("kicad_e2k.cli.setup_logging") as mock_setup:
        yield mock_setup


class TestSplitIds:
    def test_repeated_and_comma_separated(self) -> None:
        assert split_ids(["C1,C2", " C3 ", "C4,,"]) == ["C1", "C2", "C3", "C4"]


class TestOptionsFromArgs:
    def _options(self, *argv: str) -> Any:
        return options_from_args(build_parser().parse_args(["--lcsc-id", "C1", *argv]))

    def test_full(self) -> None:
        options = self._options("--full")
        assert options.symbol and options.footprint and options.model_3d
        assert options.version is KicadVersion.V6
        assert options.project_relative

    def test_flags(self, tmp_path: Path) -> None:
        options = self._options(
            "--symbol", "--v5", "--global-3d-path", "--overwrite", "-j", "3", "-o", str(tmp_path)
        )
        assert options.symbol and not options.footprint
        assert options.version is KicadVersion.V5
        assert not options.project_relative
        assert options.overwrite
        assert options.parallel == 3
        assert options.output == tmp_path

    def test_path_flags_exclusive(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(
                ["--lcsc-id", "C1", "--project-relative", "--global-3d-path"]
            )


@pytest.mark.usefixtures("no_logging_setup")
class TestMain:
    def test_full_conversion(
        self, tmp_path: Path, make_source: Any, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with patch("kicad_e2k.cli.EasyedaApi", return_value=make_source()):
            code = main(["--lcsc-id", "C2040", "--full", "-o", str(tmp_path)])
        assert code == 0
        out = capsys.readouterr().out
        assert "✓ Symbol added: NE555DR" in out
        assert "✓ Footprint added: NE555DR" in out
        assert "✓ 3D model (WRL) added:" in out
        assert "✓ Conversion complete!" in out
        assert (tmp_path / "e2k.kicad_sym").exists()

    def test_batch_with_failure(
        self, tmp_path: Path, make_source: Any, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with patch("kicad_e2k.cli.EasyedaApi", return_value=make_source(failing=["C2"])):
            code = main(
                ["--lcsc-id", "C1,C2,C3", "--symbol", "-j", "2", "-o", str(tmp_path)]
            )
        assert code == 1
        out = capsys.readouterr().out
        assert "✗ C2: Component C2 not found" in out
        assert "2 succeeded, 1 failed" in out
        assert "Conversion complete" not in out

    def test_sequential_failure_prints_error(
        self, tmp_path: Path, make_source: Any, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with patch("kicad_e2k.cli.EasyedaApi", return_value=make_source(failing=["C2040"])):
            code = main(["--lcsc-id", "C2040", "--symbol", "-o", str(tmp_path)])
        assert code == 1
        assert "Error: Component C2040 not found" in capsys.readouterr().err

    def test_nothing_selected(
        self, tmp_path: Path, make_source: Any, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with patch("kicad_e2k.cli.EasyedaApi", return_value=make_source()):
            code = main(["--lcsc-id", "C2040", "-o", str(tmp_path)])
        assert code == 1
        assert "Error:" in capsys.readouterr().err

    def test_invalid_id(
        self, tmp_path: Path, make_source: Any, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with patch("kicad_e2k.cli.EasyedaApi", return_value=make_source()):
            code = main(["--lcsc-id", "2040", "--full", "-o", str(tmp_path)])
        assert code == 1
        assert "Error:" in capsys.readouterr().err

    def test_missing_id_exits(self) -> None:
        with pytest.raises(SystemExit):
            main(["--full"])
