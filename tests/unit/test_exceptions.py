"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from kicad_e2k.exceptions import (
    ConfigError,
    ConversionError,
    E2kError,
    FetchError,
    MergeError,
    ModelDownloadError,
    ModelTranscodeError,
    ParseError,
    SerializeError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [
            ConfigError,
            ConversionError,
            FetchError,
            MergeError,
            ModelDownloadError,
            ModelTranscodeError,
            ParseError,
            SerializeError,
        ],
    )
    def test_all_derive_from_base(self, cls: type[E2kError]) -> None:
        assert issubclass(cls, E2kError)

    def test_message(self) -> None:
        err = FetchError("boom", lcsc_id="C1")
        assert str(err) == "boom"
        assert err.message == "boom"


class TestToDict:
    def test_fetch_error(self) -> None:
        d = FetchError("Component C1 not found", lcsc_id="C1", status_code=404).to_dict()
        assert d == {
            "error": True,
            "error_type": "FetchError",
            "error_code": "FETCH_ERROR",
            "message": "Component C1 not found",
            "lcsc_id": "C1",
            "status_code": 404,
        }

    def test_error_code_defaults(self) -> None:
        assert SerializeError("bad").to_dict()["error_code"] == "SERIALIZE_ERROR"
        assert E2kError("bad").error_code == "E2kError"

    def test_extra_context(self) -> None:
        d = MergeError("cannot write", path="/tmp/x", attempt=2).to_dict()
        assert d["path"] == "/tmp/x"
        assert d["attempt"] == 2
