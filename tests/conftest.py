"""Shared fixtures: a recorded EasyEDA response and an offline component source."""

from __future__ import annotations

import json
import threading
from collections.abc import Iterable
from dataclasses import replace
from pathlib import Path
from typing import Any

import pytest

from kicad_e2k.easyeda.api import component_from_response
from kicad_e2k.exceptions import FetchError, ModelDownloadError
from kicad_e2k.schema.easyeda import ComponentData

FIXTURES = Path(__file__).parent / "fixtures"

SAMPLE_OBJ = b"""# two materials
newmtl body
Kd 0.1 0.1 0.1
Ks 0.5 0.5 0.5
d 1
newmtl pins
Kd 0.8 0.8 0.8
v 0 0 0
v 2.54 0 0
v 0 2.54 0
v 0 0 2.54
usemtl body
f 1 2 3
usemtl pins
f 1//1 3//3 4//4
"""

SAMPLE_STEP = b"ISO-10303-21;\nHEADER;\nENDSEC;\nDATA;\nENDSEC;\nEND-ISO-10303-21;\n"


def load_response() -> dict[str, Any]:
    return json.loads((FIXTURES / "easyeda_c2040.json").read_text(encoding="utf-8"))


class FakeSource:
    """Offline ComponentSource serving the recorded NE555 for every id.

    Each id gets its own title so batch keys stay distinct; ids listed in
    ``failing`` raise FetchError. ``obj`` or ``step`` set to None makes
    that download fail.
    """

    def __init__(
        self,
        failing: Iterable[str] = (),
        obj: bytes | None = SAMPLE_OBJ,
        step: bytes | None = SAMPLE_STEP,
        with_model: bool = True,
    ) -> None:
        self.failing = set(failing)
        self.obj = obj
        self.step = step
        self.calls: list[str] = []
        self._lock = threading.Lock()
        self._base = component_from_response("C2040", load_response()["result"])
        if not with_model:
            self._base = replace(self._base, model_3d=None)

    def get_component_data(self, lcsc_id: str) -> ComponentData:
        with self._lock:
            self.calls.append(lcsc_id)
        if lcsc_id in self.failing:
            raise FetchError(f"Component {lcsc_id} not found", lcsc_id=lcsc_id, status_code=404)
        if lcsc_id == "C2040":
            return self._base
        return replace(self._base, lcsc_id=lcsc_id, title=f"Part {lcsc_id}")

    def download_3d_obj(self, uuid: str) -> bytes:
        if self.obj is None:
            raise ModelDownloadError("OBJ model download failed: HTTP 404", uuid=uuid)
        return self.obj

    def download_3d_step(self, uuid: str) -> bytes:
        if self.step is None:
            raise ModelDownloadError("STEP model download failed: HTTP 404", uuid=uuid)
        return self.step


@pytest.fixture
def response() -> dict[str, Any]:
    return load_response()


@pytest.fixture
def component(response: dict[str, Any]) -> ComponentData:
    return component_from_response("C2040", response["result"])


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def sample_obj() -> bytes:
    return SAMPLE_OBJ


@pytest.fixture
def sample_step() -> bytes:
    return SAMPLE_STEP


@pytest.fixture
def make_source() -> type[FakeSource]:
    return FakeSource


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "E2K_OUTPUT",
        "E2K_OVERWRITE",
        "E2K_KICAD_VERSION",
        "E2K_PARALLEL",
        "E2K_API_TIMEOUT",
        "LOGGING_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
