"""EasyEDA component API client.

Fetches the symbol and footprint shape lists of an LCSC part, and the raw
3D model files referenced by its footprint.
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from ..config import api_timeout
from ..constants import EE_UNIT_MM
from ..exceptions import FetchError, ModelDownloadError
from ..logging_config import create_logger
from ..schema.common import BBoxOrigin
from ..schema.easyeda import ComponentData
from .parser import find_3d_model

logger = create_logger(__name__)

EASYEDA_API_BASE = "https://easyeda.com/api/products"
EASYEDA_API_VERSION = "6.4.19.5"
MODEL_OBJ_BASE = "https://modules.easyeda.com/3dmodel"
MODEL_STEP_BASE = "https://modules.easyeda.com/qAxj6KHrDKw4blvCG8QJPs7Y"
USER_AGENT = "kicad-e2k"


class ComponentSource(Protocol):
    """Anything able to supply component data and 3D model bytes."""

    def get_component_data(self, lcsc_id: str) -> ComponentData: ...

    def download_3d_obj(self, uuid: str) -> bytes: ...

    def download_3d_step(self, uuid: str) -> bytes: ...


# ── Response mapping ────────────────────────────────────────────────


def _origin(head: dict[str, Any]) -> BBoxOrigin:
    return BBoxOrigin(
        x=float(head.get("x") or 0) * EE_UNIT_MM,
        y=float(head.get("y") or 0) * EE_UNIT_MM,
    )


def component_from_response(lcsc_id: str, result: dict[str, Any]) -> ComponentData:
    """Map the ``result`` object of a component response onto ComponentData.

    Raises:
        KeyError, TypeError, ValueError, AttributeError: If mandatory fields
            are missing or have the wrong shape.
    """
    symbol_data = result["dataStr"]
    package_data = result["packageDetail"]["dataStr"]
    head = symbol_data.get("head") or {}
    c_para = head.get("c_para", {}) or {}
    lcsc_info = result.get("lcsc") or {}

    footprint_shapes = tuple(package_data.get("shape") or ())
    return ComponentData(
        lcsc_id=lcsc_id,
        title=result.get("title") or c_para.get("name") or lcsc_id,
        symbol_shapes=tuple(symbol_data.get("shape") or ()),
        footprint_shapes=footprint_shapes,
        bbox=_origin(head),
        package_bbox=_origin(package_data.get("head") or {}),
        prefix=(c_para.get("pre") or "U").rstrip("?") or "U",
        manufacturer=c_para.get("Manufacturer", ""),
        datasheet=lcsc_info.get("url") or c_para.get("link", ""),
        jlc_id=c_para.get("Supplier Part", ""),
        model_3d=find_3d_model(list(footprint_shapes)),
    )


# ── Client ──────────────────────────────────────────────────────────


class EasyedaApi:
    """:class:`ComponentSource` backed by the public EasyEDA endpoints.

    Args:
        timeout: HTTP timeout in seconds; defaults to ``E2K_API_TIMEOUT``.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout if timeout is not None else api_timeout()
        self._headers = {"User-Agent": USER_AGENT, "Accept-Encoding": "gzip, deflate"}

    def _get(self, url: str, params: dict[str, str] | None = None) -> httpx.Response:
        resp = httpx.get(url, params=params, headers=self._headers, timeout=self.timeout)
        resp.raise_for_status()
        return resp

    def get_component_data(self, lcsc_id: str) -> ComponentData:
        """Fetch and map one component.

        Raises:
            FetchError: On transport errors, HTTP errors, unknown parts or
                responses that lack the symbol or footprint data.
        """
        url = f"{EASYEDA_API_BASE}/{lcsc_id}/components"
        logger.info(f"Fetching component data for {lcsc_id}")
        try:
            resp = self._get(url, params={"version": EASYEDA_API_VERSION})
        except httpx.TimeoutException as e:
            raise FetchError(
                f"EasyEDA request timed out after {self.timeout}s", lcsc_id=lcsc_id
            ) from e
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"EasyEDA API error: HTTP {e.response.status_code}",
                lcsc_id=lcsc_id,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(f"EasyEDA API request failed: {e}", lcsc_id=lcsc_id) from e

        try:
            data = resp.json()
        except ValueError as e:
            raise FetchError("EasyEDA API returned invalid JSON", lcsc_id=lcsc_id) from e

        result = data.get("result") if isinstance(data, dict) else None
        if not result or data.get("success") is False:
            raise FetchError(f"Component {lcsc_id} not found", lcsc_id=lcsc_id, status_code=404)

        try:
            return component_from_response(lcsc_id, result)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise FetchError(
                f"Incomplete component data for {lcsc_id}: {e}", lcsc_id=lcsc_id
            ) from e

    def _download(self, url: str, uuid: str, kind: str) -> bytes:
        logger.info(f"Downloading {kind} model {uuid}")
        try:
            resp = self._get(url)
        except httpx.HTTPStatusError as e:
            raise ModelDownloadError(
                f"{kind} model download failed: HTTP {e.response.status_code}", uuid=uuid
            ) from e
        except httpx.HTTPError as e:
            raise ModelDownloadError(f"{kind} model download failed: {e}", uuid=uuid) from e
        if not resp.content:
            raise ModelDownloadError(f"{kind} model {uuid} is empty", uuid=uuid)
        return resp.content

    def download_3d_obj(self, uuid: str) -> bytes:
        return self._download(f"{MODEL_OBJ_BASE}/{uuid}", uuid, "OBJ")

    def download_3d_step(self, uuid: str) -> bytes:
        return self._download(f"{MODEL_STEP_BASE}/{uuid}", uuid, "STEP")
