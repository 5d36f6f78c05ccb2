"""Conversion tools: single component, batch, and library listing."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ..batch import run_batch
from ..config import ConversionOptions, KicadVersion
from ..easyeda.api import EasyedaApi
from ..exceptions import ConfigError, E2kError
from ..library import LibraryManager
from ..logging_config import create_logger
from .registry import register_tool

logger = create_logger(__name__)


def _options(
    output: str | None,
    symbol: bool,
    footprint: bool,
    model_3d: bool,
    overwrite: bool | None,
    kicad_version: str | None,
    project_relative: bool,
    **extra: Any,
) -> ConversionOptions:
    overrides: dict[str, Any] = {
        "symbol": symbol,
        "footprint": footprint,
        "model_3d": model_3d,
        "project_relative": project_relative,
        **extra,
    }
    if output:
        overrides["output"] = Path(output)
    if overwrite is not None:
        overrides["overwrite"] = overwrite
    if kicad_version:
        try:
            overrides["version"] = KicadVersion(kicad_version.lower())
        except ValueError as e:
            raise ConfigError(
                f"kicad_version must be 'v5' or 'v6', got {kicad_version!r}", field="version"
            ) from e
    return ConversionOptions.from_env(**overrides)


def _convert_component_handler(
    lcsc_id: str,
    output: str | None = None,
    symbol: bool = True,
    footprint: bool = True,
    model_3d: bool = True,
    overwrite: bool | None = None,
    kicad_version: str | None = None,
    project_relative: bool = True,
) -> dict[str, Any]:
    """Convert one LCSC component into the e2k KiCad libraries.

    Args:
        lcsc_id: LCSC part number (e.g., "C2040").
        output: Output directory. Default: E2K_OUTPUT or the working directory.
        symbol: Convert the schematic symbol. Default: true.
        footprint: Convert the footprint. Default: true.
        model_3d: Download and convert the 3D model. Default: true.
        overwrite: Replace existing records. Default: E2K_OVERWRITE or false.
        kicad_version: "v6" (default) or "v5".
        project_relative: Reference 3D models through ${KIPRJMOD}. Default: true.
    """
    try:
        options = _options(
            output, symbol, footprint, model_3d, overwrite, kicad_version, project_relative,
            parallel=1,
        )
        report = run_batch([lcsc_id], options, EasyedaApi())
    except E2kError as e:
        logger.error(f"convert_component failed: {e.message}")
        return e.to_dict()

    result = next(iter(report.results.values()))
    return {"success": True, "output": str(options.output), **result.to_dict()}


def _convert_batch_handler(
    lcsc_ids: list[str],
    output: str | None = None,
    symbol: bool = True,
    footprint: bool = True,
    model_3d: bool = True,
    overwrite: bool | None = None,
    kicad_version: str | None = None,
    project_relative: bool = True,
    parallel: int = 4,
) -> dict[str, Any]:
    """Convert several LCSC components in parallel; failures do not stop the batch.

    Args:
        lcsc_ids: LCSC part numbers (e.g., ["C2040", "C1525"]).
        output: Output directory. Default: E2K_OUTPUT or the working directory.
        symbol: Convert schematic symbols. Default: true.
        footprint: Convert footprints. Default: true.
        model_3d: Download and convert 3D models. Default: true.
        overwrite: Replace existing records. Default: E2K_OVERWRITE or false.
        kicad_version: "v6" (default) or "v5".
        project_relative: Reference 3D models through ${KIPRJMOD}. Default: true.
        parallel: Number of worker threads. Default: 4.
    """
    try:
        options = _options(
            output, symbol, footprint, model_3d, overwrite, kicad_version, project_relative,
            parallel=parallel,
            continue_on_error=True,
        )
        report = run_batch(lcsc_ids, options, EasyedaApi())
    except E2kError as e:
        logger.error(f"convert_batch failed: {e.message}")
        return e.to_dict()

    return {"success": report.ok, "output": str(options.output), **report.to_dict()}


def _list_library_symbols_handler(
    output: str | None = None,
    kicad_version: str | None = None,
) -> dict[str, Any]:
    """List the symbols and footprints already in the e2k libraries.

    Args:
        output: Output directory holding the libraries. Default: E2K_OUTPUT or
            the working directory.
        kicad_version: "v6" (default) or "v5".
    """
    try:
        options = _options(output, True, True, False, None, kicad_version, True)
        library = LibraryManager(options.output, options.version)
        records = library.list_records()
        footprints = library.list_footprints()
    except E2kError as e:
        return e.to_dict()

    return {
        "library": str(library.symbol_lib_path),
        "count": len(records),
        "symbols": [r.to_dict() for r in records],
        "footprints": footprints,
    }


# ── Registration ────────────────────────────────────────────────────

_COMMON_PARAMETERS: dict[str, Any] = {
    "output": {
        "type": "string",
        "description": "Output directory. Default: E2K_OUTPUT or the working directory.",
    },
    "symbol": {"type": "boolean", "description": "Convert the schematic symbol. Default: true."},
    "footprint": {"type": "boolean", "description": "Convert the footprint. Default: true."},
    "model_3d": {"type": "boolean", "description": "Convert the 3D model. Default: true."},
    "overwrite": {"type": "boolean", "description": "Replace existing records."},
    "kicad_version": {"type": "string", "description": "'v6' (default) or 'v5'."},
    "project_relative": {
        "type": "boolean",
        "description": "Reference 3D models through ${KIPRJMOD}. Default: true.",
    },
}

register_tool(
    name="convert_component",
    description="Convert an LCSC/EasyEDA component into KiCad symbol, footprint and 3D model.",
    parameters={
        "lcsc_id": {"type": "string", "description": "LCSC part number (e.g., 'C2040')."},
        **_COMMON_PARAMETERS,
    },
    handler=_convert_component_handler,
)

register_tool(
    name="convert_batch",
    description="Convert several LCSC components in parallel into the same KiCad libraries.",
    parameters={
        "lcsc_ids": {
            "type": "array",
            "items": {"type": "string"},
            "description": "LCSC part numbers (e.g., ['C2040', 'C1525']).",
        },
        **_COMMON_PARAMETERS,
        "parallel": {"type": "integer", "description": "Worker threads. Default: 4."},
    },
    handler=_convert_batch_handler,
)

register_tool(
    name="list_library_symbols",
    description="List the symbols and footprints already converted into the e2k libraries.",
    parameters={
        "output": _COMMON_PARAMETERS["output"],
        "kicad_version": _COMMON_PARAMETERS["kicad_version"],
    },
    handler=_list_library_symbols_handler,
    category="library",
)
