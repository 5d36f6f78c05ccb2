"""Per-component conversion: fetch, parse, build, render, merge.

The stages are independent units; only the symbol-library merge touches
state shared with other components, and that goes through the library
manager's per-path lock.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .builders import build_3d_model_ref, build_footprint, build_symbol
from .config import ConversionOptions
from .easyeda.api import ComponentSource
from .easyeda.parser import parse_footprint, parse_symbol
from .exceptions import MergeError, ModelDownloadError, ModelTranscodeError
from .export import render_footprint, render_symbol
from .library import LibraryManager, MergeAction
from .logging_config import component_context, create_logger
from .models3d import export_step, obj_to_wrl
from .schema.easyeda import ComponentData
from .validation import record_key, sanitize_name

logger = create_logger(__name__)


@dataclass(frozen=True)
class Artifact:
    """One file the conversion produced, or left alone."""

    kind: str  # "symbol", "footprint", "model_wrl", "model_step"
    name: str
    path: Path
    action: MergeAction

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "name": self.name,
            "path": str(self.path),
            "action": self.action.value,
        }


@dataclass
class ComponentResult:
    """Outcome of converting one component."""

    lcsc_id: str
    title: str = ""
    key: str = ""
    artifacts: list[Artifact] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def status(self) -> str:
        """``partial`` when an optional stage (3D) failed, else ``ok``."""
        return "partial" if self.warnings else "ok"

    def to_dict(self) -> dict[str, Any]:
        return {
            "lcsc_id": self.lcsc_id,
            "title": self.title,
            "key": self.key,
            "status": self.status,
            "artifacts": [a.to_dict() for a in self.artifacts],
            "warnings": self.warnings,
        }


def _convert_symbol(
    data: ComponentData, key: str, options: ConversionOptions, library: LibraryManager
) -> Artifact:
    logger.info("Converting symbol...")
    ee_symbol = parse_symbol(list(data.symbol_shapes))
    symbol = build_symbol(data, ee_symbol, key)
    payload = render_symbol(symbol, options.version)
    action = library.add_symbol(key, payload, options.overwrite)
    return Artifact("symbol", key, library.symbol_lib_path, action)


def _convert_footprint(
    data: ComponentData, key: str, options: ConversionOptions, library: LibraryManager
) -> Artifact:
    logger.info("Converting footprint...")
    ee_footprint = parse_footprint(list(data.footprint_shapes))
    model_ref = None
    if options.model_3d and data.model_3d is not None:
        model_ref = build_3d_model_ref(data.model_3d, options.version, options.project_relative)
    footprint = build_footprint(data, ee_footprint, key, model_ref)
    text = render_footprint(footprint, options.version)
    path, action = library.write_footprint(key, text, options.overwrite)
    return Artifact("footprint", key, path, action)


def _convert_3d_model(
    data: ComponentData,
    options: ConversionOptions,
    source: ComponentSource,
    library: LibraryManager,
    result: ComponentResult,
) -> None:
    """Best effort: failures are recorded as warnings, never raised."""
    if data.model_3d is None:
        logger.warning("No 3D model metadata available for this component")
        return

    logger.info("Converting 3D model...")
    info = data.model_3d
    name = sanitize_name(info.title)

    try:
        wrl = obj_to_wrl(source.download_3d_obj(info.uuid))
        path, action = library.write_3d_model(name, wrl, ".wrl", options.overwrite)
        result.artifacts.append(Artifact("model_wrl", name, path, action))
    except (ModelDownloadError, ModelTranscodeError, MergeError) as e:
        logger.warning(f"WRL model unavailable: {e.message}")
        result.warnings.append(f"wrl: {e.message}")

    try:
        step = export_step(source.download_3d_step(info.uuid))
        path, action = library.write_3d_model(name, step, ".step", options.overwrite)
        result.artifacts.append(Artifact("model_step", name, path, action))
    except (ModelDownloadError, ModelTranscodeError, MergeError) as e:
        logger.warning(f"STEP model unavailable: {e.message}")
        result.warnings.append(f"step: {e.message}")


def convert_component(
    lcsc_id: str,
    options: ConversionOptions,
    source: ComponentSource,
    library: LibraryManager,
    batch: bool = False,
) -> ComponentResult:
    """Convert one component into the libraries managed by ``library``.

    Args:
        lcsc_id: Validated LCSC id.
        options: What to convert and how.
        source: Component data provider.
        library: Destination libraries.
        batch: Suffix record keys with the LCSC id.

    Raises:
        FetchError, ParseError, SerializeError, MergeError: The component
            failed; 3D model problems, file writes included, only downgrade
            it to partial.
    """
    with component_context(lcsc_id):
        data = source.get_component_data(lcsc_id)
        logger.info(f"Fetched component: {data.title}")

        key = record_key(data.title, lcsc_id, batch)
        result = ComponentResult(lcsc_id=lcsc_id, title=data.title, key=key)

        if options.symbol:
            result.artifacts.append(_convert_symbol(data, key, options, library))
        if options.footprint:
            result.artifacts.append(_convert_footprint(data, key, options, library))
        if options.model_3d:
            _convert_3d_model(data, options, source, library, result)

        logger.info(f"Finished {key} ({result.status})")
        return result
