"""Conversion options shared by the CLI, the MCP tools and the batch runner."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any

from .exceptions import ConfigError


class KicadVersion(Enum):
    """Target library dialect, selected once per run."""

    V5 = "v5"
    V6 = "v6"

    @property
    def symbol_extension(self) -> str:
        return ".lib" if self is KicadVersion.V5 else ".kicad_sym"


_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def _env_flag(name: str, default: bool) -> bool:
    val = os.environ.get(name)
    if val is None:
        return default
    return val.strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class ConversionOptions:
    """What to convert and where to put it."""

    output: Path = Path(".")
    symbol: bool = False
    footprint: bool = False
    model_3d: bool = False
    overwrite: bool = False
    version: KicadVersion = KicadVersion.V6
    project_relative: bool = True  # ${KIPRJMOD} vs the global 3D model variable
    parallel: int = 1
    continue_on_error: bool = False

    @classmethod
    def full(cls, **kwargs: Any) -> ConversionOptions:
        """Options converting symbol, footprint and 3D model."""
        return cls(symbol=True, footprint=True, model_3d=True, **kwargs)

    @classmethod
    def from_env(cls, **overrides: Any) -> ConversionOptions:
        """Build options from ``E2K_*`` environment variables.

        Explicit keyword overrides win over the environment.
        """
        version_raw = os.environ.get("E2K_KICAD_VERSION", "v6").strip().lower()
        try:
            version = KicadVersion(version_raw)
        except ValueError as e:
            raise ConfigError(
                f"E2K_KICAD_VERSION must be 'v5' or 'v6', got {version_raw!r}",
                field="version",
            ) from e

        parallel_raw = os.environ.get("E2K_PARALLEL", "1")
        try:
            parallel = int(parallel_raw)
        except ValueError as e:
            raise ConfigError(
                f"E2K_PARALLEL must be an integer, got {parallel_raw!r}", field="parallel"
            ) from e

        base = cls(
            output=Path(os.environ.get("E2K_OUTPUT", ".")),
            overwrite=_env_flag("E2K_OVERWRITE", False),
            version=version,
            parallel=parallel,
        )
        return replace(base, **overrides)

    def validate(self) -> None:
        """Raise ConfigError if the options cannot drive a conversion."""
        if not (self.symbol or self.footprint or self.model_3d):
            raise ConfigError(
                "At least one conversion option must be specified "
                "(--symbol, --footprint, --3d, or --full)"
            )
        if self.parallel < 1:
            raise ConfigError(
                f"Parallelism must be at least 1, got {self.parallel}", field="parallel"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "output": str(self.output),
            "symbol": self.symbol,
            "footprint": self.footprint,
            "model_3d": self.model_3d,
            "overwrite": self.overwrite,
            "version": self.version.value,
            "project_relative": self.project_relative,
            "parallel": self.parallel,
            "continue_on_error": self.continue_on_error,
        }


def api_timeout() -> float:
    """HTTP timeout in seconds for the component data source."""
    raw = os.environ.get("E2K_API_TIMEOUT", "30")
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(
            f"E2K_API_TIMEOUT must be a number, got {raw!r}", field="timeout"
        ) from e
