"""Command line front end: ``e2k --lcsc-id C2040 --full``."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from . import __version__
from .batch import BatchReport, run_batch
from .config import ConversionOptions, KicadVersion
from .easyeda.api import EasyedaApi
from .exceptions import E2kError
from .logging_config import create_logger, setup_logging
from .pipeline import ComponentResult

logger = create_logger(__name__)

_ARTIFACT_LABELS = {
    "symbol": "Symbol",
    "footprint": "Footprint",
    "model_wrl": "3D model (WRL)",
    "model_step": "3D model (STEP)",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="e2k",
        description="Convert EasyEDA/LCSC components to KiCad library formats",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--lcsc-id",
        action="append",
        required=True,
        metavar="ID",
        help="LCSC component id (e.g. C2040); repeat or comma-separate for a batch",
    )
    parser.add_argument("--symbol", action="store_true", help="Convert the symbol")
    parser.add_argument("--footprint", action="store_true", help="Convert the footprint")
    parser.add_argument("--3d", dest="model_3d", action="store_true", help="Convert the 3D model")
    parser.add_argument(
        "--full", action="store_true", help="Convert symbol, footprint and 3D model"
    )
    parser.add_argument("-o", "--output", type=Path, help="Output directory (default: .)")
    parser.add_argument("--overwrite", action="store_true", help="Replace existing records")
    parser.add_argument("--v5", action="store_true", help="Write KiCad v5 legacy formats")
    paths = parser.add_mutually_exclusive_group()
    paths.add_argument(
        "--project-relative",
        dest="project_relative",
        action="store_true",
        default=True,
        help="Reference 3D models through ${KIPRJMOD} (default)",
    )
    paths.add_argument(
        "--global-3d-path",
        dest="project_relative",
        action="store_false",
        help="Reference 3D models through the global KiCad 3D model variable",
    )
    parser.add_argument(
        "-j", "--parallel", type=int, metavar="N", help="Worker threads for batches (default: 1)"
    )
    parser.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Keep converting after a component fails",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def split_ids(values: Sequence[str]) -> list[str]:
    """Flatten repeated and comma-separated ``--lcsc-id`` values."""
    return [part.strip() for value in values for part in value.split(",") if part.strip()]


def options_from_args(args: argparse.Namespace) -> ConversionOptions:
    full = args.full
    overrides: dict[str, Any] = {
        "symbol": args.symbol or full,
        "footprint": args.footprint or full,
        "model_3d": args.model_3d or full,
        "project_relative": args.project_relative,
        "continue_on_error": args.continue_on_error,
    }
    if args.output is not None:
        overrides["output"] = args.output
    if args.overwrite:
        overrides["overwrite"] = True
    if args.v5:
        overrides["version"] = KicadVersion.V5
    if args.parallel is not None:
        overrides["parallel"] = args.parallel
    return ConversionOptions.from_env(**overrides)


def _print_result(result: ComponentResult) -> None:
    for artifact in result.artifacts:
        label = _ARTIFACT_LABELS.get(artifact.kind, artifact.kind)
        print(f"✓ {label} {artifact.action.value}: {artifact.name}")
    for warning in result.warnings:
        print(f"⚠ {result.lcsc_id}: 3D model unavailable ({warning})")


def _print_report(report: BatchReport, options: ConversionOptions) -> None:
    for lcsc_id in sorted(report.results):
        _print_result(report.results[lcsc_id])
    for lcsc_id in report.failed_ids:
        print(f"✗ {lcsc_id}: {report.errors[lcsc_id].message}")

    if report.total > 1:
        print(f"\n{report.success} succeeded, {report.failed} failed")
        if report.partial_ids:
            print(f"Partial (3D model missing): {', '.join(report.partial_ids)}")
    if report.ok:
        print("\n✓ Conversion complete!")
        print(f"Output directory: {options.output}")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the converter; returns the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.debug else None)

    try:
        options = options_from_args(args)
        report = run_batch(split_ids(args.lcsc_id), options, EasyedaApi())
    except E2kError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    _print_report(report, options)
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
