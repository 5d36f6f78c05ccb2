"""Batch orchestration over many LCSC ids.

Sequential when there is one worker or one id; otherwise a fixed-size
thread pool runs one task per id. Running tasks are never cancelled: a
failure in parallel mode is recorded and the remaining ids still run.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any

from .config import ConversionOptions
from .easyeda.api import ComponentSource
from .exceptions import ConversionError, E2kError
from .library import LibraryManager
from .logging_config import create_logger
from .pipeline import ComponentResult, convert_component
from .validation import require_lcsc_ids

logger = create_logger(__name__)


@dataclass
class BatchReport:
    """Aggregated outcome of a batch, filled in as components finish."""

    total: int = 0
    results: dict[str, ComponentResult] = field(default_factory=dict)
    errors: dict[str, E2kError] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_success(self, result: ComponentResult) -> None:
        with self._lock:
            self.results[result.lcsc_id] = result

    def record_failure(self, lcsc_id: str, error: E2kError) -> None:
        with self._lock:
            self.errors[lcsc_id] = error

    @property
    def success(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return len(self.errors)

    @property
    def failed_ids(self) -> list[str]:
        return sorted(self.errors)

    @property
    def partial_ids(self) -> list[str]:
        return sorted(k for k, r in self.results.items() if r.status == "partial")

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "succeeded": self.success,
            "failed": self.failed,
            "failed_ids": self.failed_ids,
            "partial_ids": self.partial_ids,
            "results": [r.to_dict() for r in self.results.values()],
            "errors": {k: e.to_dict() for k, e in sorted(self.errors.items())},
        }


def run_batch(
    lcsc_ids: Iterable[str],
    options: ConversionOptions,
    source: ComponentSource,
    library: LibraryManager | None = None,
) -> BatchReport:
    """Convert every id and aggregate the outcome.

    Ids are validated before any work starts. In sequential mode the first
    failure propagates unless ``options.continue_on_error`` is set; in
    parallel mode every id runs to completion and failures are recorded.

    Raises:
        InvalidIdentifierError: If any id is malformed.
        ConfigError: If the options are unusable.
        E2kError: First component failure in sequential mode without
            ``continue_on_error``.
    """
    ids = require_lcsc_ids(lcsc_ids)
    options.validate()
    library = library or LibraryManager(options.output, options.version)
    library.create_directories()

    report = BatchReport(total=len(ids))
    batch = len(ids) > 1

    def convert(lcsc_id: str) -> ComponentResult:
        try:
            return convert_component(lcsc_id, options, source, library, batch=batch)
        except E2kError:
            raise
        except Exception as e:
            logger.exception(f"{lcsc_id}: unexpected {type(e).__name__}")
            raise ConversionError(
                f"Conversion of {lcsc_id} failed: {type(e).__name__}: {e}", lcsc_id=lcsc_id
            ) from e

    if options.parallel == 1 or len(ids) == 1:
        for lcsc_id in ids:
            try:
                report.record_success(convert(lcsc_id))
            except E2kError as e:
                logger.error(f"{lcsc_id} failed: {e.message}")
                report.record_failure(lcsc_id, e)
                if not options.continue_on_error:
                    raise
        return report

    workers = min(options.parallel, len(ids))
    logger.info(f"Converting {len(ids)} components with {workers} workers")
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="e2k") as pool:
        futures = {pool.submit(convert, lcsc_id): lcsc_id for lcsc_id in ids}
        for future in as_completed(futures):
            lcsc_id = futures[future]
            try:
                report.record_success(future.result())
            except E2kError as e:
                logger.error(f"{lcsc_id} failed: {e.message}")
                report.record_failure(lcsc_id, e)

    logger.info(f"Batch finished: {report.success} succeeded, {report.failed} failed")
    return report
