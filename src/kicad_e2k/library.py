"""Library merge manager for the generated KiCad libraries.

Layout under the output directory::

    e2k.kicad_sym        (V6) or e2k.lib (V5), one shared symbol library
    e2k.pretty/          one .kicad_mod per footprint
    e2k.3dshapes/        .wrl / .step models

Every file update holds a lock for the resolved file path, so parallel
batch workers never interleave a read-modify-write of the same library.
"""

from __future__ import annotations

import os
import re
import tempfile
import threading
from enum import Enum
from pathlib import Path

from .config import KicadVersion
from .constants import LIBRARY_NAME
from .exceptions import MergeError
from .export.symbol import LEGACY_FOOTER, LEGACY_HEADER, empty_library_v6
from .logging_config import create_logger
from .schema.library import SymbolRecord
from .sexp import parse

logger = create_logger(__name__)


class MergeAction(Enum):
    ADDED = "added"
    UPDATED = "updated"
    SKIPPED = "skipped"


# ── Per-path locks ──────────────────────────────────────────────────

_registry_lock = threading.Lock()
_path_locks: dict[Path, threading.Lock] = {}


def lock_for(path: Path) -> threading.Lock:
    """The lock guarding ``path``; one per resolved path, process wide."""
    key = Path(path).resolve()
    with _registry_lock:
        lock = _path_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _path_locks[key] = lock
        return lock


def _write_atomic(path: Path, data: bytes) -> None:
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


# ── Record merging ──────────────────────────────────────────────────


def merge_sexp_library(
    text: str | None, key: str, payload: str, overwrite: bool
) -> tuple[str | None, MergeAction]:
    """Merge one ``(symbol ...)`` record into a ``.kicad_sym`` text.

    Returns the new file text, or None when nothing must be written.

    Raises:
        ValueError: If the library or the payload is malformed.
    """
    if text is None or not text.strip():
        tree = empty_library_v6()
    else:
        tree = parse(text)
        if tree.name != "kicad_symbol_lib":
            raise ValueError(f"not a symbol library (root is {tree.name!r})")

    record = parse(payload)
    if record.name != "symbol" or record.first_value != key:
        raise ValueError(f"payload is not a symbol record named {key!r}")

    for idx, child in enumerate(tree.children):
        if child.name == "symbol" and child.first_value == key:
            if not overwrite:
                return None, MergeAction.SKIPPED
            tree.children[idx] = record
            return tree.to_string() + "\n", MergeAction.UPDATED

    tree.children.append(record)
    return tree.to_string() + "\n", MergeAction.ADDED


def merge_legacy_library(
    text: str | None, key: str, payload: str, overwrite: bool
) -> tuple[str | None, MergeAction]:
    """Merge one ``DEF ... ENDDEF`` record into a legacy ``.lib`` text.

    Raises:
        ValueError: If the existing record for ``key`` is unterminated.
    """
    if text is None or not text.strip():
        text = LEGACY_HEADER + LEGACY_FOOTER
    lines = text.splitlines(keepends=True)

    start: int | None = None
    end: int | None = None
    for i, line in enumerate(lines):
        fields = line.split()
        if start is None:
            if len(fields) >= 2 and fields[0] == "DEF" and fields[1] == key:
                start = i
        elif fields[:1] == ["ENDDEF"]:
            end = i
            break

    if start is not None:
        if end is None:
            raise ValueError(f"record {key!r} has no ENDDEF")
        if not overwrite:
            return None, MergeAction.SKIPPED
        banner = [ln.strip() for ln in lines[max(0, start - 3) : start]]
        if banner == ["#", f"# {key}", "#"]:
            start -= 3
        new_lines = lines[:start] + [payload] + lines[end + 1 :]
        return "".join(new_lines), MergeAction.UPDATED

    insert_at = len(lines)
    for i, line in enumerate(lines):
        if line.strip() == "#End Library":
            insert_at = i - 1 if i > 0 and lines[i - 1].strip() == "#" else i
            break
    else:
        lines.append(LEGACY_FOOTER)
    if lines and insert_at > 0 and not lines[insert_at - 1].endswith("\n"):
        lines[insert_at - 1] += "\n"
    new_lines = lines[:insert_at] + [payload] + lines[insert_at:]
    return "".join(new_lines), MergeAction.ADDED


# ── Record listing ──────────────────────────────────────────────────

_RE_TOP_SYMBOL = re.compile(r'^(?:\t| {2})\(symbol\s+"([^"]+)"', re.MULTILINE)
_RE_PROPERTY = re.compile(r'\(property\s+"([^"]+)"\s+"([^"]*)"')
_RE_PIN = re.compile(r"\(pin\s+\w+\s+\w+")
_RE_LEGACY_DEF = re.compile(r"^DEF\s+(\S+)\s+(\S+)", re.MULTILINE)
_RE_LEGACY_FIELD = re.compile(r'^F(\d+)\s+"([^"]*)"(?:.*"([^"]*)"\s*$)?', re.MULTILINE)
_RE_LEGACY_PIN = re.compile(r"^X\s", re.MULTILINE)


def _scan_sexp_records(text: str, lib_name: str) -> list[SymbolRecord]:
    """Scan a .kicad_sym text for top-level symbols using regex."""
    starts: list[tuple[int, str]] = []
    for m in _RE_TOP_SYMBOL.finditer(text):
        name = m.group(1)
        # Skip unit sub-symbols such as "R_0_1"
        parts = name.rsplit("_", 2)
        if len(parts) >= 3 and parts[-1].isdigit() and parts[-2].isdigit():
            continue
        starts.append((m.start(), name))

    records: list[SymbolRecord] = []
    for i, (start, name) in enumerate(starts):
        end = starts[i + 1][0] if i + 1 < len(starts) else len(text)
        block = text[start:end]
        props = {pm.group(1): pm.group(2) for pm in _RE_PROPERTY.finditer(block)}
        records.append(
            SymbolRecord(
                name=name,
                library=lib_name,
                reference=props.get("Reference", ""),
                value=props.get("Value", ""),
                footprint=props.get("Footprint", ""),
                datasheet=props.get("Datasheet", ""),
                lcsc_id=props.get("LCSC Part", ""),
                pin_count=len(_RE_PIN.findall(block)),
            )
        )
    return records


def _scan_legacy_records(text: str, lib_name: str) -> list[SymbolRecord]:
    """Scan a legacy .lib text for DEF records."""
    records: list[SymbolRecord] = []
    for block in text.split("ENDDEF"):
        m = _RE_LEGACY_DEF.search(block)
        if m is None:
            continue
        fields: dict[str, str] = {}
        for fm in _RE_LEGACY_FIELD.finditer(block[m.start() :]):
            idx, value, name = fm.group(1), fm.group(2), fm.group(3)
            fields[name or idx] = value
        records.append(
            SymbolRecord(
                name=m.group(1),
                library=lib_name,
                reference=fields.get("0", m.group(2)),
                value=fields.get("1", ""),
                footprint=fields.get("2", ""),
                datasheet=fields.get("3", ""),
                lcsc_id=fields.get("LCSC Part", ""),
                pin_count=len(_RE_LEGACY_PIN.findall(block)),
            )
        )
    return records


# ── Manager ─────────────────────────────────────────────────────────


class LibraryManager:
    """Owns the generated library files under one output directory.

    Args:
        output: Directory holding the libraries.
        version: Dialect of the symbol library and footprints.
    """

    def __init__(self, output: Path | str, version: KicadVersion = KicadVersion.V6) -> None:
        self.output = Path(output)
        self.version = version

    @property
    def symbol_lib_path(self) -> Path:
        return self.output / f"{LIBRARY_NAME}{self.version.symbol_extension}"

    @property
    def footprint_dir(self) -> Path:
        return self.output / f"{LIBRARY_NAME}.pretty"

    @property
    def model_dir(self) -> Path:
        return self.output / f"{LIBRARY_NAME}.3dshapes"

    def footprint_path(self, key: str) -> Path:
        return self.footprint_dir / f"{key}.kicad_mod"

    def model_path(self, name: str, suffix: str) -> Path:
        return self.model_dir / f"{name}{suffix}"

    def create_directories(self) -> None:
        """Create the output, footprint and 3D model directories."""
        try:
            for directory in (self.output, self.footprint_dir, self.model_dir):
                directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise MergeError(f"Cannot create library directories: {e}", path=str(self.output)) from e

    def add_or_update(
        self, path: Path, key: str, payload: str, overwrite: bool
    ) -> MergeAction:
        """Insert, replace or keep the record ``key`` of a symbol library.

        Holds the lock for ``path`` across the whole read-modify-write. With
        ``overwrite`` false and the key present the file is not touched.

        Raises:
            MergeError: If the library cannot be read, parsed or written.
        """
        merge = merge_legacy_library if path.suffix == ".lib" else merge_sexp_library
        with lock_for(path):
            try:
                text = path.read_text(encoding="utf-8") if path.exists() else None
            except OSError as e:
                raise MergeError(f"Cannot read {path}: {e}", path=str(path)) from e

            try:
                new_text, action = merge(text, key, payload, overwrite)
            except ValueError as e:
                raise MergeError(f"Cannot merge {key!r} into {path}: {e}", path=str(path)) from e

            if new_text is not None and new_text != text:
                try:
                    path.parent.mkdir(parents=True, exist_ok=True)
                    _write_atomic(path, new_text.encode("utf-8"))
                except OSError as e:
                    raise MergeError(f"Cannot write {path}: {e}", path=str(path)) from e

        logger.debug(f"{action.value} {key} in {path.name}")
        return action

    def add_symbol(self, key: str, payload: str, overwrite: bool) -> MergeAction:
        return self.add_or_update(self.symbol_lib_path, key, payload, overwrite)

    def _write_file(self, path: Path, data: bytes, overwrite: bool) -> MergeAction:
        with lock_for(path):
            exists = path.exists()
            if exists and not overwrite:
                return MergeAction.SKIPPED
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                _write_atomic(path, data)
            except OSError as e:
                raise MergeError(f"Cannot write {path}: {e}", path=str(path)) from e
        return MergeAction.UPDATED if exists else MergeAction.ADDED

    def write_footprint(self, key: str, text: str, overwrite: bool) -> tuple[Path, MergeAction]:
        path = self.footprint_path(key)
        return path, self._write_file(path, text.encode("utf-8"), overwrite)

    def write_3d_model(
        self, name: str, data: bytes, suffix: str, overwrite: bool
    ) -> tuple[Path, MergeAction]:
        path = self.model_path(name, suffix)
        return path, self._write_file(path, data, overwrite)

    def list_records(self, path: Path | None = None) -> list[SymbolRecord]:
        """List the symbols of a library, the managed one by default."""
        path = path or self.symbol_lib_path
        if not path.exists():
            return []
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise MergeError(f"Cannot read {path}: {e}", path=str(path)) from e
        if path.suffix == ".lib":
            return _scan_legacy_records(text, path.stem)
        return _scan_sexp_records(text, path.stem)

    def list_footprints(self) -> list[str]:
        if not self.footprint_dir.is_dir():
            return []
        return sorted(p.stem for p in self.footprint_dir.glob("*.kicad_mod"))


__all__ = [
    "LibraryManager",
    "MergeAction",
    "lock_for",
    "merge_legacy_library",
    "merge_sexp_library",
]
