"""Input validation and name sanitizing.

- LCSC identifiers (``C`` followed by at least one character)
- Library record names (alphanumerics, ``_`` and ``-`` only)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .exceptions import InvalidIdentifierError


@dataclass
class ValidationResult:
    """Result of a validation operation."""

    valid: bool
    value: Any = None
    error: str | None = None

    @classmethod
    def success(cls, value: Any = None) -> ValidationResult:
        return cls(valid=True, value=value)

    @classmethod
    def failure(cls, error: str) -> ValidationResult:
        return cls(valid=False, error=error)


def validate_lcsc_id(value: str) -> ValidationResult:
    """Validate an LCSC component id such as ``C2040``.

    Surrounding whitespace is stripped; the id itself is case sensitive.
    """
    if not isinstance(value, str):
        return ValidationResult.failure(f"LCSC id must be a string, got {type(value).__name__}")
    lcsc_id = value.strip()
    if not lcsc_id.startswith("C") or len(lcsc_id) < 2:
        return ValidationResult.failure(
            f"Invalid LCSC id {value!r}: expected 'C' followed by the part number"
        )
    return ValidationResult.success(lcsc_id)


def require_lcsc_ids(values: Iterable[str]) -> list[str]:
    """Validate every id up front, raising on the first malformed one."""
    ids: list[str] = []
    for value in values:
        result = validate_lcsc_id(value)
        if not result.valid:
            raise InvalidIdentifierError(result.error or "Invalid LCSC id", lcsc_id=str(value))
        ids.append(result.value)
    return ids


def sanitize_name(name: str) -> str:
    """Replace every character KiCad library names cannot carry with ``_``."""
    return "".join(c if c.isalnum() or c in "_-" else "_" for c in name)


def record_key(title: str, lcsc_id: str, batch: bool) -> str:
    """Library record key for a component.

    Batch runs append the LCSC id so different parts whose titles sanitize
    to the same name do not overwrite each other.
    """
    name = sanitize_name(title)
    if batch:
        return f"{name}_{sanitize_name(lcsc_id)}"
    return name
