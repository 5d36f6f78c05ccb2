"""Summaries of records already present in the generated libraries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SymbolRecord:
    """Summary of one symbol in the generated symbol library."""

    name: str
    library: str
    reference: str = ""
    value: str = ""
    footprint: str = ""
    datasheet: str = ""
    lcsc_id: str = ""
    pin_count: int = 0

    @property
    def full_id(self) -> str:
        return f"{self.library}:{self.name}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "library": self.library,
            "full_id": self.full_id,
            "reference": self.reference,
            "value": self.value,
            "footprint": self.footprint,
            "datasheet": self.datasheet,
            "lcsc_id": self.lcsc_id,
            "pin_count": self.pin_count,
        }
