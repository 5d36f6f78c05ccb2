"""Common typed data models shared by the symbol and footprint domains."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

Point = tuple[float, float]


@dataclass(frozen=True)
class BBoxOrigin:
    """Reference point raw EasyEDA coordinates are re-expressed against (mm).

    A component has one origin for its symbol and an independent one for
    its footprint.
    """

    x: float
    y: float

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y}
