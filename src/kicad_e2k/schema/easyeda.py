"""Intermediate geometry model for parsed EasyEDA primitives.

All lengths are in millimetres (the parser converts from EasyEDA units) and
all coordinates are still in the component's local frame; nothing here has
been normalized against a bounding-box origin yet.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .common import BBoxOrigin, Point

# ── Symbol primitives ───────────────────────────────────────────────


@dataclass(frozen=True)
class EePin:
    number: str
    name: str
    electric_type: str  # "0".."4", see PinType.from_easyeda
    x: float
    y: float
    rotation: float
    length: float
    dot: bool = False
    clock: bool = False


@dataclass(frozen=True)
class EeRectangle:
    x: float
    y: float
    width: float
    height: float
    stroke_width: float = 0.0
    fill: bool = False


@dataclass(frozen=True)
class EeCircle:
    cx: float
    cy: float
    radius: float
    stroke_width: float = 0.0
    fill: bool = False


@dataclass(frozen=True)
class EeEllipse:
    cx: float
    cy: float
    rx: float
    ry: float
    stroke_width: float = 0.0
    fill: bool = False


@dataclass(frozen=True)
class EeArc:
    """Arc stored as center + sweep, angles in degrees."""

    cx: float
    cy: float
    radius: float
    start_angle: float
    end_angle: float
    stroke_width: float = 0.0


@dataclass(frozen=True)
class EePolyline:
    points: tuple[Point, ...]
    stroke_width: float = 0.0
    fill: bool = False
    closed: bool = False


@dataclass(frozen=True)
class EePath:
    """Freeform outline in the ``M``/``L``/``Z`` path mini-language."""

    path_data: str
    stroke_width: float = 0.0
    fill: bool = False


@dataclass
class EeSymbol:
    pins: list[EePin] = field(default_factory=list)
    rectangles: list[EeRectangle] = field(default_factory=list)
    circles: list[EeCircle] = field(default_factory=list)
    ellipses: list[EeEllipse] = field(default_factory=list)
    arcs: list[EeArc] = field(default_factory=list)
    polylines: list[EePolyline] = field(default_factory=list)
    paths: list[EePath] = field(default_factory=list)


# ── Footprint primitives ────────────────────────────────────────────


@dataclass(frozen=True)
class EePad:
    number: str
    shape: str  # "ELLIPSE", "RECT", "OVAL", "POLYGON"
    x: float
    y: float
    width: float
    height: float
    rotation: float
    layer_id: int
    hole_radius: float | None = None  # present => plated through-hole
    hole_length: float | None = None  # present => slotted drill
    points: tuple[float, ...] = ()  # flat x, y, x, y ... for POLYGON pads


@dataclass(frozen=True)
class EeTrack:
    width: float
    layer_id: int
    points: tuple[Point, ...]


@dataclass(frozen=True)
class EeFootprintCircle:
    cx: float
    cy: float
    radius: float
    stroke_width: float
    layer_id: int
    fill: bool = False


@dataclass(frozen=True)
class EeFootprintArc:
    cx: float
    cy: float
    radius: float
    start_angle: float
    end_angle: float
    stroke_width: float
    layer_id: int


@dataclass(frozen=True)
class EeFootprintRectangle:
    x: float
    y: float
    width: float
    height: float
    stroke_width: float
    layer_id: int


@dataclass(frozen=True)
class EeText:
    kind: str  # "P" prefix, "N" name, "L" free text
    text: str
    x: float
    y: float
    rotation: float
    font_size: float
    stroke_width: float
    layer_id: int
    visible: bool = True


@dataclass(frozen=True)
class EeHole:
    x: float
    y: float
    radius: float


@dataclass(frozen=True)
class EeVia:
    x: float
    y: float
    diameter: float
    radius: float


@dataclass(frozen=True)
class Ee3dModelInfo:
    uuid: str
    title: str

    def to_dict(self) -> dict[str, Any]:
        return {"uuid": self.uuid, "title": self.title}


@dataclass
class EeFootprint:
    pads: list[EePad] = field(default_factory=list)
    tracks: list[EeTrack] = field(default_factory=list)
    circles: list[EeFootprintCircle] = field(default_factory=list)
    arcs: list[EeFootprintArc] = field(default_factory=list)
    rectangles: list[EeFootprintRectangle] = field(default_factory=list)
    texts: list[EeText] = field(default_factory=list)
    holes: list[EeHole] = field(default_factory=list)
    vias: list[EeVia] = field(default_factory=list)


# ── Component ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class ComponentData:
    """Everything the data source returns for one LCSC id.

    ``symbol_shapes`` and ``footprint_shapes`` are the raw EasyEDA shape
    strings, parsed later by :mod:`kicad_e2k.easyeda.parser`.
    """

    lcsc_id: str
    title: str
    symbol_shapes: tuple[str, ...]
    footprint_shapes: tuple[str, ...]
    bbox: BBoxOrigin
    package_bbox: BBoxOrigin
    prefix: str = "U"
    manufacturer: str = ""
    datasheet: str = ""
    jlc_id: str = ""
    model_3d: Ee3dModelInfo | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "lcsc_id": self.lcsc_id,
            "title": self.title,
            "prefix": self.prefix,
            "manufacturer": self.manufacturer,
            "datasheet": self.datasheet,
            "jlc_id": self.jlc_id,
            "bbox": self.bbox.to_dict(),
            "package_bbox": self.package_bbox.to_dict(),
            "model_3d": self.model_3d.to_dict() if self.model_3d else None,
        }
