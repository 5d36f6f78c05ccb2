"""Typed target entities for KiCad symbols, footprints and 3D model references.

These are pure projections of the EasyEDA model: builders create them,
serializers render them, and nothing mutates them in between.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .common import Point

# ── Symbol ──────────────────────────────────────────────────────────


class PinType(Enum):
    INPUT = "input"
    OUTPUT = "output"
    BIDIRECTIONAL = "bidirectional"
    TRI_STATE = "tri_state"
    PASSIVE = "passive"
    UNSPECIFIED = "unspecified"
    POWER_IN = "power_in"
    POWER_OUT = "power_out"
    OPEN_COLLECTOR = "open_collector"
    OPEN_EMITTER = "open_emitter"
    NO_CONNECT = "no_connect"

    @classmethod
    def from_easyeda(cls, code: str) -> PinType:
        """Map an EasyEDA electric type code; unknown codes are unspecified."""
        return _EE_PIN_TYPES.get(code.strip(), cls.UNSPECIFIED)

    @property
    def legacy_code(self) -> str:
        return _LEGACY_PIN_TYPES[self]


_EE_PIN_TYPES: dict[str, PinType] = {
    "0": PinType.UNSPECIFIED,
    "1": PinType.INPUT,
    "2": PinType.OUTPUT,
    "3": PinType.BIDIRECTIONAL,
    "4": PinType.POWER_IN,
}

_LEGACY_PIN_TYPES: dict[PinType, str] = {
    PinType.INPUT: "I",
    PinType.OUTPUT: "O",
    PinType.BIDIRECTIONAL: "B",
    PinType.TRI_STATE: "T",
    PinType.PASSIVE: "P",
    PinType.UNSPECIFIED: "U",
    PinType.POWER_IN: "W",
    PinType.POWER_OUT: "w",
    PinType.OPEN_COLLECTOR: "C",
    PinType.OPEN_EMITTER: "E",
    PinType.NO_CONNECT: "N",
}


class PinStyle(Enum):
    LINE = "line"
    INVERTED = "inverted"
    CLOCK = "clock"

    @classmethod
    def from_flags(cls, dot: bool, clock: bool) -> PinStyle:
        """Inversion dot wins over the clock marker."""
        if dot:
            return cls.INVERTED
        if clock:
            return cls.CLOCK
        return cls.LINE

    @property
    def legacy_code(self) -> str:
        return {PinStyle.LINE: "", PinStyle.INVERTED: "I", PinStyle.CLOCK: "C"}[self]


@dataclass(frozen=True)
class KiPin:
    number: str
    name: str
    pin_type: PinType
    style: PinStyle
    x: float
    y: float
    rotation: float
    length: float


@dataclass(frozen=True)
class KiRectangle:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke_width: float
    fill: bool


@dataclass(frozen=True)
class KiCircle:
    cx: float
    cy: float
    radius: float
    stroke_width: float
    fill: bool


@dataclass(frozen=True)
class KiArc:
    """Three-point arc; center and angles are kept for the legacy dialect."""

    start: Point
    mid: Point
    end: Point
    center: Point
    radius: float
    start_angle: float
    end_angle: float
    stroke_width: float


@dataclass(frozen=True)
class KiPolyline:
    points: tuple[Point, ...]
    stroke_width: float
    fill: bool


@dataclass(frozen=True)
class KiSymbol:
    name: str
    reference: str
    value: str
    footprint: str
    datasheet: str = ""
    manufacturer: str = ""
    lcsc_id: str = ""
    jlc_id: str = ""
    pins: tuple[KiPin, ...] = ()
    rectangles: tuple[KiRectangle, ...] = ()
    circles: tuple[KiCircle, ...] = ()
    arcs: tuple[KiArc, ...] = ()
    polylines: tuple[KiPolyline, ...] = ()

    def y_extent(self) -> tuple[float, float]:
        """Lowest and highest y reached by the drawing, for property placement."""
        ys: list[float] = [p.y for p in self.pins]
        for r in self.rectangles:
            ys.extend((r.y1, r.y2))
        for c in self.circles:
            ys.extend((c.cy - c.radius, c.cy + c.radius))
        for a in self.arcs:
            ys.extend((a.start[1], a.mid[1], a.end[1]))
        for pl in self.polylines:
            ys.extend(y for _, y in pl.points)
        if not ys:
            return 0.0, 0.0
        return min(ys), max(ys)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "reference": self.reference,
            "value": self.value,
            "footprint": self.footprint,
            "pin_count": len(self.pins),
            "shape_count": len(self.rectangles)
            + len(self.circles)
            + len(self.arcs)
            + len(self.polylines),
        }


# ── Footprint ───────────────────────────────────────────────────────


class PadType(Enum):
    SMD = "smd"
    THROUGH_HOLE = "thru_hole"
    NP_THROUGH_HOLE = "np_thru_hole"


class PadShape(Enum):
    CIRCLE = "circle"
    RECT = "rect"
    OVAL = "oval"
    CUSTOM = "custom"

    @classmethod
    def from_easyeda(cls, shape: str) -> PadShape:
        """Map an EasyEDA pad shape name; unknown shapes become rectangles."""
        return _EE_PAD_SHAPES.get(shape.strip().upper(), cls.RECT)


_EE_PAD_SHAPES: dict[str, PadShape] = {
    "ELLIPSE": PadShape.CIRCLE,
    "RECT": PadShape.RECT,
    "OVAL": PadShape.OVAL,
    "POLYGON": PadShape.CUSTOM,
}


@dataclass(frozen=True)
class Drill:
    diameter: float
    width: float | None = None  # set for slotted (oval) drills

    @property
    def is_oval(self) -> bool:
        return self.width is not None


@dataclass(frozen=True)
class KiPadPolygon:
    """Custom pad outline, vertices relative to the pad position."""

    points: tuple[Point, ...]
    width: float


@dataclass(frozen=True)
class KiPad:
    number: str
    pad_type: PadType
    shape: PadShape
    x: float
    y: float
    size_x: float
    size_y: float
    rotation: float
    layers: tuple[str, ...]
    drill: Drill | None = None
    polygon: KiPadPolygon | None = None


@dataclass(frozen=True)
class KiLine:
    start: Point
    end: Point
    width: float
    layer: str


@dataclass(frozen=True)
class KiFootprintCircle:
    center: Point
    end: Point
    width: float
    layer: str
    fill: bool = False


@dataclass(frozen=True)
class KiFootprintArc:
    start: Point
    mid: Point
    end: Point
    center: Point
    angle: float  # sweep in degrees, used by the legacy dialect
    width: float
    layer: str


@dataclass(frozen=True)
class KiText:
    kind: str  # "reference", "value" or "user"
    text: str
    x: float
    y: float
    rotation: float
    size: float
    thickness: float
    layer: str
    hidden: bool = False


@dataclass(frozen=True)
class Ki3dModel:
    path: str
    offset: tuple[float, float, float] = (0.0, 0.0, 0.0)
    scale: tuple[float, float, float] = (1.0, 1.0, 1.0)
    rotate: tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class KiFootprint:
    name: str
    pads: tuple[KiPad, ...] = ()
    lines: tuple[KiLine, ...] = ()
    circles: tuple[KiFootprintCircle, ...] = ()
    arcs: tuple[KiFootprintArc, ...] = ()
    texts: tuple[KiText, ...] = ()
    model_3d: Ki3dModel | None = None
    lcsc_id: str = ""

    @property
    def attribute(self) -> str:
        """``smd`` when every pad is surface-mount, else ``through_hole``."""
        if any(p.pad_type is not PadType.SMD for p in self.pads):
            return "through_hole"
        return "smd"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "attribute": self.attribute,
            "pad_count": len(self.pads),
            "model_3d": self.model_3d.path if self.model_3d else None,
        }
