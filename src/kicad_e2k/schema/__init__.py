"""Typed data models for the EasyEDA source and the KiCad target."""

from .common import BBoxOrigin, Point
from .easyeda import (
    ComponentData,
    Ee3dModelInfo,
    EeArc,
    EeCircle,
    EeEllipse,
    EeFootprint,
    EeFootprintArc,
    EeFootprintCircle,
    EeFootprintRectangle,
    EeHole,
    EePad,
    EePath,
    EePin,
    EePolyline,
    EeRectangle,
    EeSymbol,
    EeText,
    EeTrack,
    EeVia,
)
from .kicad import (
    Drill,
    Ki3dModel,
    KiArc,
    KiCircle,
    KiFootprint,
    KiFootprintArc,
    KiFootprintCircle,
    KiLine,
    KiPad,
    KiPadPolygon,
    KiPin,
    KiPolyline,
    KiRectangle,
    KiSymbol,
    KiText,
    PadShape,
    PadType,
    PinStyle,
    PinType,
)
from .library import SymbolRecord

__all__ = [
    "BBoxOrigin",
    "ComponentData",
    "Drill",
    "Ee3dModelInfo",
    "EeArc",
    "EeCircle",
    "EeEllipse",
    "EeFootprint",
    "EeFootprintArc",
    "EeFootprintCircle",
    "EeFootprintRectangle",
    "EeHole",
    "EePad",
    "EePath",
    "EePin",
    "EePolyline",
    "EeRectangle",
    "EeSymbol",
    "EeText",
    "EeTrack",
    "EeVia",
    "Ki3dModel",
    "KiArc",
    "KiCircle",
    "KiFootprint",
    "KiFootprintArc",
    "KiFootprintCircle",
    "KiLine",
    "KiPad",
    "KiPadPolygon",
    "KiPin",
    "KiPolyline",
    "KiRectangle",
    "KiSymbol",
    "KiText",
    "PadShape",
    "PadType",
    "PinStyle",
    "PinType",
    "Point",
    "SymbolRecord",
]
