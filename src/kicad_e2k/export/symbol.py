"""Render KiCad symbols as library records.

Two dialects:

- V6: a ``(symbol ...)`` record for ``.kicad_sym`` libraries (mm)
- V5: a ``DEF ... ENDDEF`` record for legacy ``.lib`` libraries (mil)

Rendering is a pure function of the symbol, so re-converting an unchanged
component yields byte-identical text.
"""

from __future__ import annotations

from ..config import KicadVersion
from ..constants import (
    GENERATOR,
    MM_PER_MIL,
    PIN_TEXT_SIZE,
    PROPERTY_OFFSET,
    SYMBOL_LIB_VERSION,
    SYMBOL_TEXT_SIZE,
)
from ..exceptions import SerializeError
from ..schema.common import Point
from ..schema.kicad import KiPin, KiSymbol
from ..sexp import SExp, atom, node, string

LEGACY_HEADER = "EESchema-Schematic-Library Version 2.4\n#encoding utf-8\n"
LEGACY_FOOTER = "#\n#End Library\n"


def pin_orientation(rotation: float) -> int:
    """KiCad pin orientation for an EasyEDA pin rotation.

    EasyEDA rotates the pin around its body end, KiCad around its
    connection point, hence the half turn.
    """
    return int(round(rotation + 180)) % 360


def _property_layout(symbol: KiSymbol) -> list[tuple[str, str, bool]]:
    """(name, value, hidden) for every property, in a stable order."""
    props = [
        ("Reference", symbol.reference, False),
        ("Value", symbol.value, False),
        ("Footprint", symbol.footprint, True),
        ("Datasheet", symbol.datasheet or "~", True),
    ]
    for name, value in (
        ("Manufacturer", symbol.manufacturer),
        ("LCSC Part", symbol.lcsc_id),
        ("JLC Part", symbol.jlc_id),
    ):
        if value:
            props.append((name, value, True))
    return props


def _property_y(symbol: KiSymbol, index: int) -> float:
    y_min, y_max = symbol.y_extent()
    if index == 0:
        return y_max + PROPERTY_OFFSET
    return y_min - PROPERTY_OFFSET * index


# ── V6 ──────────────────────────────────────────────────────────────


def _effects(size: float, hidden: bool = False) -> SExp:
    effects = node("effects", node("font", node("size", size, size)))
    if hidden:
        effects.children.append(atom("hide"))
    return effects


def _stroke(width: float) -> SExp:
    return node("stroke", node("width", width), node("type", "default"))


def _fill(filled: bool) -> SExp:
    return node("fill", node("type", "background" if filled else "none"))


def _xy_list(points: tuple[Point, ...]) -> SExp:
    return node("pts", *(node("xy", x, y) for x, y in points))


def _pin_v6(pin: KiPin) -> SExp:
    return node(
        "pin",
        pin.pin_type.value,
        pin.style.value,
        node("at", pin.x, pin.y, pin_orientation(pin.rotation)),
        node("length", pin.length),
        node("name", string(pin.name or "~"), _effects(PIN_TEXT_SIZE)),
        node("number", string(pin.number), _effects(PIN_TEXT_SIZE)),
    )


def symbol_to_sexp(symbol: KiSymbol) -> SExp:
    """Build the ``(symbol ...)`` tree for the V6 dialect."""
    root = node("symbol", string(symbol.name), node("in_bom", "yes"), node("on_board", "yes"))
    for idx, (name, value, hidden) in enumerate(_property_layout(symbol)):
        root.children.append(
            node(
                "property",
                string(name),
                string(value),
                node("id", idx),
                node("at", 0, _property_y(symbol, idx), 0),
                _effects(SYMBOL_TEXT_SIZE, hidden),
            )
        )

    graphics = node("symbol", string(f"{symbol.name}_0_1"))
    for rect in symbol.rectangles:
        graphics.children.append(
            node(
                "rectangle",
                node("start", rect.x1, rect.y1),
                node("end", rect.x2, rect.y2),
                _stroke(rect.stroke_width),
                _fill(rect.fill),
            )
        )
    for circle in symbol.circles:
        graphics.children.append(
            node(
                "circle",
                node("center", circle.cx, circle.cy),
                node("radius", circle.radius),
                _stroke(circle.stroke_width),
                _fill(circle.fill),
            )
        )
    for arc in symbol.arcs:
        graphics.children.append(
            node(
                "arc",
                node("start", *arc.start),
                node("mid", *arc.mid),
                node("end", *arc.end),
                _stroke(arc.stroke_width),
                _fill(False),
            )
        )
    for polyline in symbol.polylines:
        graphics.children.append(
            node(
                "polyline",
                _xy_list(polyline.points),
                _stroke(polyline.stroke_width),
                _fill(polyline.fill),
            )
        )
    root.children.append(graphics)

    pins = node("symbol", string(f"{symbol.name}_1_1"))
    pins.children.extend(_pin_v6(p) for p in symbol.pins)
    root.children.append(pins)
    return root


def empty_library_v6() -> SExp:
    return node(
        "kicad_symbol_lib",
        node("version", SYMBOL_LIB_VERSION),
        node("generator", GENERATOR),
    )


# ── V5 (legacy) ─────────────────────────────────────────────────────


def _mil(value: float) -> int:
    return int(round(value / MM_PER_MIL))


def _legacy_text(value: str) -> str:
    return '"' + value.replace('"', "'") + '"'


def _legacy_angle(degrees: float) -> int:
    """Tenths of a degree in (-1800, 1800]."""
    tenths = int(round(degrees * 10)) % 3600
    return tenths - 3600 if tenths > 1800 else tenths


_LEGACY_DIRECTIONS = {0: "R", 90: "U", 180: "L", 270: "D"}


def _pin_v5(pin: KiPin) -> str:
    orientation = pin_orientation(pin.rotation)
    direction = _LEGACY_DIRECTIONS.get(orientation, "R")
    name = (pin.name or "~").replace(" ", "_")
    number = (pin.number or "~").replace(" ", "_")
    line = (
        f"X {name} {number} {_mil(pin.x)} {_mil(pin.y)} {_mil(pin.length)} {direction} "
        f"{_mil(PIN_TEXT_SIZE)} {_mil(PIN_TEXT_SIZE)} 1 1 {pin.pin_type.legacy_code}"
    )
    if pin.style.legacy_code:
        line += f" {pin.style.legacy_code}"
    return line


def symbol_to_legacy(symbol: KiSymbol) -> str:
    """Render the ``DEF ... ENDDEF`` record for the V5 dialect."""
    lines = ["#", f"# {symbol.name}", "#", f"DEF {symbol.name} {symbol.reference} 0 40 Y Y 1 F N"]
    for idx, (name, value, hidden) in enumerate(_property_layout(symbol)):
        visibility = "I" if hidden else "V"
        line = (
            f"F{idx} {_legacy_text(value)} 0 {_mil(_property_y(symbol, idx))} "
            f"{_mil(SYMBOL_TEXT_SIZE)} H {visibility} C CNN"
        )
        if idx > 3:
            line += f" {_legacy_text(name)}"
        lines.append(line)

    lines.append("DRAW")
    for rect in symbol.rectangles:
        fill = "f" if rect.fill else "N"
        lines.append(
            f"S {_mil(rect.x1)} {_mil(rect.y1)} {_mil(rect.x2)} {_mil(rect.y2)} "
            f"0 1 {_mil(rect.stroke_width)} {fill}"
        )
    for circle in symbol.circles:
        fill = "f" if circle.fill else "N"
        lines.append(
            f"C {_mil(circle.cx)} {_mil(circle.cy)} {_mil(circle.radius)} "
            f"0 1 {_mil(circle.stroke_width)} {fill}"
        )
    for arc in symbol.arcs:
        lines.append(
            f"A {_mil(arc.center[0])} {_mil(arc.center[1])} {_mil(arc.radius)} "
            f"{_legacy_angle(arc.start_angle)} {_legacy_angle(arc.end_angle)} "
            f"0 1 {_mil(arc.stroke_width)} N "
            f"{_mil(arc.start[0])} {_mil(arc.start[1])} {_mil(arc.end[0])} {_mil(arc.end[1])}"
        )
    for polyline in symbol.polylines:
        coords = " ".join(f"{_mil(x)} {_mil(y)}" for x, y in polyline.points)
        fill = "f" if polyline.fill else "N"
        lines.append(
            f"P {len(polyline.points)} 0 1 {_mil(polyline.stroke_width)} {coords} {fill}"
        )
    lines.extend(_pin_v5(p) for p in symbol.pins)
    lines.extend(["ENDDRAW", "ENDDEF"])
    return "\n".join(lines) + "\n"


# ── Entry points ────────────────────────────────────────────────────


def render_symbol(symbol: KiSymbol, version: KicadVersion) -> str:
    """Render one symbol record in the requested dialect.

    Raises:
        SerializeError: If the symbol holds values no dialect can express.
    """
    try:
        if version is KicadVersion.V5:
            return symbol_to_legacy(symbol)
        return symbol_to_sexp(symbol).to_string(indent=1)
    except (ValueError, OverflowError) as e:
        raise SerializeError(f"Cannot render symbol {symbol.name!r}: {e}") from e


def empty_symbol_library(version: KicadVersion) -> str:
    """Text of a symbol library holding no records."""
    if version is KicadVersion.V5:
        return LEGACY_HEADER + LEGACY_FOOTER
    return empty_library_v6().to_string() + "\n"


__all__ = [
    "LEGACY_FOOTER",
    "LEGACY_HEADER",
    "empty_symbol_library",
    "pin_orientation",
    "render_symbol",
    "symbol_to_legacy",
    "symbol_to_sexp",
]
