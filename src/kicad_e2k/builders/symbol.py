"""Build a KiCad symbol from a parsed EasyEDA symbol."""

from __future__ import annotations

from ..constants import LIBRARY_NAME, PIN_LENGTH_WARNING
from ..geometry import (
    arc_to_points,
    normalize_pin_point,
    normalize_symbol_point,
    parse_path,
)
from ..logging_config import create_logger
from ..schema.common import BBoxOrigin, Point
from ..schema.easyeda import ComponentData, EeArc, EePin, EeSymbol
from ..schema.kicad import (
    KiArc,
    KiCircle,
    KiPin,
    KiPolyline,
    KiRectangle,
    KiSymbol,
    PinStyle,
    PinType,
)

logger = create_logger(__name__)


def build_pin(pin: EePin, origin: BBoxOrigin) -> KiPin:
    x, y = normalize_pin_point(pin.x, pin.y, origin)
    if pin.length >= PIN_LENGTH_WARNING:
        logger.warning(f"Pin {pin.number} ({pin.name}) has unusual length: {pin.length}")
    return KiPin(
        number=pin.number,
        name=pin.name,
        pin_type=PinType.from_easyeda(pin.electric_type),
        style=PinStyle.from_flags(pin.dot, pin.clock),
        x=x,
        y=y,
        rotation=pin.rotation,
        length=pin.length,
    )


def build_arc(arc: EeArc, origin: BBoxOrigin) -> KiArc:
    pts = arc_to_points(arc.cx, arc.cy, arc.radius, arc.start_angle, arc.end_angle)
    # The y flip mirrors the arc, so the angles change sign with it
    return KiArc(
        start=normalize_symbol_point(*pts.start, origin),
        mid=normalize_symbol_point(*pts.mid, origin),
        end=normalize_symbol_point(*pts.end, origin),
        center=normalize_symbol_point(arc.cx, arc.cy, origin),
        radius=arc.radius,
        start_angle=-arc.start_angle,
        end_angle=-arc.end_angle,
        stroke_width=arc.stroke_width,
    )


def _normalize_all(points: tuple[Point, ...] | list[Point], origin: BBoxOrigin) -> tuple[Point, ...]:
    return tuple(normalize_symbol_point(x, y, origin) for x, y in points)


def build_symbol(component: ComponentData, ee_symbol: EeSymbol, name: str) -> KiSymbol:
    """Project a parsed symbol and the component metadata onto a KiSymbol.

    Args:
        component: Fetched component; supplies metadata and the symbol origin.
        ee_symbol: Parsed symbol primitives in local coordinates.
        name: Library record key, also used for the footprint link.
    """
    origin = component.bbox
    logger.debug(f"symbol origin = ({origin.x}, {origin.y})")

    pins = tuple(build_pin(p, origin) for p in ee_symbol.pins)

    rectangles: list[KiRectangle] = []
    for idx, rect in enumerate(ee_symbol.rectangles):
        x1, y1 = normalize_symbol_point(rect.x, rect.y, origin)
        x2, y2 = normalize_symbol_point(rect.x + rect.width, rect.y + rect.height, origin)
        rectangles.append(
            KiRectangle(
                x1=x1,
                y1=y1,
                x2=x2,
                y2=y2,
                stroke_width=rect.stroke_width,
                # The first rectangle is the body outline
                fill=True if idx == 0 else rect.fill,
            )
        )

    circles: list[KiCircle] = []
    for circle in ee_symbol.circles:
        cx, cy = normalize_symbol_point(circle.cx, circle.cy, origin)
        circles.append(KiCircle(cx, cy, circle.radius, circle.stroke_width, circle.fill))
    for ellipse in ee_symbol.ellipses:
        cx, cy = normalize_symbol_point(ellipse.cx, ellipse.cy, origin)
        radius = (ellipse.rx + ellipse.ry) / 2
        circles.append(KiCircle(cx, cy, radius, ellipse.stroke_width, ellipse.fill))

    arcs = tuple(build_arc(a, origin) for a in ee_symbol.arcs)

    polylines: list[KiPolyline] = []
    for polyline in ee_symbol.polylines:
        points = list(polyline.points)
        if polyline.closed and points and points[0] != points[-1]:
            points.append(points[0])
        if len(points) < 2:
            continue
        polylines.append(
            KiPolyline(_normalize_all(points, origin), polyline.stroke_width, polyline.fill)
        )
    for path in ee_symbol.paths:
        points = parse_path(path.path_data)
        if len(points) < 2:
            logger.debug(f"Dropping path with {len(points)} point(s): {path.path_data!r}")
            continue
        polylines.append(KiPolyline(_normalize_all(points, origin), path.stroke_width, path.fill))

    return KiSymbol(
        name=name,
        reference=component.prefix,
        value=component.title,
        footprint=f"{LIBRARY_NAME}:{name}",
        datasheet=component.datasheet,
        manufacturer=component.manufacturer,
        lcsc_id=component.lcsc_id,
        jlc_id=component.jlc_id,
        pins=pins,
        rectangles=tuple(rectangles),
        circles=tuple(circles),
        arcs=arcs,
        polylines=tuple(polylines),
    )
