"""Build a KiCad footprint from a parsed EasyEDA footprint."""

from __future__ import annotations

from dataclasses import replace

from ..constants import (
    DEFAULT_LINE_WIDTH,
    FOOTPRINT_TEXT_OFFSET,
    FOOTPRINT_TEXT_SIZE,
    FOOTPRINT_TEXT_THICKNESS,
    POLYGON_PAD_OUTLINE_WIDTH,
)
from ..geometry import (
    arc_to_points,
    drill_for_hole,
    normalize_footprint_point,
    polygon_pad_geometry,
)
from ..layers import NPTH_LAYERS, map_layer, map_pad_layers_smd, map_pad_layers_tht
from ..logging_config import create_logger
from ..schema.common import BBoxOrigin
from ..schema.easyeda import (
    ComponentData,
    EeFootprint,
    EeFootprintArc,
    EeHole,
    EePad,
    EeText,
    EeVia,
)
from ..schema.kicad import (
    Drill,
    Ki3dModel,
    KiFootprint,
    KiFootprintArc,
    KiFootprintCircle,
    KiLine,
    KiPad,
    KiPadPolygon,
    KiText,
    PadShape,
    PadType,
)

logger = create_logger(__name__)


def build_pad(pad: EePad, origin: BBoxOrigin) -> KiPad:
    if pad.hole_radius is not None:
        pad_type = PadType.THROUGH_HOLE
        layers = map_pad_layers_tht(pad.layer_id)
        drill = drill_for_hole(pad.hole_radius, pad.hole_length, pad.width, pad.height)
    else:
        pad_type = PadType.SMD
        layers = map_pad_layers_smd(pad.layer_id)
        drill = None

    x, y = normalize_footprint_point(pad.x, pad.y, origin)
    geometry = polygon_pad_geometry(
        pad.shape, pad.points, pad.width, pad.height, pad.rotation, origin, (x, y)
    )
    polygon = None
    if geometry.polygon is not None:
        polygon = KiPadPolygon(points=geometry.polygon, width=POLYGON_PAD_OUTLINE_WIDTH)

    return KiPad(
        number=pad.number,
        pad_type=pad_type,
        shape=PadShape.from_easyeda(pad.shape),
        x=x,
        y=y,
        size_x=geometry.size_x,
        size_y=geometry.size_y,
        rotation=geometry.rotation,
        layers=layers,
        drill=drill,
        polygon=polygon,
    )


def build_hole(hole: EeHole, origin: BBoxOrigin) -> KiPad:
    """Unplated hole: a pad whose copper size equals the drill."""
    x, y = normalize_footprint_point(hole.x, hole.y, origin)
    diameter = hole.radius * 2
    return KiPad(
        number="",
        pad_type=PadType.NP_THROUGH_HOLE,
        shape=PadShape.CIRCLE,
        x=x,
        y=y,
        size_x=diameter,
        size_y=diameter,
        rotation=0.0,
        layers=NPTH_LAYERS,
        drill=Drill(diameter=diameter),
    )


def build_via(via: EeVia, origin: BBoxOrigin) -> KiPad:
    x, y = normalize_footprint_point(via.x, via.y, origin)
    return KiPad(
        number="",
        pad_type=PadType.THROUGH_HOLE,
        shape=PadShape.CIRCLE,
        x=x,
        y=y,
        size_x=via.diameter,
        size_y=via.diameter,
        rotation=0.0,
        layers=map_pad_layers_tht(11),
        drill=Drill(diameter=via.radius * 2),
    )


def build_arc(arc: EeFootprintArc, origin: BBoxOrigin) -> KiFootprintArc:
    pts = arc_to_points(arc.cx, arc.cy, arc.radius, arc.start_angle, arc.end_angle)
    return KiFootprintArc(
        start=normalize_footprint_point(*pts.start, origin),
        mid=normalize_footprint_point(*pts.mid, origin),
        end=normalize_footprint_point(*pts.end, origin),
        center=normalize_footprint_point(arc.cx, arc.cy, origin),
        angle=arc.end_angle - arc.start_angle,
        width=arc.stroke_width,
        layer=map_layer(arc.layer_id),
    )


def _text_kind(text: EeText) -> str:
    return {"P": "reference", "N": "value"}.get(text.kind, "user")


def build_text(text: EeText, origin: BBoxOrigin) -> KiText:
    x, y = normalize_footprint_point(text.x, text.y, origin)
    return KiText(
        kind=_text_kind(text),
        text=text.text,
        x=x,
        y=y,
        rotation=text.rotation,
        size=text.font_size or FOOTPRINT_TEXT_SIZE,
        thickness=text.stroke_width or FOOTPRINT_TEXT_THICKNESS,
        layer=map_layer(text.layer_id),
        hidden=not text.visible,
    )


def _default_texts(texts: list[KiText], name: str) -> list[KiText]:
    """Make sure the footprint carries exactly one reference and one value."""
    result: list[KiText] = []
    kinds_seen: set[str] = set()
    for text in texts:
        if text.kind in ("reference", "value"):
            if text.kind in kinds_seen:
                continue
            kinds_seen.add(text.kind)
            if text.kind == "reference":
                text = replace(text, text="REF**")
            else:
                text = replace(text, text=name)
        result.append(text)
    if "reference" not in kinds_seen:
        result.insert(
            0,
            KiText(
                kind="reference",
                text="REF**",
                x=0.0,
                y=-FOOTPRINT_TEXT_OFFSET,
                rotation=0.0,
                size=FOOTPRINT_TEXT_SIZE,
                thickness=FOOTPRINT_TEXT_THICKNESS,
                layer="F.SilkS",
            ),
        )
    if "value" not in kinds_seen:
        result.insert(
            1,
            KiText(
                kind="value",
                text=name,
                x=0.0,
                y=FOOTPRINT_TEXT_OFFSET,
                rotation=0.0,
                size=FOOTPRINT_TEXT_SIZE,
                thickness=FOOTPRINT_TEXT_THICKNESS,
                layer="F.Fab",
            ),
        )
    return result


def build_footprint(
    component: ComponentData,
    ee_footprint: EeFootprint,
    name: str,
    model_3d: Ki3dModel | None = None,
) -> KiFootprint:
    """Project a parsed footprint onto a KiFootprint.

    Args:
        component: Fetched component; supplies the package origin.
        ee_footprint: Parsed footprint primitives in local coordinates.
        name: Library record key and footprint file stem.
        model_3d: Optional 3D model reference to embed.
    """
    origin = component.package_bbox
    logger.debug(f"package origin = ({origin.x}, {origin.y})")

    pads = [build_pad(p, origin) for p in ee_footprint.pads]
    pads.extend(build_hole(h, origin) for h in ee_footprint.holes)
    pads.extend(build_via(v, origin) for v in ee_footprint.vias)

    lines: list[KiLine] = []
    for track in ee_footprint.tracks:
        layer = map_layer(track.layer_id)
        points = [normalize_footprint_point(x, y, origin) for x, y in track.points]
        for start, end in zip(points, points[1:]):
            lines.append(KiLine(start=start, end=end, width=track.width, layer=layer))
    for rect in ee_footprint.rectangles:
        layer = map_layer(rect.layer_id)
        width = rect.stroke_width or DEFAULT_LINE_WIDTH
        x1, y1 = normalize_footprint_point(rect.x, rect.y, origin)
        x2, y2 = x1 + rect.width, y1 + rect.height
        corners = [(x1, y1), (x2, y1), (x2, y2), (x1, y2), (x1, y1)]
        for start, end in zip(corners, corners[1:]):
            lines.append(KiLine(start=start, end=end, width=width, layer=layer))

    circles: list[KiFootprintCircle] = []
    for circle in ee_footprint.circles:
        cx, cy = normalize_footprint_point(circle.cx, circle.cy, origin)
        circles.append(
            KiFootprintCircle(
                center=(cx, cy),
                end=(cx + circle.radius, cy),
                width=circle.stroke_width,
                layer=map_layer(circle.layer_id),
                fill=circle.fill,
            )
        )

    arcs = tuple(build_arc(a, origin) for a in ee_footprint.arcs)
    texts = _default_texts([build_text(t, origin) for t in ee_footprint.texts], name)

    return KiFootprint(
        name=name,
        pads=tuple(pads),
        lines=tuple(lines),
        circles=tuple(circles),
        arcs=arcs,
        texts=tuple(texts),
        model_3d=model_3d,
        lcsc_id=component.lcsc_id,
    )
