"""Render KiCad footprints.

V6 writes ``(footprint ...)`` with three-point arcs; V5 writes
``(module ...)`` with center/start/angle arcs and no fill flags.
"""

from __future__ import annotations

from ..config import KicadVersion
from ..constants import FOOTPRINT_VERSION, GENERATOR
from ..exceptions import SerializeError
from ..schema.kicad import (
    Ki3dModel,
    KiFootprint,
    KiFootprintArc,
    KiFootprintCircle,
    KiLine,
    KiPad,
    KiText,
    PadShape,
    PadType,
)
from ..sexp import SExp, atom, node, string


def _at(x: float, y: float, rotation: float) -> SExp:
    if rotation:
        return node("at", x, y, rotation)
    return node("at", x, y)


def _text(text: KiText) -> SExp:
    effects = node(
        "effects",
        node("font", node("size", text.size, text.size), node("thickness", text.thickness)),
    )
    items: list[SExp] = [
        atom(text.kind),
        string(text.text),
        _at(text.x, text.y, text.rotation),
        node("layer", string(text.layer)),
    ]
    if text.hidden:
        items.append(atom("hide"))
    items.append(effects)
    return node("fp_text", *items)


def _line(line: KiLine) -> SExp:
    return node(
        "fp_line",
        node("start", *line.start),
        node("end", *line.end),
        node("layer", string(line.layer)),
        node("width", line.width),
    )


def _circle(circle: KiFootprintCircle, version: KicadVersion) -> SExp:
    items: list[SExp] = [
        node("center", *circle.center),
        node("end", *circle.end),
        node("layer", string(circle.layer)),
        node("width", circle.width),
    ]
    if version is KicadVersion.V6:
        items.append(node("fill", "solid" if circle.fill else "none"))
    return node("fp_circle", *items)


def _arc(arc: KiFootprintArc, version: KicadVersion) -> SExp:
    if version is KicadVersion.V5:
        return node(
            "fp_arc",
            node("start", *arc.center),
            node("end", *arc.start),
            node("angle", arc.angle),
            node("layer", string(arc.layer)),
            node("width", arc.width),
        )
    return node(
        "fp_arc",
        node("start", *arc.start),
        node("mid", *arc.mid),
        node("end", *arc.end),
        node("layer", string(arc.layer)),
        node("width", arc.width),
    )


def _pad(pad: KiPad) -> SExp:
    items: list[SExp] = [
        string(pad.number),
        atom(pad.pad_type.value),
        atom(pad.shape.value),
        _at(pad.x, pad.y, pad.rotation),
        node("size", pad.size_x, pad.size_y),
    ]
    if pad.drill is not None and pad.pad_type is not PadType.SMD:
        if pad.drill.is_oval:
            items.append(node("drill", "oval", pad.drill.diameter, pad.drill.width or 0.0))
        else:
            items.append(node("drill", pad.drill.diameter))
    items.append(node("layers", *(string(layer) for layer in pad.layers)))
    if pad.shape is PadShape.CUSTOM:
        items.append(node("options", node("clearance", "outline"), node("anchor", "rect")))
        if pad.polygon is not None and pad.polygon.points:
            items.append(
                node(
                    "primitives",
                    node(
                        "gr_poly",
                        node("pts", *(node("xy", x, y) for x, y in pad.polygon.points)),
                        node("width", pad.polygon.width),
                    ),
                )
            )
    return node("pad", *items)


def _model(model: Ki3dModel, version: KicadVersion) -> SExp:
    placement = "offset" if version is KicadVersion.V6 else "at"
    return node(
        "model",
        string(model.path),
        node(placement, node("xyz", *model.offset)),
        node("scale", node("xyz", *model.scale)),
        node("rotate", node("xyz", *model.rotate)),
    )


def footprint_to_sexp(footprint: KiFootprint, version: KicadVersion) -> SExp:
    """Build the footprint tree in the requested dialect."""
    if version is KicadVersion.V5:
        root = node("module", string(footprint.name), node("layer", "F.Cu"), node("tedit", 0))
    else:
        root = node(
            "footprint",
            string(footprint.name),
            node("version", FOOTPRINT_VERSION),
            node("generator", GENERATOR),
            node("layer", string("F.Cu")),
        )
    if footprint.lcsc_id:
        root.children.append(node("descr", string(f"LCSC {footprint.lcsc_id}")))
    if footprint.attribute == "smd":
        root.children.append(node("attr", "smd"))
    elif version is KicadVersion.V6:
        root.children.append(node("attr", "through_hole"))

    root.children.extend(_text(t) for t in footprint.texts)
    root.children.extend(_line(line) for line in footprint.lines)
    root.children.extend(_circle(c, version) for c in footprint.circles)
    root.children.extend(_arc(a, version) for a in footprint.arcs)
    root.children.extend(_pad(p) for p in footprint.pads)
    if footprint.model_3d is not None:
        root.children.append(_model(footprint.model_3d, version))
    return root


def render_footprint(footprint: KiFootprint, version: KicadVersion) -> str:
    """Render a complete ``.kicad_mod`` file.

    Raises:
        SerializeError: If the footprint holds values no dialect can express.
    """
    try:
        return footprint_to_sexp(footprint, version).to_string() + "\n"
    except (ValueError, OverflowError) as e:
        raise SerializeError(f"Cannot render footprint {footprint.name!r}: {e}") from e
