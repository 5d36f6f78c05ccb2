"""Parse EasyEDA shape strings into the intermediate geometry model.

EasyEDA encodes every primitive as one ``~``-separated string whose first
field names the primitive (``P``, ``R``, ``PAD``, ``TRACK`` ...). Pins add
``^^``-separated segments for the dot, path, name and number.

- Coordinates and lengths are converted from EasyEDA units (10 mil) to mm
- Unknown primitives are skipped
- Malformed primitives are skipped with a debug log; the rest still parse
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Sequence
from typing import Any

from ..constants import EE_UNIT_MM
from ..exceptions import ParseError
from ..geometry import svg_arc_to_center
from ..logging_config import create_logger
from ..schema.common import Point
from ..schema.easyeda import (
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

logger = create_logger(__name__)

_RE_NUMBER = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_TRUE_FLAGS = frozenset({"1", "show", "true", "y", "yes"})
_NO_FILL = frozenset({"", "none", "transparent"})


# ── Field helpers ───────────────────────────────────────────────────


def _mm(value: str | float) -> float:
    return float(value) * EE_UNIT_MM


def _float(fields: Sequence[str], idx: int, default: float = 0.0) -> float:
    """Numeric field; missing or empty fields yield ``default``."""
    if idx >= len(fields) or not fields[idx].strip():
        return default
    return float(fields[idx])


def _field(fields: Sequence[str], idx: int, default: str = "") -> str:
    return fields[idx] if idx < len(fields) else default


def _flag(value: str) -> bool:
    return value.strip().lower() in _TRUE_FLAGS


def _filled(color: str) -> bool:
    return color.strip().lower() not in _NO_FILL


def _numbers(text: str) -> list[float]:
    return [float(n) for n in _RE_NUMBER.findall(text)]


def _point_list(text: str) -> tuple[Point, ...]:
    """``"x1 y1 x2 y2 ..."`` (spaces or commas) to mm points."""
    nums = _numbers(text)
    return tuple((_mm(nums[i]), _mm(nums[i + 1])) for i in range(0, len(nums) - 1, 2))


def _scale_path(path: str) -> str:
    """Rewrite every coordinate of a path string from EasyEDA units to mm."""
    return _RE_NUMBER.sub(lambda m: repr(round(float(m.group()) * EE_UNIT_MM, 6)), path)


def _shape_strings(shapes: Any, artifact: str) -> list[str]:
    if not isinstance(shapes, (list, tuple)):
        raise ParseError(
            f"Expected a list of {artifact} shapes, got {type(shapes).__name__}",
            artifact=artifact,
        )
    return [s for s in shapes if isinstance(s, str) and s]


def _dispatch(
    fields: list[str],
    handlers: dict[str, Callable[[list[str]], None]],
    artifact: str,
) -> None:
    kind = fields[0]
    handler = handlers.get(kind)
    if handler is None:
        logger.debug(f"Skipping unsupported {artifact} shape {kind!r}")
        return
    try:
        handler(fields)
    except (ValueError, IndexError, TypeError, ZeroDivisionError) as e:
        logger.debug(f"Skipping malformed {artifact} shape {kind!r}: {e}")


# ── Symbol ──────────────────────────────────────────────────────────


def _pin_length(path: str) -> float:
    """Pin length from the pin path, e.g. ``M 360 290 h -10`` -> 10."""
    match = re.search(r"[hHvV]\s*([-+]?(?:\d+\.?\d*|\.\d+))", path)
    if match is None:
        return 0.0
    return abs(float(match.group(1)))


def parse_pin(shape: str) -> EePin:
    """Parse one ``P~...`` pin including its ``^^`` segments."""
    segments = shape.split("^^")
    settings = segments[0].split("~")
    path = segments[2].split("~")[0] if len(segments) > 2 else ""
    name_seg = segments[3].split("~") if len(segments) > 3 else []
    number_seg = segments[4].split("~") if len(segments) > 4 else []
    dot_seg = segments[5].split("~") if len(segments) > 5 else []
    clock_seg = segments[6].split("~") if len(segments) > 6 else []

    number = _field(number_seg, 4) or _field(settings, 3)
    return EePin(
        number=number.strip(),
        name=_field(name_seg, 4).strip(),
        electric_type=_field(settings, 2, "0"),
        x=_mm(_float(settings, 4)),
        y=_mm(_float(settings, 5)),
        rotation=_float(settings, 6),
        length=_mm(_pin_length(path)),
        dot=bool(dot_seg) and _flag(dot_seg[0]),
        clock=bool(clock_seg) and _flag(clock_seg[0]),
    )


def parse_symbol(shapes: Any) -> EeSymbol:
    """Parse the shape list of a symbol.

    Raises:
        ParseError: If ``shapes`` is not a list.
    """
    symbol = EeSymbol()
    strings = _shape_strings(shapes, "symbol")

    def rect(f: list[str]) -> None:
        symbol.rectangles.append(
            EeRectangle(
                x=_mm(f[1]),
                y=_mm(f[2]),
                width=_mm(f[5]),
                height=_mm(f[6]),
                stroke_width=_mm(_float(f, 8)),
                fill=_filled(_field(f, 10)),
            )
        )

    def circle(f: list[str]) -> None:
        symbol.circles.append(
            EeCircle(
                cx=_mm(f[1]),
                cy=_mm(f[2]),
                radius=_mm(f[3]),
                stroke_width=_mm(_float(f, 5)),
                fill=_filled(_field(f, 7)),
            )
        )

    def ellipse(f: list[str]) -> None:
        symbol.ellipses.append(
            EeEllipse(
                cx=_mm(f[1]),
                cy=_mm(f[2]),
                rx=_mm(f[3]),
                ry=_mm(f[4]),
                stroke_width=_mm(_float(f, 6)),
                fill=_filled(_field(f, 8)),
            )
        )

    def arc(f: list[str]) -> None:
        params = svg_arc_to_center(f[1])
        if params is None:
            raise ValueError(f"unusable arc path {f[1]!r}")
        symbol.arcs.append(
            EeArc(
                cx=_mm(params.cx),
                cy=_mm(params.cy),
                radius=_mm(params.radius),
                start_angle=params.start_angle,
                end_angle=params.end_angle,
                stroke_width=_mm(_float(f, 4)),
            )
        )

    def polyline(f: list[str], closed: bool = False) -> None:
        symbol.polylines.append(
            EePolyline(
                points=_point_list(f[1]),
                stroke_width=_mm(_float(f, 3)),
                fill=_filled(_field(f, 5)),
                closed=closed,
            )
        )

    def path(f: list[str]) -> None:
        symbol.paths.append(
            EePath(
                path_data=_scale_path(f[1]),
                stroke_width=_mm(_float(f, 3)),
                fill=_filled(_field(f, 5)),
            )
        )

    handlers: dict[str, Callable[[list[str]], None]] = {
        "R": rect,
        "C": circle,
        "E": ellipse,
        "A": arc,
        "PL": polyline,
        "PG": lambda f: polyline(f, closed=True),
        "PT": path,
    }

    for shape in strings:
        if shape.startswith("P~"):
            try:
                symbol.pins.append(parse_pin(shape))
            except (ValueError, IndexError) as e:
                logger.debug(f"Skipping malformed symbol shape 'P': {e}")
            continue
        _dispatch(shape.split("~"), handlers, "symbol")
    return symbol


# ── Footprint ───────────────────────────────────────────────────────


def parse_footprint(shapes: Any) -> EeFootprint:
    """Parse the shape list of a footprint.

    Raises:
        ParseError: If ``shapes`` is not a list.
    """
    footprint = EeFootprint()

    def pad(f: list[str]) -> None:
        hole_radius = _mm(_float(f, 9))
        hole_length = _mm(_float(f, 13))
        footprint.pads.append(
            EePad(
                number=_field(f, 8).strip(),
                shape=f[1],
                x=_mm(f[2]),
                y=_mm(f[3]),
                width=_mm(f[4]),
                height=_mm(f[5]),
                rotation=_float(f, 11),
                layer_id=int(float(f[6])),
                hole_radius=hole_radius or None,
                hole_length=hole_length or None,
                points=tuple(_mm(n) for n in _numbers(_field(f, 10))),
            )
        )

    def track(f: list[str]) -> None:
        footprint.tracks.append(
            EeTrack(width=_mm(f[1]), layer_id=int(float(f[2])), points=_point_list(f[4]))
        )

    def circle(f: list[str]) -> None:
        footprint.circles.append(
            EeFootprintCircle(
                cx=_mm(f[1]),
                cy=_mm(f[2]),
                radius=_mm(f[3]),
                stroke_width=_mm(f[4]),
                layer_id=int(float(f[5])),
            )
        )

    def arc(f: list[str]) -> None:
        params = svg_arc_to_center(f[4])
        if params is None:
            raise ValueError(f"unusable arc path {f[4]!r}")
        footprint.arcs.append(
            EeFootprintArc(
                cx=_mm(params.cx),
                cy=_mm(params.cy),
                radius=_mm(params.radius),
                start_angle=params.start_angle,
                end_angle=params.end_angle,
                stroke_width=_mm(f[1]),
                layer_id=int(float(f[2])),
            )
        )

    def rect(f: list[str]) -> None:
        footprint.rectangles.append(
            EeFootprintRectangle(
                x=_mm(f[1]),
                y=_mm(f[2]),
                width=_mm(f[3]),
                height=_mm(f[4]),
                stroke_width=_mm(_float(f, 5)),
                layer_id=int(float(f[7])),
            )
        )

    def text(f: list[str]) -> None:
        footprint.texts.append(
            EeText(
                kind=f[1],
                text=f[10],
                x=_mm(f[2]),
                y=_mm(f[3]),
                rotation=_float(f, 5),
                font_size=_mm(_float(f, 9)),
                stroke_width=_mm(_float(f, 4)),
                layer_id=int(float(f[7])),
                visible=_field(f, 12).strip().lower() not in ("none", "0"),
            )
        )

    def hole(f: list[str]) -> None:
        footprint.holes.append(EeHole(x=_mm(f[1]), y=_mm(f[2]), radius=_mm(f[3])))

    def via(f: list[str]) -> None:
        footprint.vias.append(
            EeVia(x=_mm(f[1]), y=_mm(f[2]), diameter=_mm(f[3]), radius=_mm(f[5]))
        )

    handlers: dict[str, Callable[[list[str]], None]] = {
        "PAD": pad,
        "TRACK": track,
        "CIRCLE": circle,
        "ARC": arc,
        "RECT": rect,
        "TEXT": text,
        "HOLE": hole,
        "VIA": via,
    }
    for shape in _shape_strings(shapes, "footprint"):
        _dispatch(shape.split("~"), handlers, "footprint")
    return footprint


def find_3d_model(shapes: Any) -> Ee3dModelInfo | None:
    """Locate the 3D model reference in a footprint's ``SVGNODE`` shape."""
    if not isinstance(shapes, (list, tuple)):
        return None
    for shape in shapes:
        if not isinstance(shape, str) or not shape.startswith("SVGNODE~"):
            continue
        try:
            attrs = json.loads(shape.split("~", 1)[1]).get("attrs", {})
        except (ValueError, AttributeError) as e:
            logger.debug(f"Skipping malformed SVGNODE: {e}")
            continue
        uuid = attrs.get("uuid")
        if uuid:
            return Ee3dModelInfo(uuid=str(uuid), title=str(attrs.get("title") or uuid))
    return None
