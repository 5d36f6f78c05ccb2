"""Coordinate transforms between the EasyEDA and KiCad geometry conventions.

Pure functions only. The symbol and footprint domains follow different
rules and must not be unified:

- Symbol shapes flip the vertical axis: ``(x - ox, oy - y)``.
- Symbol pins flip and then negate y again: ``(x - ox, y - oy)``.
- Footprint primitives never flip: ``(x - ox, y - oy)``.
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from dataclasses import dataclass

from .constants import POLYGON_PAD_PLACEHOLDER_SIZE
from .schema.common import BBoxOrigin, Point
from .schema.kicad import Drill

# ── Normalization ───────────────────────────────────────────────────


def normalize_symbol_point(x: float, y: float, origin: BBoxOrigin) -> Point:
    """Re-express a symbol shape coordinate against the symbol origin."""
    return x - origin.x, origin.y - y


def denormalize_symbol_point(x: float, y: float, origin: BBoxOrigin) -> Point:
    """Inverse of :func:`normalize_symbol_point`."""
    return x + origin.x, origin.y - y


def normalize_pin_point(x: float, y: float, origin: BBoxOrigin) -> Point:
    """Re-express a pin position; pins negate y after the symbol flip."""
    nx, ny = normalize_symbol_point(x, y, origin)
    return nx, -ny


def normalize_footprint_point(x: float, y: float, origin: BBoxOrigin) -> Point:
    """Re-express a footprint coordinate against the package origin."""
    return x - origin.x, y - origin.y


# ── Arcs ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ArcPoints:
    start: Point
    mid: Point
    end: Point


def arc_to_points(
    cx: float, cy: float, radius: float, start_angle: float, end_angle: float
) -> ArcPoints:
    """Convert a center/angle arc into start, mid and end points.

    The midpoint sits at the arithmetic mean of the two angles, which is
    only the true arc midpoint when the sweep is at most 180 degrees and
    the angles are not wrapped.
    """
    ts = math.radians(start_angle)
    te = math.radians(end_angle)
    tm = (ts + te) / 2
    return ArcPoints(
        start=(cx + radius * math.cos(ts), cy + radius * math.sin(ts)),
        mid=(cx + radius * math.cos(tm), cy + radius * math.sin(tm)),
        end=(cx + radius * math.cos(te), cy + radius * math.sin(te)),
    )


@dataclass(frozen=True)
class ArcParams:
    cx: float
    cy: float
    radius: float
    start_angle: float
    end_angle: float


_RE_SVG_TOKEN = re.compile(r"[MmAa]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def _vector_angle(ux: float, uy: float, vx: float, vy: float) -> float:
    return math.atan2(ux * vy - uy * vx, ux * vx + uy * vy)


def svg_arc_to_center(path: str) -> ArcParams | None:
    """Convert ``M x1 y1 A rx ry rot large sweep x2 y2`` to center form.

    Follows the SVG endpoint-to-center parameterization. The end angle is
    ``start + sweep`` without wrapping, so the mean-angle midpoint of
    :func:`arc_to_points` lands on the arc. Returns None for degenerate or
    unparsable paths.
    """
    tokens = _RE_SVG_TOKEN.findall(path)
    try:
        m_idx = next(i for i, t in enumerate(tokens) if t in ("M", "m"))
        a_idx = next(i for i, t in enumerate(tokens) if t in ("A", "a"))
        x1, y1 = float(tokens[m_idx + 1]), float(tokens[m_idx + 2])
        rx, ry, phi_deg, large, sweep, x2, y2 = (float(t) for t in tokens[a_idx + 1 : a_idx + 8])
    except (StopIteration, IndexError, ValueError):
        return None
    if tokens[a_idx] == "a":
        x2 += x1
        y2 += y1

    rx, ry = abs(rx), abs(ry)
    if rx == 0 or ry == 0 or (x1 == x2 and y1 == y2):
        return None

    phi = math.radians(phi_deg)
    cos_phi, sin_phi = math.cos(phi), math.sin(phi)
    dx2, dy2 = (x1 - x2) / 2, (y1 - y2) / 2
    x1p = cos_phi * dx2 + sin_phi * dy2
    y1p = -sin_phi * dx2 + cos_phi * dy2

    lam = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
    if lam > 1:
        scale = math.sqrt(lam)
        rx *= scale
        ry *= scale

    num = rx * rx * ry * ry - rx * rx * y1p * y1p - ry * ry * x1p * x1p
    den = rx * rx * y1p * y1p + ry * ry * x1p * x1p
    coef = math.sqrt(max(0.0, num / den)) if den else 0.0
    if bool(large) == bool(sweep):
        coef = -coef
    cxp = coef * rx * y1p / ry
    cyp = -coef * ry * x1p / rx

    cx = cos_phi * cxp - sin_phi * cyp + (x1 + x2) / 2
    cy = sin_phi * cxp + cos_phi * cyp + (y1 + y2) / 2

    ux, uy = (x1p - cxp) / rx, (y1p - cyp) / ry
    vx, vy = (-x1p - cxp) / rx, (-y1p - cyp) / ry
    theta1 = _vector_angle(1.0, 0.0, ux, uy)
    dtheta = _vector_angle(ux, uy, vx, vy)
    if not sweep and dtheta > 0:
        dtheta -= 2 * math.pi
    elif sweep and dtheta < 0:
        dtheta += 2 * math.pi

    return ArcParams(
        cx=cx,
        cy=cy,
        radius=(rx + ry) / 2,
        start_angle=math.degrees(theta1),
        end_angle=math.degrees(theta1 + dtheta),
    )


# ── Path mini-language ──────────────────────────────────────────────


def _parse_float(token: str) -> float | None:
    try:
        return float(token)
    except ValueError:
        return None


def parse_path(path_data: str) -> list[Point]:
    """Interpret an ``M``/``L``/``Z`` path into raw points.

    A coordinate after ``M`` or ``L`` is either one ``"x,y"`` token or two
    numeric tokens. Unparsable coordinates are skipped, ``Z`` closes the
    loop by repeating the first point, and any other token is ignored.
    """
    tokens = path_data.split()
    points: list[Point] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token in ("M", "L"):
            if i + 1 < len(tokens):
                i += 1
                coord = tokens[i]
                if "," in coord:
                    xs, ys = coord.split(",", 1)
                    x, y = _parse_float(xs), _parse_float(ys)
                    if x is not None and y is not None:
                        points.append((x, y))
                elif i + 1 < len(tokens):
                    x, y = _parse_float(tokens[i]), _parse_float(tokens[i + 1])
                    if x is not None and y is not None:
                        points.append((x, y))
                        i += 1
        elif token in ("Z", "z"):
            if points:
                points.append(points[0])
        i += 1
    return points


# ── Pads ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PadGeometry:
    size_x: float
    size_y: float
    rotation: float
    polygon: tuple[Point, ...] | None = None


def polygon_pad_geometry(
    shape: str,
    coords: Sequence[float],
    width: float,
    height: float,
    rotation: float,
    origin: BBoxOrigin,
    pad_position: Point,
) -> PadGeometry:
    """Resolve copper size, rotation and optional outline for a pad.

    A POLYGON pad with at least two coordinate pairs carries its true
    outline as a polygon relative to the pad's normalized position; the
    nominal copper shrinks to a placeholder and rotation is dropped.
    Anything else keeps its declared size and rotation.
    """
    if shape.strip().upper() == "POLYGON" and len(coords) >= 4:
        px, py = pad_position
        vertices = tuple(
            (
                round(coords[i] - origin.x - px, 2),
                round(coords[i + 1] - origin.y - py, 2),
            )
            for i in range(0, len(coords) - 1, 2)
        )
        return PadGeometry(
            size_x=POLYGON_PAD_PLACEHOLDER_SIZE,
            size_y=POLYGON_PAD_PLACEHOLDER_SIZE,
            rotation=0.0,
            polygon=vertices,
        )
    return PadGeometry(size_x=width, size_y=height, rotation=rotation)


def drill_for_hole(
    hole_radius: float,
    hole_length: float | None,
    pad_width: float,
    pad_height: float,
) -> Drill:
    """Pick the drill for a plated hole, guessing slot orientation.

    Whichever pad dimension leaves more copper around the longest hole
    dimension is taken as the slot axis. This is a heuristic, not a
    geometric proof.
    """
    diameter = hole_radius * 2
    if not hole_length:
        return Drill(diameter=diameter)
    max_dim = max(diameter, hole_length)
    vertical = (pad_height - max_dim) > (pad_width - max_dim)
    if vertical:
        return Drill(diameter=diameter, width=hole_length)
    return Drill(diameter=hole_length, width=diameter)
