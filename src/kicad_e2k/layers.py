"""EasyEDA layer ids → KiCad layer names.

The tables are closed: any id not listed falls back explicitly, graphics to
the front silkscreen and pads to the all-copper set.
"""

from __future__ import annotations

FALLBACK_LAYER = "F.SilkS"

# Graphic primitives (tracks, circles, arcs, rectangles, texts)
_LAYER_NAMES: dict[int, str] = {
    1: "F.Cu",  # TopLayer
    2: "B.Cu",  # BottomLayer
    3: "F.SilkS",  # TopSilkLayer
    4: "B.SilkS",  # BottomSilkLayer
    5: "F.Paste",  # TopPasteMaskLayer
    6: "B.Paste",  # BottomPasteMaskLayer
    7: "F.Mask",  # TopSolderMaskLayer
    8: "B.Mask",  # BottomSolderMaskLayer
    10: "Edge.Cuts",  # BoardOutLine
    12: "Cmts.User",  # Document
    13: "F.Fab",  # TopAssembly
    14: "B.Fab",  # BottomAssembly
    15: "Dwgs.User",  # Mechanical
    99: "F.CrtYd",  # ComponentShapeLayer
    100: "F.Fab",  # LeadShapeLayer
    101: "F.Fab",  # ComponentMarkingLayer
}

_SMD_PAD_LAYERS: dict[int, tuple[str, ...]] = {
    1: ("F.Cu", "F.Paste", "F.Mask"),
    2: ("B.Cu", "B.Paste", "B.Mask"),
    11: ("*.Cu", "*.Paste", "*.Mask"),
}
_SMD_FALLBACK = ("F.Cu", "F.Paste", "F.Mask")

_THT_PAD_LAYERS: dict[int, tuple[str, ...]] = {
    1: ("F.Cu", "F.Mask"),
    2: ("B.Cu", "B.Mask"),
}
_THT_FALLBACK = ("*.Cu", "*.Mask")

NPTH_LAYERS: tuple[str, ...] = ("*.Cu", "*.Mask")


def map_layer(layer_id: int) -> str:
    """KiCad layer for a graphic primitive on EasyEDA layer ``layer_id``."""
    return _LAYER_NAMES.get(layer_id, FALLBACK_LAYER)


def map_pad_layers_smd(layer_id: int) -> tuple[str, ...]:
    """Copper, paste and mask layers for a surface-mount pad."""
    return _SMD_PAD_LAYERS.get(layer_id, _SMD_FALLBACK)


def map_pad_layers_tht(layer_id: int) -> tuple[str, ...]:
    """Copper and mask layers for a plated through-hole pad."""
    return _THT_PAD_LAYERS.get(layer_id, _THT_FALLBACK)
