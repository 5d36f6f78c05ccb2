"""Tests for EasyEDA → KiCad layer mapping."""

from __future__ import annotations

import pytest

from kicad_e2k.layers import (
    FALLBACK_LAYER,
    NPTH_LAYERS,
    map_layer,
    map_pad_layers_smd,
    map_pad_layers_tht,
)


class TestMapLayer:
    @pytest.mark.parametrize(
        ("layer_id", "expected"),
        [
            (1, "F.Cu"),
            (2, "B.Cu"),
            (3, "F.SilkS"),
            (4, "B.SilkS"),
            (10, "Edge.Cuts"),
            (12, "Cmts.User"),
            (13, "F.Fab"),
            (99, "F.CrtYd"),
        ],
    )
    def test_known_layers(self, layer_id: int, expected: str) -> None:
        assert map_layer(layer_id) == expected

    def test_unknown_falls_back_to_silkscreen(self) -> None:
        assert map_layer(42) == FALLBACK_LAYER == "F.SilkS"


class TestPadLayers:
    def test_smd_top(self) -> None:
        assert map_pad_layers_smd(1) == ("F.Cu", "F.Paste", "F.Mask")

    def test_smd_bottom(self) -> None:
        assert map_pad_layers_smd(2) == ("B.Cu", "B.Paste", "B.Mask")

    def test_smd_multilayer(self) -> None:
        assert map_pad_layers_smd(11) == ("*.Cu", "*.Paste", "*.Mask")

    def test_smd_unknown(self) -> None:
        assert map_pad_layers_smd(77) == ("F.Cu", "F.Paste", "F.Mask")

    def test_tht_unknown_is_all_copper(self) -> None:
        assert map_pad_layers_tht(11) == ("*.Cu", "*.Mask")
        assert map_pad_layers_tht(1) == ("F.Cu", "F.Mask")

    def test_npth(self) -> None:
        assert NPTH_LAYERS == ("*.Cu", "*.Mask")
