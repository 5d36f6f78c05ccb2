"""Serializers for KiCad symbol and footprint libraries."""

from .footprint import footprint_to_sexp, render_footprint
from .symbol import (
    LEGACY_FOOTER,
    LEGACY_HEADER,
    empty_symbol_library,
    pin_orientation,
    render_symbol,
    symbol_to_legacy,
    symbol_to_sexp,
)

__all__ = [
    "LEGACY_FOOTER",
    "LEGACY_HEADER",
    "empty_symbol_library",
    "footprint_to_sexp",
    "pin_orientation",
    "render_footprint",
    "render_symbol",
    "symbol_to_legacy",
    "symbol_to_sexp",
]
