"""EasyEDA data source: HTTP client and shape parsers."""

from .api import ComponentSource, EasyedaApi, component_from_response
from .parser import find_3d_model, parse_footprint, parse_pin, parse_symbol

__all__ = [
    "ComponentSource",
    "EasyedaApi",
    "component_from_response",
    "find_3d_model",
    "parse_footprint",
    "parse_pin",
    "parse_symbol",
]
