"""Convert EasyEDA/LCSC components into KiCad symbol, footprint and 3D libraries."""

__version__ = "0.1.0"
