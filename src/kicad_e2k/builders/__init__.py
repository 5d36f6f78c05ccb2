"""Builders mapping the EasyEDA geometry model onto KiCad entities."""

from .footprint import build_footprint
from .model3d import build_3d_model_ref, model_path
from .symbol import build_symbol

__all__ = ["build_3d_model_ref", "build_footprint", "build_symbol", "model_path"]
