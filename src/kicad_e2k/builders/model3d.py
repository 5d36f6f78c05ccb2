"""Build the 3D model reference embedded in a footprint."""

from __future__ import annotations

from ..config import KicadVersion
from ..constants import LIBRARY_NAME
from ..schema.easyeda import Ee3dModelInfo
from ..schema.kicad import Ki3dModel
from ..validation import sanitize_name

_GLOBAL_MODEL_VARS: dict[KicadVersion, str] = {
    KicadVersion.V5: "KISYS3DMOD",
    KicadVersion.V6: "KICAD6_3DMODEL_DIR",
}


def model_path(model_name: str, version: KicadVersion, project_relative: bool) -> str:
    """Path of the WRL file as KiCad should resolve it."""
    var = "KIPRJMOD" if project_relative else _GLOBAL_MODEL_VARS[version]
    return f"${{{var}}}/{LIBRARY_NAME}.3dshapes/{model_name}.wrl"


def build_3d_model_ref(
    info: Ee3dModelInfo, version: KicadVersion, project_relative: bool
) -> Ki3dModel:
    return Ki3dModel(path=model_path(sanitize_name(info.title), version, project_relative))
