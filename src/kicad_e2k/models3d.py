"""3D model transcoding.

EasyEDA serves meshes as Wavefront OBJ with inline ``newmtl`` blocks;
KiCad renders VRML. ``obj_to_wrl`` writes one VRML ``Shape`` per material
and scales vertices from mm to the 0.1 inch unit KiCad expects in WRL
files. STEP files are passed through unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .exceptions import ModelTranscodeError
from .sexp import format_number

MM_PER_WRL_UNIT = 2.54

_DEFAULT_COLOR = (0.8, 0.8, 0.8)


@dataclass
class _Material:
    name: str
    diffuse: tuple[float, float, float] = _DEFAULT_COLOR
    specular: tuple[float, float, float] = (0.0, 0.0, 0.0)
    transparency: float = 0.0


@dataclass
class _MeshGroup:
    material: str
    faces: list[list[int]] = field(default_factory=list)


def _rgb(values: list[str]) -> tuple[float, float, float]:
    r, g, b = (float(v) for v in values[:3])
    return r, g, b


def _parse_obj(text: str) -> tuple[list[tuple[float, float, float]], dict[str, _Material], list[_MeshGroup]]:
    vertices: list[tuple[float, float, float]] = []
    materials: dict[str, _Material] = {}
    groups: list[_MeshGroup] = []
    current_material: _Material | None = None
    current_group: _MeshGroup | None = None

    for lineno, raw in enumerate(text.splitlines(), start=1):
        parts = raw.split()
        if not parts or parts[0].startswith("#"):
            continue
        keyword, args = parts[0], parts[1:]
        try:
            if keyword == "newmtl":
                current_material = _Material(name=" ".join(args))
                materials[current_material.name] = current_material
            elif keyword == "Kd" and current_material is not None:
                current_material.diffuse = _rgb(args)
            elif keyword == "Ks" and current_material is not None:
                current_material.specular = _rgb(args)
            elif keyword == "d" and current_material is not None:
                current_material.transparency = 1.0 - float(args[0])
            elif keyword == "v":
                x, y, z = (float(v) for v in args[:3])
                vertices.append((x, y, z))
            elif keyword == "usemtl":
                current_group = _MeshGroup(material=" ".join(args))
                groups.append(current_group)
            elif keyword == "f":
                if current_group is None:
                    current_group = _MeshGroup(material="")
                    groups.append(current_group)
                face = []
                for ref in args:
                    idx = int(ref.split("/")[0])
                    face.append(idx - 1 if idx > 0 else len(vertices) + idx)
                current_group.faces.append(face)
        except (ValueError, IndexError) as e:
            raise ModelTranscodeError(
                f"Malformed OBJ line {lineno}: {raw.strip()!r}", model_format="obj"
            ) from e
    return vertices, materials, groups


def _wrl_shape(
    group: _MeshGroup,
    material: _Material,
    vertices: list[tuple[float, float, float]],
) -> str:
    # Re-index so every shape only carries the vertices it uses
    remap: dict[int, int] = {}
    points: list[str] = []
    indices: list[str] = []
    for face in group.faces:
        for idx in face:
            if not 0 <= idx < len(vertices):
                raise ModelTranscodeError(
                    f"Face references missing vertex {idx + 1}", model_format="obj"
                )
            if idx not in remap:
                remap[idx] = len(remap)
                points.append(
                    " ".join(format_number(c / MM_PER_WRL_UNIT, 6) for c in vertices[idx])
                )
            indices.append(str(remap[idx]))
        indices.append("-1")

    diffuse = " ".join(format_number(c) for c in material.diffuse)
    specular = " ".join(format_number(c) for c in material.specular)
    return (
        "Shape {\n"
        "  appearance Appearance {\n"
        "    material Material {\n"
        f"      diffuseColor {diffuse}\n"
        f"      specularColor {specular}\n"
        f"      transparency {format_number(material.transparency)}\n"
        "    }\n"
        "  }\n"
        "  geometry IndexedFaceSet {\n"
        "    coord Coordinate {\n"
        f"      point [{', '.join(points)}]\n"
        "    }\n"
        f"    coordIndex [{', '.join(indices)}]\n"
        "  }\n"
        "}\n"
    )


def obj_to_wrl(data: bytes) -> bytes:
    """Transcode an EasyEDA OBJ mesh to VRML 2.0.

    Raises:
        ModelTranscodeError: If the input is not a usable OBJ mesh.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ModelTranscodeError("OBJ data is not valid UTF-8", model_format="obj") from e

    vertices, materials, groups = _parse_obj(text)
    groups = [g for g in groups if g.faces]
    if not vertices or not groups:
        raise ModelTranscodeError("OBJ data holds no faces", model_format="obj")

    out = ["#VRML V2.0 utf8\n"]
    for group in groups:
        material = materials.get(group.material) or _Material(name=group.material)
        out.append(_wrl_shape(group, material, vertices))
    return "".join(out).encode("utf-8")


def export_step(data: bytes) -> bytes:
    """Validate STEP bytes for writing; the payload is not modified.

    Raises:
        ModelTranscodeError: If there is nothing to write.
    """
    if not data:
        raise ModelTranscodeError("STEP data is empty", model_format="step")
    return data
