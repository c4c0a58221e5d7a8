# src/vpfootprint/contracts/scene.py
from __future__ import annotations

from typing import Any, Literal, Mapping, Tuple, Union

from pydantic import BaseModel, ConfigDict, field_validator

from .geometry import Point3, as_point3, as_polygon
from .viewport import ObjectRef

# -------------------------
# Fuentes de recorte (unión cerrada)
# -------------------------
class PolylineClip(BaseModel):
    """Polilínea ligera: vértices almacenados en línea, en espacio hoja."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["polyline"] = "polyline"
    vertices: Tuple[Point3, ...]

    @field_validator("vertices", mode="before")
    @classmethod
    def _lift(cls, v):
        return as_polygon(v)


class Polyline2dClip(BaseModel):
    """Polilínea 2D heredada: cada vértice es un sub-registro aparte."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["polyline2d"] = "polyline2d"
    vertex_refs: Tuple[ObjectRef, ...]


class Polyline3dClip(BaseModel):
    """Polilínea 3D: cada vértice es un sub-registro aparte."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["polyline3d"] = "polyline3d"
    vertex_refs: Tuple[ObjectRef, ...]


class UnsupportedEntity(BaseModel):
    """Cualquier otra entidad (círculo, elipse, spline...). Brazo obligatorio de la unión."""
    model_config = ConfigDict(frozen=True)
    kind: str
    extras: Mapping[str, Any] = {}


ClipBoundarySource = Union[PolylineClip, Polyline2dClip, Polyline3dClip, UnsupportedEntity]

# -------------------------
# Sub-registros de vértice
# -------------------------
class Vertex2dRecord(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["vertex2d"] = "vertex2d"
    position: Point3

    @field_validator("position", mode="before")
    @classmethod
    def _lift(cls, v):
        return as_point3(v)


class Vertex3dRecord(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["vertex3d"] = "vertex3d"
    position: Point3

    @field_validator("position", mode="before")
    @classmethod
    def _lift(cls, v):
        return as_point3(v)


SceneRecord = Union[ClipBoundarySource, Vertex2dRecord, Vertex3dRecord]

# kind -> modelo; lo que no está aquí se materializa como UnsupportedEntity
RECORD_TYPES: Mapping[str, type] = {
    "polyline": PolylineClip,
    "polyline2d": Polyline2dClip,
    "polyline3d": Polyline3dClip,
    "vertex2d": Vertex2dRecord,
    "vertex3d": Vertex3dRecord,
}


def record_from_mapping(data: Mapping[str, Any]) -> SceneRecord:
    """Construye el registro tipado a partir de un dict con clave `kind`."""
    d = dict(data)
    kind = str(d.get("kind", "")).strip().lower()
    if not kind:
        raise ValueError("registro sin 'kind'")
    model = RECORD_TYPES.get(kind)
    if model is None:
        extras = {k: v for k, v in d.items() if k != "kind"}
        return UnsupportedEntity(kind=kind, extras=extras)
    d["kind"] = kind
    return model(**d)


def record_kind(record: object) -> str:
    kind = getattr(record, "kind", None)
    return str(kind) if kind else type(record).__name__


__all__ = [
    "PolylineClip", "Polyline2dClip", "Polyline3dClip", "UnsupportedEntity",
    "ClipBoundarySource", "Vertex2dRecord", "Vertex3dRecord", "SceneRecord",
    "RECORD_TYPES", "record_from_mapping", "record_kind",
]
