# src/vpfootprint/services/footprint_service.py
from __future__ import annotations

"""
Footprint Service (contorno del viewport en espacio mundo)

Objetivo: obtener el polígono que un viewport expone en la escena, para
cualquier viewport (activo o no), a partir de sus parámetros almacenados.

Caminos:
  • Rectangular (sin recorte o referencia inválida): esquinas
    center ± (w/2, h/2) en orden fijo BL, TL, TR, BR (antihorario).
  • Poligonal (recorte activo y referencia válida): vértices de la entidad
    de recorte en su orden almacenado, sin reordenar ni deduplicar.
En ambos casos cada punto pasa por camera_to_world ∘ sheet_to_camera.

Sesiones:
  - Si el llamador entrega una sesión, se usa prestada y NUNCA se cierra aquí.
  - Si no, se abre una desde SceneStorePort solo durante la lectura de
    vértices y se cierra siempre (éxito o error).

Errores:
  - InvalidArgumentError / UnsupportedGeometryError se propagan tal cual.
  - Cualquier otra falla se envuelve en TransformFailureError (con causa).
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple, Type, TypeVar

from ..config import Settings, get_settings
from ..contracts.errors import InvalidArgumentError, TransformFailureError, UnsupportedGeometryError
from ..contracts.geometry import BoundingBox, Point3, Polygon
from ..contracts.scene import (
    Polyline2dClip, Polyline3dClip, PolylineClip, UnsupportedEntity,
    Vertex2dRecord, Vertex3dRecord, record_kind,
)
from ..contracts.viewport import ObjectRef, ViewportDescriptor
from ..ports.scene_store import ReadSessionPort, SceneStorePort
from .bounds_service import BoundsCalculator
from .containment_service import ContainmentTester
from .transform_service import TransformBuilder

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ----------------------
# Utilidades internas
# ----------------------

def rectangle_corners(vp: ViewportDescriptor) -> Tuple[Point3, ...]:
    """Esquinas en espacio hoja: BL, TL, TR, BR (orden fijo, antihorario)."""
    cx, cy = vp.center_point
    hw = vp.width / 2.0
    hh = vp.height / 2.0
    return (
        Point3(cx - hw, cy - hh, 0.0),  # BL
        Point3(cx - hw, cy + hh, 0.0),  # TL
        Point3(cx + hw, cy + hh, 0.0),  # TR
        Point3(cx + hw, cy - hh, 0.0),  # BR
    )


def _on_sheet(p: Point3) -> Point3:
    # la hoja es plana: la elevación del vértice no participa
    return Point3(p.x, p.y, 0.0)


# ----------------------
# Servicio
# ----------------------

@dataclass
class FootprintExtractor:
    store: Optional[SceneStorePort] = None
    transforms: TransformBuilder = field(default_factory=TransformBuilder)
    bounds: BoundsCalculator = field(default_factory=BoundsCalculator)
    containment: Optional[ContainmentTester] = None
    settings: Settings = field(default_factory=get_settings)

    def __post_init__(self):
        if self.containment is None:
            self.containment = ContainmentTester(exact_cutoff=self.settings.exact_tolerance_cutoff)

    # ------ Sesiones ------
    @contextmanager
    def _read_session(self, borrowed: Optional[ReadSessionPort]) -> Iterator[ReadSessionPort]:
        if borrowed is not None:
            yield borrowed
            return
        if self.store is None:
            raise RuntimeError("No hay sesión de lectura ni SceneStorePort configurado")
        session = self.store.open_read_session()
        logger.debug("Sesión de lectura interna abierta")
        try:
            yield session
        finally:
            session.close()
            logger.debug("Sesión de lectura interna cerrada")

    # ------ Lectura de recorte ------
    @staticmethod
    def _read_vertex_records(session: ReadSessionPort, refs: Sequence[ObjectRef], vertex_type: Type) -> List[Point3]:
        out: List[Point3] = []
        for ref in refs:
            rec = session.get_object(ref)
            if not isinstance(rec, vertex_type):
                logger.warning("Sub-registro %s ignorado: se esperaba %s, llegó %s",
                               ref, vertex_type.__name__, record_kind(rec))
                continue
            out.append(_on_sheet(rec.position))
        return out

    def _clip_vertices(self, vp: ViewportDescriptor, session: Optional[ReadSessionPort]) -> List[Point3]:
        with self._read_session(session) as tr:
            entity = tr.get_object(vp.clip_ref)
            match entity:
                case PolylineClip(vertices=vertices):
                    return [_on_sheet(p) for p in vertices]
                case Polyline2dClip(vertex_refs=refs):
                    return self._read_vertex_records(tr, refs, Vertex2dRecord)
                case Polyline3dClip(vertex_refs=refs):
                    return self._read_vertex_records(tr, refs, Vertex3dRecord)
                case UnsupportedEntity(kind=kind):
                    raise UnsupportedGeometryError(kind)
                case _:
                    raise UnsupportedGeometryError(record_kind(entity))

    # ------ API pública ------
    def extract_footprint(self, vp: ViewportDescriptor, session: Optional[ReadSessionPort] = None) -> Polygon:
        if vp is None:
            raise InvalidArgumentError("Viewport no puede ser nulo")
        try:
            xf = self.transforms.build_sheet_to_world(vp)
            if vp.has_valid_clip():
                sheet_pts: Sequence[Point3] = self._clip_vertices(vp, session)
            else:
                sheet_pts = rectangle_corners(vp)
            footprint = xf.apply_many(sheet_pts)
        except (InvalidArgumentError, UnsupportedGeometryError):
            raise
        except Exception as ex:
            raise TransformFailureError(f"Fallo al calcular el contorno de {vp}: {ex}") from ex
        logger.debug("Contorno de %s: %d puntos", vp, len(footprint))
        return footprint

    def viewport_bounds(self, vp: ViewportDescriptor, session: Optional[ReadSessionPort] = None) -> Optional[BoundingBox]:
        return self.bounds.compute_bounds(self.extract_footprint(vp, session))

    def is_point_in_viewport(
        self,
        vp: ViewportDescriptor,
        point: Sequence[float],
        session: Optional[ReadSessionPort] = None,
        *,
        tolerance: Optional[float] = None,
    ) -> bool:
        footprint = self.extract_footprint(vp, session)
        if len(footprint) < 3:
            logger.warning("Contorno degenerado (%d puntos) para %s", len(footprint), vp)
            return False
        tol = self.settings.containment_tolerance if tolerance is None else tolerance
        return self.containment.is_inside_with_tolerance(point, footprint, tol)

    def filter_in_viewport(
        self,
        vp: ViewportDescriptor,
        items: Iterable[T],
        location: Callable[[T], Sequence[float]],
        session: Optional[ReadSessionPort] = None,
        *,
        tolerance: float = 0.0,
    ) -> List[T]:
        """Elementos (anotaciones) ubicados dentro del contorno del viewport."""
        footprint = self.extract_footprint(vp, session)
        if len(footprint) < 3:
            logger.warning("Contorno inválido para filtrar en %s", vp)
            return []
        return self.containment.filter_inside(items, footprint, location, tolerance=tolerance)


__all__ = ["FootprintExtractor", "rectangle_corners"]
