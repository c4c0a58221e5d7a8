# src/vpfootprint/services/containment_service.py
from __future__ import annotations

"""
Containment Service (punto en polígono)

  • is_inside(): ray casting hacia +X con prueba semiabierta
      (y1 < ty <= y2) or (y2 < ty <= y1)  y  tx < x_intersección
    No cuenta dos veces un rayo que pasa justo por un vértice compartido.
    No cambiar las desigualdades: reclasifica puntos pegados al borde.
  • winding_number(): algoritmo alternativo (número de vueltas), misma
    respuesta que ray casting en polígonos simples.
  • is_inside_with_tolerance(): 5 sondas (exacta + ±tol en X e Y); basta una dentro.

Solo se usan X e Y; Z se ignora.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from ..contracts.errors import InvalidArgumentError
from ..contracts.geometry import Point3, as_point3

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_EXACT_CUTOFF = 1e-12


def _require_polygon(polygon: Optional[Sequence[Sequence[float]]]) -> Sequence[Sequence[float]]:
    if polygon is None:
        raise InvalidArgumentError("Polígono no puede ser nulo")
    if len(polygon) < 3:
        raise InvalidArgumentError(f"El polígono debe tener al menos 3 vértices (tiene {len(polygon)})")
    return polygon


def _require_point(point: Optional[Sequence[float]]) -> Point3:
    if point is None:
        raise InvalidArgumentError("Punto de prueba no puede ser nulo")
    return as_point3(point)


def _ray_cast(tx: float, ty: float, polygon: Sequence[Sequence[float]]) -> bool:
    inside = False
    n = len(polygon)
    for i in range(n):
        x1, y1 = polygon[i][0], polygon[i][1]
        x2, y2 = polygon[(i + 1) % n][0], polygon[(i + 1) % n][1]
        if ((y1 < ty <= y2) or (y2 < ty <= y1)) and (tx < x1 + ((ty - y1) / (y2 - y1)) * (x2 - x1)):
            inside = not inside
    return inside


def _is_left(x1: float, y1: float, x2: float, y2: float, tx: float, ty: float) -> float:
    """>0 punto a la izquierda de la arista, <0 a la derecha, 0 sobre la recta."""
    return (x2 - x1) * (ty - y1) - (tx - x1) * (y2 - y1)


def _winding(tx: float, ty: float, polygon: Sequence[Sequence[float]]) -> int:
    wn = 0
    n = len(polygon)
    for i in range(n):
        x1, y1 = polygon[i][0], polygon[i][1]
        x2, y2 = polygon[(i + 1) % n][0], polygon[(i + 1) % n][1]
        if y1 <= ty:
            if y2 > ty and _is_left(x1, y1, x2, y2, tx, ty) > 0:
                wn += 1
        elif y2 <= ty and _is_left(x1, y1, x2, y2, tx, ty) < 0:
            wn -= 1
    return wn


@dataclass(frozen=True)
class ContainmentTester:
    exact_cutoff: float = DEFAULT_EXACT_CUTOFF

    # ------ API pública ------
    def is_inside(self, point: Sequence[float], polygon: Sequence[Sequence[float]]) -> bool:
        p = _require_point(point)
        return _ray_cast(p.x, p.y, _require_polygon(polygon))

    def winding_number(self, point: Sequence[float], polygon: Sequence[Sequence[float]]) -> int:
        p = _require_point(point)
        return _winding(p.x, p.y, _require_polygon(polygon))

    def is_inside_winding(self, point: Sequence[float], polygon: Sequence[Sequence[float]]) -> bool:
        return self.winding_number(point, polygon) != 0

    def is_inside_with_tolerance(self, point: Sequence[float], polygon: Sequence[Sequence[float]], tolerance: float) -> bool:
        p = _require_point(point)
        polygon = _require_polygon(polygon)
        if tolerance is None or tolerance < 0:
            raise InvalidArgumentError(f"La tolerancia debe ser no negativa: {tolerance}")
        if tolerance < self.exact_cutoff:
            return _ray_cast(p.x, p.y, polygon)
        probes = (
            p,
            Point3(p.x + tolerance, p.y, p.z),
            Point3(p.x - tolerance, p.y, p.z),
            Point3(p.x, p.y + tolerance, p.z),
            Point3(p.x, p.y - tolerance, p.z),
        )
        return any(_ray_cast(q.x, q.y, polygon) for q in probes)

    def filter_inside(
        self,
        items: Iterable[T],
        polygon: Sequence[Sequence[float]],
        location: Callable[[T], Sequence[float]],
        *,
        tolerance: float = 0.0,
    ) -> List[T]:
        """
        Filtra elementos (p.ej. anotaciones) cuya ubicación cae dentro del polígono.
        Conserva el orden de entrada.
        """
        polygon = _require_polygon(polygon)
        items = list(items)
        out: List[T] = []
        for it in items:
            inside = self.is_inside_with_tolerance(location(it), polygon, tolerance)
            logger.debug("%r %s del contorno", it, "dentro" if inside else "fuera")
            if inside:
                out.append(it)
        logger.info("Filtrados %d de %d elementos dentro del contorno", len(out), len(items))
        return out


__all__ = ["ContainmentTester", "DEFAULT_EXACT_CUTOFF"]
