# src/vpfootprint/services/bounds_service.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..contracts.errors import InvalidArgumentError
from ..contracts.geometry import BoundingBox, Point3, as_point3, pretty_point


@dataclass(frozen=True)
class BoundsCalculator:
    """Caja envolvente alineada a ejes de un contorno. Se recalcula siempre, nunca se persiste."""

    def compute_bounds(self, polygon: Sequence[Sequence[float]]) -> Optional[BoundingBox]:
        if polygon is None:
            raise InvalidArgumentError("Polígono no puede ser nulo")
        if len(polygon) == 0:
            return None
        first = as_point3(polygon[0])
        minx, miny, minz = first
        maxx, maxy, maxz = first
        for raw in polygon[1:]:
            p = as_point3(raw)
            minx = min(minx, p.x); miny = min(miny, p.y); minz = min(minz, p.z)
            maxx = max(maxx, p.x); maxy = max(maxy, p.y); maxz = max(maxz, p.z)
        return BoundingBox(Point3(minx, miny, minz), Point3(maxx, maxy, maxz))


def pretty_box(b: BoundingBox, ndigits: int = 3) -> str:
    lo, hi = b
    return f"BoundingBox(min={pretty_point(lo, ndigits)}, max={pretty_point(hi, ndigits)})"


__all__ = ["BoundsCalculator", "pretty_box"]
