# src/vpfootprint/contracts/geometry.py

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterable, NamedTuple, Sequence, Tuple

import numpy as np
import numpy.typing as npt

from .errors import InvalidArgumentError

class Point3(NamedTuple):
    x: float; y: float; z: float = 0.0

Polygon = Tuple[Point3, ...]

class BoundingBox(NamedTuple):
    min: Point3
    max: Point3

# Umbral del algoritmo de eje arbitrario (DXF/OCS)
ARBITRARY_AXIS_LIMIT = 1.0 / 64.0


def as_point3(p: Sequence[float]) -> Point3:
    """Acepta (x, y) o (x, y, z); 2D se eleva con z=0."""
    if p is None:
        raise InvalidArgumentError("Punto nulo")
    n = len(p)
    if n == 2:
        return Point3(float(p[0]), float(p[1]), 0.0)
    if n == 3:
        return Point3(float(p[0]), float(p[1]), float(p[2]))
    raise InvalidArgumentError(f"Punto debe tener 2 o 3 coordenadas, tiene {n}")


def as_polygon(points: Iterable[Sequence[float]]) -> Polygon:
    return tuple(as_point3(p) for p in points)


def _unit(v: Sequence[float]) -> "npt.NDArray[np.float64]":
    a = np.asarray(v, dtype=np.float64)
    n = float(np.linalg.norm(a))
    if n < 1e-18 or not math.isfinite(n):
        raise InvalidArgumentError(f"Vector nulo o no finito: {tuple(v)}")
    return a / n


# ---------- Transformación afín 3D (matriz homogénea 4x4) ----------
@dataclass(frozen=True, eq=False)
class Transform:
    matrix: "npt.NDArray[np.float64]"  # type: ignore[valid-type]

    def __post_init__(self):
        m = np.array(self.matrix, dtype=np.float64)
        if m.shape != (4, 4):
            raise InvalidArgumentError(f"Transform requiere matriz 4x4, recibió {m.shape}")
        # Valor inmutable: nadie muta la matriz una vez creada
        m.setflags(write=False)
        object.__setattr__(self, "matrix", m)

    # --- constructores ---
    @staticmethod
    def identity() -> "Transform":
        return Transform(np.eye(4))

    @staticmethod
    def translation(v: Sequence[float]) -> "Transform":
        m = np.eye(4)
        m[:3, 3] = as_point3(v)
        return Transform(m)

    @staticmethod
    def scaling(factor: float, pivot: Sequence[float] = (0.0, 0.0, 0.0)) -> "Transform":
        """Escala uniforme con pivote: p' = pivot + f * (p - pivot)."""
        c = np.asarray(as_point3(pivot), dtype=np.float64)
        m = np.eye(4)
        m[:3, :3] *= factor
        m[:3, 3] = c - factor * c
        return Transform(m)

    @staticmethod
    def rotation(angle: float, axis: Sequence[float], pivot: Sequence[float] = (0.0, 0.0, 0.0)) -> "Transform":
        """Rotación (regla de la mano derecha) alrededor de `axis` pasando por `pivot` (Rodrigues)."""
        k = _unit(axis)
        c, s = math.cos(angle), math.sin(angle)
        kx = np.array([[0.0, -k[2], k[1]],
                       [k[2], 0.0, -k[0]],
                       [-k[1], k[0], 0.0]])
        r = c * np.eye(3) + s * kx + (1.0 - c) * np.outer(k, k)
        p = np.asarray(as_point3(pivot), dtype=np.float64)
        m = np.eye(4)
        m[:3, :3] = r
        m[:3, 3] = p - r @ p
        return Transform(m)

    @staticmethod
    def plane_to_world(normal: Sequence[float]) -> "Transform":
        """
        Cambio de base plano→mundo para un plano por el origen con normal `normal`.
        Ejes del plano según el algoritmo de eje arbitrario:
          - si |Nx| y |Ny| < 1/64 -> Ax = Wy x N
          - si no                 -> Ax = Wz x N
          - Ay = N x Ax
        """
        n = _unit(normal)
        if abs(n[0]) < ARBITRARY_AXIS_LIMIT and abs(n[1]) < ARBITRARY_AXIS_LIMIT:
            ax = np.cross((0.0, 1.0, 0.0), n)
        else:
            ax = np.cross((0.0, 0.0, 1.0), n)
        ax = ax / np.linalg.norm(ax)
        ay = np.cross(n, ax)
        ay = ay / np.linalg.norm(ay)
        m = np.eye(4)
        m[:3, 0] = ax
        m[:3, 1] = ay
        m[:3, 2] = n
        return Transform(m)

    # --- operaciones ---
    def compose(self, other: "Transform") -> "Transform":
        """self ∘ other: `other` actúa primero."""
        return Transform(self.matrix @ other.matrix)

    def apply(self, p: Sequence[float]) -> Point3:
        q = as_point3(p)
        v = self.matrix @ np.array((q.x, q.y, q.z, 1.0))
        return Point3(float(v[0]), float(v[1]), float(v[2]))

    def apply_many(self, points: Iterable[Sequence[float]]) -> Polygon:
        return tuple(self.apply(p) for p in points)

    def is_close(self, other: "Transform", tol: float = 1e-9) -> bool:
        return bool(np.allclose(self.matrix, other.matrix, rtol=0.0, atol=tol))

    def format(self, ndigits: int = 3) -> str:
        rows = []
        for r in self.matrix:
            # +0.0 normaliza -0.0
            rows.append("[" + ",".join(f"{v + 0.0:.{ndigits}f}" for v in r) + "]")
        return "".join(rows)


def points_close(a: Sequence[float], b: Sequence[float], tol: float = 1e-9) -> bool:
    pa, pb = as_point3(a), as_point3(b)
    return all(math.isclose(x, y, rel_tol=0.0, abs_tol=tol) for x, y in zip(pa, pb))

def pretty_point(p: Sequence[float], ndigits: int = 3) -> str:
    q = as_point3(p)
    return f"({q.x + 0.0:.{ndigits}f}, {q.y + 0.0:.{ndigits}f}, {q.z + 0.0:.{ndigits}f})"

__all__ = [
    "Point3","Polygon","BoundingBox","Transform","as_point3","as_polygon",
    "points_close","pretty_point","ARBITRARY_AXIS_LIMIT",
]
