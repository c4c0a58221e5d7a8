# src/vpfootprint/contracts/errors.py
from __future__ import annotations

from typing import Optional


class VPFootprintError(Exception):
    """Raíz de errores del dominio."""


class InvalidArgumentError(VPFootprintError, ValueError):
    """Argumento nulo o fuera de dominio (error de programación, falla rápido)."""


class UnsupportedGeometryError(VPFootprintError, NotImplementedError):
    """
    La entidad de recorte no es Polyline, Polyline2d ni Polyline3d.
    `kind` conserva el tipo encontrado para diagnóstico.
    """

    def __init__(self, kind: str, message: Optional[str] = None):
        self.kind = kind
        super().__init__(
            message
            or f"Entidad de recorte no soportada: {kind}. Solo se soportan polyline, polyline2d y polyline3d."
        )


class TransformFailureError(VPFootprintError, RuntimeError):
    """Falla al resolver el recorte o al aplicar transformaciones. La causa va en __cause__."""


__all__ = [
    "VPFootprintError", "InvalidArgumentError",
    "UnsupportedGeometryError", "TransformFailureError",
]
