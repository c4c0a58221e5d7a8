# src/vpfootprint/services/transform_service.py
from __future__ import annotations

"""
Transform Service (hoja → cámara → mundo)

Reconstruye la transformación de un viewport a partir de sus parámetros
almacenados, sin activarlo. Dos matrices componibles:

  sheet_to_camera = Translate(view_center - center_point) ∘ Scale(1/custom_scale, pivote=center_point)
  camera_to_world = Rotate(-twist, eje=view_direction, pivote=view_target)
                    ∘ Translate(view_target) ∘ PlaneToWorld(view_direction)

Composición fija: world = camera_to_world ∘ sheet_to_camera (sheet_to_camera actúa primero).
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from ..contracts.errors import InvalidArgumentError
from ..contracts.geometry import Point3, Transform
from ..contracts.viewport import ViewportDescriptor

logger = logging.getLogger(__name__)


def _require_viewport(vp: Optional[ViewportDescriptor]) -> ViewportDescriptor:
    if vp is None:
        raise InvalidArgumentError("Viewport no puede ser nulo")
    return vp


def _scale_factor(vp: ViewportDescriptor) -> float:
    s = vp.custom_scale
    if s == 0.0:
        raise InvalidArgumentError("custom_scale no puede ser 0 (división por cero)")
    if not math.isfinite(s):
        raise InvalidArgumentError(f"custom_scale no finito: {s}")
    return 1.0 / s


@dataclass(frozen=True)
class TransformBuilder:
    """Construcción pura de matrices; sin estado."""

    def build_sheet_to_camera(self, vp: ViewportDescriptor) -> Transform:
        vp = _require_viewport(vp)
        factor = _scale_factor(vp)
        center = vp.center_point3()
        scale = Transform.scaling(factor, pivot=center)
        offset = Point3(vp.view_center[0] - center.x, vp.view_center[1] - center.y, 0.0)
        return Transform.translation(offset).compose(scale)

    def build_camera_to_world(self, vp: ViewportDescriptor) -> Transform:
        vp = _require_viewport(vp)
        target = vp.view_target3()
        basis = Transform.plane_to_world(vp.view_direction)
        move = Transform.translation(target)
        twist = Transform.rotation(-vp.twist_angle, vp.view_direction, pivot=target)
        return twist.compose(move).compose(basis)

    @staticmethod
    def compose(a: Transform, b: Transform) -> Transform:
        """a ∘ b (de derecha a izquierda: b actúa primero)."""
        return a.compose(b)

    def build_sheet_to_world(self, vp: ViewportDescriptor) -> Transform:
        s2c = self.build_sheet_to_camera(vp)
        c2w = self.build_camera_to_world(vp)
        logger.debug("Transformación hoja→mundo construida para %s", vp)
        return self.compose(c2w, s2c)


__all__ = ["TransformBuilder"]
