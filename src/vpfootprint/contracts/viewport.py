# src/vpfootprint/contracts/viewport.py
from __future__ import annotations

import math
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .geometry import Point3

# Referencia opaca a un objeto del almacén de la escena (handle)
ObjectRef = str

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]


class ViewportDescriptor(BaseModel):
    """
    Snapshot inmutable de los parámetros almacenados de un viewport.
    - Espacio hoja: center_point, width, height.
    - Espacio cámara: view_center.
    - Espacio mundo: view_target, view_direction.
    custom_scale = unidades de hoja por unidad de cámara. El cero se rechaza
    al construir la transformación, no aquí.
    """
    model_config = ConfigDict(frozen=True)

    center_point: Vec2 = (0.0, 0.0)
    width: float = Field(0.0, ge=0.0)
    height: float = Field(0.0, ge=0.0)
    view_center: Vec2 = (0.0, 0.0)
    view_target: Vec3 = (0.0, 0.0, 0.0)
    view_direction: Vec3 = (0.0, 0.0, 1.0)
    twist_angle: float = 0.0
    custom_scale: float = 1.0
    non_rect_clip: bool = False
    clip_ref: Optional[ObjectRef] = None

    # identidad (cache / diagnóstico)
    viewport_id: Optional[str] = None
    layout_name: Optional[str] = None
    view_height: Optional[float] = None

    @field_validator("view_direction")
    @classmethod
    def _non_zero_direction(cls, v: Vec3) -> Vec3:
        n = math.sqrt(sum(c * c for c in v))
        if not math.isfinite(n) or n < 1e-12:
            raise ValueError("view_direction no puede ser nulo")
        return v

    @field_validator("clip_ref", "viewport_id", "layout_name", mode="before")
    @classmethod
    def _strip_ref(cls, v: Optional[object]) -> Optional[str]:
        # handles numéricos en YAML llegan como int
        if v is None:
            return v
        v2 = str(v).strip()
        return v2 or None

    def has_valid_clip(self) -> bool:
        return self.non_rect_clip and bool(self.clip_ref)

    def center_point3(self) -> Point3:
        return Point3(self.center_point[0], self.center_point[1], 0.0)

    def view_target3(self) -> Point3:
        return Point3(*self.view_target)

    def label(self) -> str:
        vid = self.viewport_id or "?"
        return f"{self.layout_name}:{vid}" if self.layout_name else vid

    def __str__(self) -> str:
        return f"VP[{self.label()} {self.width:.1f}x{self.height:.1f}, Scale={self.custom_scale:.3f}, Clip={self.non_rect_clip}]"


__all__ = ["ViewportDescriptor", "ObjectRef", "Vec2", "Vec3"]
