# src/vpfootprint/services/diagnostics_service.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from ..config import Settings, get_settings
from ..contracts.geometry import Point3, pretty_point
from ..contracts.viewport import ViewportDescriptor
from .footprint_service import rectangle_corners
from .transform_service import TransformBuilder


@dataclass
class DiagnosticsService:
    """Reporte de texto para depuración. Descriptivo, sin contrato."""
    transforms: TransformBuilder = field(default_factory=TransformBuilder)
    settings: Settings = field(default_factory=get_settings)

    def transformation_diagnostics(self, vp: Optional[ViewportDescriptor], precision: Optional[int] = None) -> str:
        if vp is None:
            return "Viewport nulo"
        nd = self.settings.matrix_precision if precision is None else precision
        try:
            s2c = self.transforms.build_sheet_to_camera(vp)
            c2w = self.transforms.build_camera_to_world(vp)
            s2w = self.transforms.compose(c2w, s2c)
            # esquina superior derecha como muestra
            sample_sheet = rectangle_corners(vp)[2]
            sample_world = s2w.apply(sample_sheet)
            target = vp.view_target3()
            lines = [
                "Diagnóstico de transformación de viewport:",
                f"  Viewport: {vp.label()}",
                f"  Centro (hoja): {pretty_point(vp.center_point, nd)}",
                f"  Dimensiones (hoja): {vp.width:.{nd}f} x {vp.height:.{nd}f}",
                f"  View Center: {pretty_point(vp.view_center, nd)}",
                f"  View Target: {pretty_point(vp.view_target, nd)}",
                f"  View Direction: {pretty_point(vp.view_direction, nd)}",
            ]
            if vp.view_height is not None:
                lines.append(f"  View Height: {vp.view_height:.{nd}f}")
            lines += [
                f"  Custom Scale: {vp.custom_scale:.6f} (factor {1.0 / vp.custom_scale:.1f})",
                f"  Twist: {vp.twist_angle:.6f} rad ({math.degrees(vp.twist_angle):.2f}°)",
                f"  Recorte no rectangular: {vp.non_rect_clip}",
                f"  Referencia de recorte válida: {vp.has_valid_clip()}",
                "",
                f"  Hoja→Cámara: {s2c.format(nd)}",
                f"  Cámara→Mundo: {c2w.format(nd)}",
                f"  Hoja→Mundo: {s2w.format(nd)}",
                "",
                f"  Distancia de View Target al origen: {math.dist(target, Point3(0.0, 0.0, 0.0)):.2f}",
                "",
                "  Esquina de muestra (superior derecha):",
                f"  Hoja: {pretty_point(sample_sheet, nd)}",
                f"  → Mundo: {pretty_point(sample_world, nd)}",
            ]
            return "\n".join(lines)
        except Exception as ex:
            return f"Error obteniendo diagnóstico: {ex}"


__all__ = ["DiagnosticsService"]
