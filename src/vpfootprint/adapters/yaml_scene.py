# src/vpfootprint/adapters/yaml_scene.py
from __future__ import annotations

"""
Snapshot de escena en YAML (viewports + registros del almacén).

  viewports:
    - viewport_id: "2"
      layout_name: "C-101"
      center_point: [10.0, 7.5]
      width: 20.0
      height: 15.0
      view_center: [500.0, 300.0]
      custom_scale: 0.025
      non_rect_clip: true
      clip_ref: "1F3"
  records:
    "1F3": {kind: polyline, vertices: [[0, 0], [20, 0], [20, 15], [0, 15]]}
    "A10": {kind: vertex2d, position: [0, 0]}
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

import yaml

from ..contracts.scene import record_from_mapping
from ..contracts.viewport import ViewportDescriptor
from .memory_store import InMemorySceneStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scene:
    viewports: Tuple[ViewportDescriptor, ...]
    store: InMemorySceneStore

    def find(self, viewport_id: str, layout_name: Optional[str] = None) -> ViewportDescriptor:
        for vp in self.viewports:
            if vp.viewport_id == viewport_id and (layout_name is None or vp.layout_name == layout_name):
                return vp
        where = f" en layout '{layout_name}'" if layout_name else ""
        raise KeyError(f"Viewport '{viewport_id}' no encontrado{where}")


def scene_from_mapping(data: Mapping[str, Any]) -> Scene:
    if not isinstance(data, Mapping):
        raise ValueError("El snapshot de escena debe ser un mapeo con 'viewports' y 'records'")
    vps = tuple(ViewportDescriptor(**v) for v in (data.get("viewports") or ()))
    store = InMemorySceneStore()
    for ref, rec in (data.get("records") or {}).items():
        store.add(str(ref), record_from_mapping(rec))
    logger.info("Escena cargada: %d viewports, %d registros", len(vps), len(store.records))
    return Scene(viewports=vps, store=store)


def load_scene_yaml(path: Path | str) -> Scene:
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    return scene_from_mapping(data)


__all__ = ["Scene", "scene_from_mapping", "load_scene_yaml"]
