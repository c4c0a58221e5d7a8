# src/vpfootprint/services/boundary_cache_service.py
from __future__ import annotations

"""
Cache de contornos por (layout, viewport).

Evita recalcular contornos cuando se consultan muchas anotaciones contra los
mismos viewports. La entrada se invalida si el snapshot entrante difiere del
almacenado (cualquier parámetro). Los polígonos son tuplas inmutables: se
devuelven tal cual, sin copia.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

from ..config import Settings, get_settings
from ..contracts.geometry import Polygon
from ..contracts.viewport import ViewportDescriptor
from ..ports.scene_store import ReadSessionPort
from .footprint_service import FootprintExtractor

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str]


@dataclass(frozen=True)
class CacheEntry:
    key: CacheKey
    descriptor: ViewportDescriptor
    boundary: Polygon
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __str__(self) -> str:
        return (f"ViewportCache[Key={self.key[0]}:{self.key[1]}, Points={len(self.boundary)}, "
                f"Scale={self.descriptor.custom_scale:.3f}, Created={self.created_at:%H:%M:%S.%f}]")


@dataclass(frozen=True)
class CacheStats:
    entries: int
    hits: int
    misses: int
    invalidations: int


@dataclass
class BoundaryCacheService:
    extractor: FootprintExtractor
    settings: Settings = field(default_factory=get_settings)
    _entries: Dict[CacheKey, CacheEntry] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _hits: int = field(default=0, init=False)
    _misses: int = field(default=0, init=False)
    _invalidations: int = field(default=0, init=False)

    @staticmethod
    def cache_key(vp: ViewportDescriptor) -> Optional[CacheKey]:
        if not vp.viewport_id:
            return None
        return (vp.layout_name or "", vp.viewport_id)

    def get_or_compute(self, vp: ViewportDescriptor, session: Optional[ReadSessionPort] = None) -> Polygon:
        key = self.cache_key(vp) if vp is not None else None
        if key is None or not self.settings.cache_enabled:
            return self.extractor.extract_footprint(vp, session)

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                if entry.descriptor == vp:
                    self._hits += 1
                    logger.debug("Cache HIT: %s", entry)
                    return entry.boundary
                logger.debug("Cache INVALIDATED: %s", entry)
                del self._entries[key]
                self._invalidations += 1
            else:
                logger.debug("Cache MISS: %s", vp)
            self._misses += 1

        # la extracción lee del almacén: fuera del lock. Si dos hilos calculan
        # la misma clave, gana el último en guardar.
        t0 = time.perf_counter()
        boundary = self.extractor.extract_footprint(vp, session)
        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        if not boundary:
            logger.warning("Contorno vacío para %s; no se guarda en cache", vp)
            return boundary
        entry = CacheEntry(key=key, descriptor=vp, boundary=boundary)
        with self._lock:
            self._entries[key] = entry
        logger.info("Cache STORED (%.1fms): %s", elapsed_ms, entry)
        return boundary

    def invalidate_layout(self, layout_name: str) -> int:
        if not layout_name:
            return 0
        with self._lock:
            keys = [k for k in self._entries if k[0].lower() == layout_name.lower()]
            for k in keys:
                del self._entries[k]
            self._invalidations += len(keys)
        if keys:
            logger.debug("Invalidadas %d entradas del layout '%s'", len(keys), layout_name)
        return len(keys)

    def invalidate_viewport(self, layout_name: str, viewport_id: str) -> bool:
        key = (layout_name or "", viewport_id)
        with self._lock:
            removed = self._entries.pop(key, None) is not None
            if removed:
                self._invalidations += 1
        if removed:
            logger.debug("Entrada invalidada: %s:%s", layout_name, viewport_id)
        return removed

    def clear(self) -> None:
        with self._lock:
            n = len(self._entries)
            self._entries.clear()
        logger.info("Cache de contornos vaciada (%d entradas)", n)

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(len(self._entries), self._hits, self._misses, self._invalidations)


__all__ = ["BoundaryCacheService", "CacheEntry", "CacheStats"]
