from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from ..config import Settings, get_settings
from ..ports.scene_store import SceneStorePort
from ..services.boundary_cache_service import BoundaryCacheService
from ..services.containment_service import ContainmentTester
from ..services.diagnostics_service import DiagnosticsService
from ..services.footprint_service import FootprintExtractor

def load_settings_from_yaml(path: Path) -> Settings:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return Settings(**data)

@dataclass(frozen=True)
class Services:
    extractor: FootprintExtractor
    cache: BoundaryCacheService
    diagnostics: DiagnosticsService

def build_services(store: Optional[SceneStorePort] = None, settings: Optional[Settings] = None) -> Services:
    st = settings or get_settings()
    extractor = FootprintExtractor(
        store=store,
        containment=ContainmentTester(exact_cutoff=st.exact_tolerance_cutoff),
        settings=st,
    )
    return Services(
        extractor=extractor,
        cache=BoundaryCacheService(extractor=extractor, settings=st),
        diagnostics=DiagnosticsService(settings=st),
    )
