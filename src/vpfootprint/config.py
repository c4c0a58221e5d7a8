# src/vpfootprint/config.py
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Config unificada del proyecto. No toca disco.
    Debe ser construida y provista por composition/di.py (CLI/adapters).
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="VPF_",
        env_nested_delimiter="__",
        extra="forbid",
        frozen=True,
    )

    # --- contención ---
    # tolerancia por defecto de is_point_in_viewport (deriva numérica de la cadena de transformaciones)
    containment_tolerance: float = Field(1e-9, ge=0.0)
    # por debajo de este valor la prueba con tolerancia es la exacta
    exact_tolerance_cutoff: float = Field(1e-12, ge=0.0)

    # --- cache de contornos ---
    cache_enabled: bool = True

    # --- diagnóstico ---
    matrix_precision: int = Field(3, ge=0, le=12)

    # --- logging ---
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def _valid_level(cls, v: str) -> str:
        v2 = str(v).strip().upper()
        if not isinstance(logging.getLevelName(v2), int):
            raise ValueError(f"log_level inválido: {v}")
        return v2

    @field_validator("log_file", mode="after")
    @classmethod
    def _abs_log_file(cls, p: Optional[Path]) -> Optional[Path]:
        if p is None:
            return None
        return p.expanduser().resolve()

    def log_level_int(self) -> int:
        return int(logging.getLevelName(self.log_level))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Instancia cacheada. Úsala desde composition/di.py o CLI, o como default de servicios.
    Para tests, recuerda limpiar:
        get_settings.cache_clear()
    """
    return Settings()
