# src/vpfootprint/ports/scene_store.py
from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..contracts.scene import SceneRecord
from ..contracts.viewport import ObjectRef

@runtime_checkable
class ReadSessionPort(Protocol):
    """
    Sesión de lectura de corta vida sobre el almacén de objetos de la escena.
    Reglas:
      - get_object() resuelve por referencia en modo solo lectura; KeyError si no existe.
      - close() libera la sesión; quien la abrió es quien la cierra.
    """
    def get_object(self, ref: ObjectRef) -> SceneRecord: ...
    def close(self) -> None: ...

@runtime_checkable
class SceneStorePort(Protocol):
    """Almacén de objetos de la escena (documento). Solo abre sesiones de lectura."""
    def open_read_session(self) -> ReadSessionPort: ...

__all__ = ["ReadSessionPort", "SceneStorePort"]
