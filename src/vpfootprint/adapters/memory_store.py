# src/vpfootprint/adapters/memory_store.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping, Optional

from ..contracts.scene import SceneRecord
from ..contracts.viewport import ObjectRef

logger = logging.getLogger(__name__)


@dataclass
class InMemoryReadSession:
    """Sesión de lectura sobre un snapshot de registros. Tras close() ya no resuelve."""
    records: Mapping[ObjectRef, SceneRecord]
    session_id: int
    closed: bool = False
    reads: int = 0
    on_close: Optional[Callable[[int], None]] = field(default=None, repr=False)

    def get_object(self, ref: ObjectRef) -> SceneRecord:
        if self.closed:
            raise RuntimeError(f"Sesión {self.session_id} cerrada")
        self.reads += 1
        try:
            return self.records[ref]
        except KeyError:
            raise KeyError(f"Objeto no encontrado: {ref}") from None

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        # suelta el snapshot; la sesión cerrada ya no lo necesita
        self.records = {}
        if self.on_close is not None:
            self.on_close(self.session_id)


@dataclass
class InMemorySceneStore:
    """
    Almacén en memoria (tests, CLI sobre YAML).
    Solo retiene las sesiones abiertas; close() las quita del registro.
    """
    records: Dict[ObjectRef, SceneRecord] = field(default_factory=dict)
    _opened: int = field(default=0, init=False)
    _sessions: Dict[int, InMemoryReadSession] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def add(self, ref: ObjectRef, record: SceneRecord) -> None:
        self.records[ref] = record

    def open_read_session(self) -> InMemoryReadSession:
        with self._lock:
            self._opened += 1
            s = InMemoryReadSession(records=dict(self.records), session_id=self._opened, on_close=self._release)
            self._sessions[s.session_id] = s
        logger.debug("Sesión %d abierta", s.session_id)
        return s

    def _release(self, session_id: int) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)
        logger.debug("Sesión %d cerrada", session_id)

    @property
    def sessions_opened(self) -> int:
        return self._opened

    @property
    def open_sessions(self) -> int:
        with self._lock:
            return len(self._sessions)


__all__ = ["InMemorySceneStore", "InMemoryReadSession"]
