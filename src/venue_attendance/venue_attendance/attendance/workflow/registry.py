from __future__ import annotations

import threading
from typing import Callable, Dict, Optional

from ...users.model import Worker
from .session import CheckInSession


class SessionRegistry:
    """In-process map of worker id -> active CheckInSession.

    Flask may serve requests on several threads; the registry lock only
    guards the map, each session serializes its own state changes.
    """

    def __init__(self, factory: Callable[[Worker], CheckInSession]):
        self._factory = factory
        self._sessions: Dict[int, CheckInSession] = {}
        self._lock = threading.Lock()

    def get(self, worker_id: int) -> Optional[CheckInSession]:
        with self._lock:
            return self._sessions.get(worker_id)

    def open(self, worker: Worker) -> CheckInSession:
        """Fresh session for a worker, replacing any previous one."""
        session = self._factory(worker)
        with self._lock:
            self._sessions[worker.worker_id] = session
        return session

    def get_or_open(self, worker: Worker) -> CheckInSession:
        with self._lock:
            session = self._sessions.get(worker.worker_id)
            if session is None:
                session = self._factory(worker)
                self._sessions[worker.worker_id] = session
            return session

    def close(self, worker_id: int) -> None:
        with self._lock:
            self._sessions.pop(worker_id, None)
