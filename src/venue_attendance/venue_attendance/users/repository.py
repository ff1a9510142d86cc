from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from ..schedules.model import WorkSchedule
from .model import Worker


class WorkerRepository(Protocol):
    """Repository interface for workers.

    Services depend on this protocol, never on a concrete database adapter.
    """

    def get_by_id(self, worker_id: int) -> Optional[Worker]:
        raise NotImplementedError

    def find_by_identifier(self, identifier: str) -> Optional[Worker]:
        """Match on dni or legajo."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Worker]:
        raise NotImplementedError

    def create(
        self,
        *,
        legajo: str,
        dni: str,
        password_hash: str,
        name: str,
        role: Role,
        dress_code: str,
        reference_image: Optional[str],
        schedule: Sequence[WorkSchedule],
        assigned_locations: Sequence[int],
        hourly_rate: float,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        worker_id: int,
        legajo: str,
        dni: str,
        name: str,
        role: Role,
        dress_code: str,
        reference_image: Optional[str],
        schedule: Sequence[WorkSchedule],
        assigned_locations: Sequence[int],
        hourly_rate: float,
        password_hash: Optional[str] = None,
    ) -> bool:
        """password_hash=None keeps the stored password."""

        raise NotImplementedError

    def delete_by_id(self, worker_id: int) -> bool:
        raise NotImplementedError
