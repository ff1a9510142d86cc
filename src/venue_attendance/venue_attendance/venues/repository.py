from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Venue


class VenueRepository(Protocol):
    def list_all(self) -> Sequence[Venue]:
        """All venues ordered by name."""

        raise NotImplementedError

    def get_by_id(self, venue_id: int) -> Optional[Venue]:
        raise NotImplementedError

    def create(self, *, name: str, address: str, city: str, lat: float, lng: float, radius_meters: float) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        venue_id: int,
        name: str,
        address: str,
        city: str,
        lat: float,
        lng: float,
        radius_meters: float,
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, venue_id: int) -> bool:
        raise NotImplementedError
