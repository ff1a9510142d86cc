from __future__ import annotations

from typing import Any, Optional

from ..common.validators import require_coordinates, require_non_empty, require_number
from ..core.constants import DEFAULT_RADIUS_METERS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .repository import VenueRepository


class VenueService:
    """Use case: manage venues (admin)."""

    def __init__(self, venues: VenueRepository):
        self._venues = venues

    def list_venues(self):
        return self._venues.list_all()

    @staticmethod
    def _clean(data: dict[str, Any]) -> dict[str, Any]:
        name = require_non_empty(data.get("name", ""), "Nombre")
        lat = require_number(data.get("lat"), "Latitud")
        lng = require_number(data.get("lng"), "Longitud")
        require_coordinates(lat, lng)

        raw_radius = data.get("radius_meters")
        radius = DEFAULT_RADIUS_METERS if raw_radius in (None, "") else require_number(raw_radius, "Radio")
        if radius <= 0:
            raise ValidationError("El radio debe ser mayor a 0 metros")

        return {
            "name": name,
            "address": (data.get("address") or "").strip(),
            "city": (data.get("city") or "").strip(),
            "lat": lat,
            "lng": lng,
            "radius_meters": radius,
        }

    def save_venue(self, *, current_role: Role, data: dict[str, Any], venue_id: Optional[int] = None) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("No tiene permisos")

        fields = self._clean(data)
        if venue_id:
            if not self._venues.update(venue_id=int(venue_id), **fields):
                raise NotFoundError("Salón inexistente")
            return int(venue_id)
        return self._venues.create(**fields)

    def delete_venue(self, *, current_role: Role, venue_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("No tiene permisos")
        if not self._venues.delete_by_id(int(venue_id)):
            raise NotFoundError("Salón inexistente")
