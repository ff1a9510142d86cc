from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Venue:
    """A physical location; workers within radius_meters of (lat, lng) are on site."""

    venue_id: int
    name: str
    address: str
    city: str
    lat: float
    lng: float
    radius_meters: float

    def to_dict(self) -> dict:
        return {
            "id": self.venue_id,
            "name": self.name,
            "address": self.address,
            "city": self.city,
            "lat": self.lat,
            "lng": self.lng,
            "radius_meters": self.radius_meters,
        }
