from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.constants import EARTH_RADIUS_METERS
from .model import Venue


@dataclass(frozen=True)
class VenueMatch:
    venue: Venue
    distance: float

    @property
    def inside(self) -> bool:
        return is_inside(self.distance, self.venue)


def distance_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points using the haversine formula."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lng2 - lng1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def nearest_venue(lat: float, lng: float, venues: Sequence[Venue]) -> Optional[VenueMatch]:
    best: Optional[VenueMatch] = None
    for venue in venues:
        d = distance_meters(lat, lng, venue.lat, venue.lng)
        # strict comparison: the first venue wins ties
        if best is None or d < best.distance:
            best = VenueMatch(venue=venue, distance=d)
    return best


def is_inside(distance: float, venue: Venue) -> bool:
    return distance <= venue.radius_meters
