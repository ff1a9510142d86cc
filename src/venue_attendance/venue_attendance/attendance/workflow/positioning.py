from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Protocol

from ...common.validators import require_coordinates
from ...core.constants import POSITION_TIMEOUT_SECONDS
from ...core.exceptions import PositionError, PositionPermissionDenied, ValidationError


@dataclass(frozen=True)
class Position:
    lat: float
    lng: float
    accuracy: Optional[float] = None


class PositionSource(Protocol):
    """Device position sensor.

    acquire() holds the sensor for the duration of a `with` block and
    releases it on every exit.
    """

    def acquire(self):
        raise NotImplementedError

    def current_position(
        self,
        *,
        timeout_seconds: float = POSITION_TIMEOUT_SECONDS,
        high_accuracy: bool = True,
        maximum_age: float = 0,
    ) -> Position:
        raise NotImplementedError


# Error codes of the browser Geolocation API
PERMISSION_DENIED = "PERMISSION_DENIED"
POSITION_UNAVAILABLE = "POSITION_UNAVAILABLE"
TIMEOUT = "TIMEOUT"


class ReportedPositionSource(PositionSource):
    """Serves the fix (or error code) the client reported with its request."""

    def __init__(
        self,
        *,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        accuracy: Optional[float] = None,
        error: Optional[str] = None,
    ):
        self._lat = lat
        self._lng = lng
        self._accuracy = accuracy
        self._error = error
        self.active = False

    @classmethod
    def from_payload(cls, payload: dict) -> "ReportedPositionSource":
        error = payload.get("position_error")
        if error:
            return cls(error=str(error).upper())
        try:
            lat = float(payload["lat"])
            lng = float(payload["lng"])
        except (KeyError, TypeError, ValueError):
            return cls(error=POSITION_UNAVAILABLE)
        accuracy = payload.get("accuracy")
        return cls(lat=lat, lng=lng, accuracy=float(accuracy) if accuracy is not None else None)

    @contextmanager
    def acquire(self) -> Iterator["ReportedPositionSource"]:
        self.active = True
        try:
            yield self
        finally:
            self.active = False

    def current_position(
        self,
        *,
        timeout_seconds: float = POSITION_TIMEOUT_SECONDS,
        high_accuracy: bool = True,
        maximum_age: float = 0,
    ) -> Position:
        if self._error == PERMISSION_DENIED:
            raise PositionPermissionDenied("Permiso de ubicación denegado")
        if self._error == TIMEOUT:
            raise PositionError(f"No se obtuvo la ubicación en {timeout_seconds:g} segundos")
        if self._error or self._lat is None or self._lng is None:
            raise PositionError("No se pudo obtener la ubicación del dispositivo")

        try:
            require_coordinates(self._lat, self._lng)
        except ValidationError as e:
            raise PositionError(str(e)) from e
        return Position(lat=self._lat, lng=self._lng, accuracy=self._accuracy)
