from __future__ import annotations

import pytest

from src.venue_attendance.venue_attendance.attendance.workflow.positioning import (
    PERMISSION_DENIED,
    POSITION_UNAVAILABLE,
    ReportedPositionSource,
)
from src.venue_attendance.venue_attendance.core.exceptions import PositionError, PositionPermissionDenied


def test_payload_with_coordinates():
    source = ReportedPositionSource.from_payload({"lat": "-34.6", "lng": -58.38, "accuracy": 12})

    with source.acquire():
        assert source.active
        position = source.current_position()

    assert not source.active
    assert (position.lat, position.lng, position.accuracy) == (-34.6, -58.38, 12.0)


def test_permission_denied_is_distinct():
    source = ReportedPositionSource.from_payload({"position_error": "permission_denied"})
    with pytest.raises(PositionPermissionDenied):
        source.current_position()


@pytest.mark.parametrize(
    "payload",
    [{}, {"lat": "x", "lng": 1}, {"position_error": POSITION_UNAVAILABLE}, {"lat": 91, "lng": 0}],
)
def test_other_failures(payload):
    source = ReportedPositionSource.from_payload(payload)
    with pytest.raises(PositionError) as exc:
        source.current_position()
    assert not isinstance(exc.value, PositionPermissionDenied)


def test_sensor_released_on_error():
    source = ReportedPositionSource(error=PERMISSION_DENIED)
    with pytest.raises(PositionPermissionDenied):
        with source.acquire():
            source.current_position()
    assert source.active is False
