from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} no es válido")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} requiere al menos {min_len} caracteres")
    return value


def require_number(value: Any, field_name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} debe ser numérico")


def require_coordinates(lat: float, lng: float) -> tuple[float, float]:
    if not (-90 <= lat <= 90):
        raise ValidationError("La latitud debe estar entre -90 y 90")
    if not (-180 <= lng <= 180):
        raise ValidationError("La longitud debe estar entre -180 y 180")
    return lat, lng
