from __future__ import annotations

import base64
import json
import logging
from typing import Callable, Optional

import requests

from ..core.constants import DEFAULT_DRESS_CODE
from ..core.exceptions import PhotoValidationError
from ..storage.images import strip_data_url
from .model import ValidationResult
from .validator import PhotoValidator

_logger = logging.getLogger(__name__)

API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

MISSING_KEY_MESSAGE = "Error: no hay una llave de IA configurada."

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "identityMatch": {
            "type": "BOOLEAN",
            "description": "Verdadero si el rostro en la foto actual coincide con el de la foto de referencia.",
        },
        "dressCodeMatches": {
            "type": "BOOLEAN",
            "description": "Verdadero si la vestimenta cumple con el código descrito.",
        },
        "description": {"type": "STRING", "description": "Breve resumen del análisis."},
        "confidence": {"type": "NUMBER", "description": "Nivel de confianza entre 0 y 1."},
    },
    "required": ["identityMatch", "dressCodeMatches", "description", "confidence"],
}


def build_prompt(dress_code_description: str, *, has_reference: bool) -> str:
    face = "Compara con la foto de referencia." if has_reference else "Verifica rostro humano visible."
    return (
        "Supervisor: Analiza esta fichada.\n"
        f"1. ROSTRO: {face}\n"
        f'2. VESTIMENTA: ¿Cumple con "{dress_code_description or DEFAULT_DRESS_CODE}"?\n'
        "Responde SOLO en JSON."
    )


class GeminiPhotoValidator(PhotoValidator):
    def __init__(
        self,
        api_key: Optional[str],
        *,
        model: str = "gemini-2.5-flash",
        timeout: float = 30,
        local_loader: Optional[Callable[[str], Optional[bytes]]] = None,
        session: Optional[requests.Session] = None,
    ):
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._local_loader = local_loader
        self._http = session or requests.Session()

    def _load_reference(self, reference: str) -> Optional[str]:
        """Base64 body of the reference photo, or None when it cannot be read."""
        if reference.startswith("http://") or reference.startswith("https://"):
            try:
                res = self._http.get(reference, timeout=self._timeout)
                res.raise_for_status()
            except requests.RequestException as e:
                _logger.warning("Reference image %s could not be fetched: %s", reference, e)
                return None
            return base64.b64encode(res.content).decode("ascii")

        if reference.startswith("data:image"):
            return strip_data_url(reference)

        if self._local_loader:
            raw = self._local_loader(reference)
            if raw is not None:
                return base64.b64encode(raw).decode("ascii")

        _logger.warning("Reference image %s is not readable", reference)
        return None

    def _request_body(self, captured_photo: str, dress_code_description: str, ref_b64: Optional[str]) -> dict:
        parts = []
        if ref_b64:
            parts.append({"inline_data": {"mime_type": "image/jpeg", "data": ref_b64}})
        parts.append({"inline_data": {"mime_type": "image/jpeg", "data": strip_data_url(captured_photo)}})
        parts.append({"text": build_prompt(dress_code_description, has_reference=bool(ref_b64))})

        return {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
                "temperature": 0.1,
            },
        }

    def analyze(
        self,
        captured_photo: str,
        dress_code_description: str,
        reference_photo: Optional[str],
    ) -> ValidationResult:
        if not self._api_key:
            _logger.warning("AI validation requested but no API key is configured")
            return ValidationResult.negative(MISSING_KEY_MESSAGE)

        ref_b64 = self._load_reference(reference_photo) if reference_photo else None
        body = self._request_body(captured_photo, dress_code_description, ref_b64)

        try:
            res = self._http.post(
                API_URL.format(model=self._model),
                headers={"x-goog-api-key": self._api_key, "Content-Type": "application/json"},
                json=body,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            _logger.error("AI validator request failed: %s", e)
            raise PhotoValidationError("Error en el servidor de Inteligencia Artificial.") from e

        if res.status_code == 403:
            raise PhotoValidationError("Error: La Llave de IA no tiene permisos o es inválida.")
        if res.status_code == 429:
            raise PhotoValidationError("Error: Límite de uso excedido (Cuota).")
        if res.status_code != 200:
            _logger.error("AI validator returned status %s: %s", res.status_code, res.text[:500])
            raise PhotoValidationError("Error en el servidor de Inteligencia Artificial.")

        try:
            text = res.json()["candidates"][0]["content"]["parts"][0]["text"].strip()
            if not text:
                raise ValueError("Respuesta vacía")
            return ValidationResult.from_payload(json.loads(text))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            _logger.error("AI validator answer could not be parsed: %s", e)
            raise PhotoValidationError("Respuesta inválida del servicio de Inteligencia Artificial.") from e
