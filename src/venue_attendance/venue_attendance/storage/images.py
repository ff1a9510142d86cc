"""Image payload handling and storage.

Uploads never raise: the caller receives either Uploaded(url) or
Fallback(original, reason) and decides whether to keep the original
payload, warn, or abort.
"""
from __future__ import annotations

import base64
import binascii
import io
import logging
import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Union

from PIL import Image, UnidentifiedImageError

_logger = logging.getLogger(__name__)

_DATA_URL_RE = re.compile(r"^data:image/(png|jpeg|jpg|webp);base64,", re.IGNORECASE)


@dataclass(frozen=True)
class Uploaded:
    url: str


@dataclass(frozen=True)
class Fallback:
    original: str
    reason: str


UploadOutcome = Union[Uploaded, Fallback]


def is_data_url(value: Optional[str]) -> bool:
    return bool(value) and value.startswith("data:image")


def strip_data_url(value: str) -> str:
    """Raw base64 body of a data URL (plain base64 is returned unchanged)."""
    return _DATA_URL_RE.sub("", value or "", count=1)


def decode_image(value: str) -> bytes:
    try:
        return base64.b64decode(strip_data_url(value), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError("Imagen en base64 inválida") from e


def to_jpeg(raw: bytes) -> bytes:
    """Re-encode any supported image as JPEG."""
    try:
        with Image.open(io.BytesIO(raw)) as img:
            out = io.BytesIO()
            img.convert("RGB").save(out, format="JPEG", quality=85)
            return out.getvalue()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ValueError("El archivo no es una imagen válida") from e


class ImageStore(Protocol):
    def upload(self, data_url: str, *, folder: str, file_name: Optional[str] = None) -> UploadOutcome:
        raise NotImplementedError


class LocalImageStore(ImageStore):
    """Writes JPEG files under `root` and serves them from `url_prefix`."""

    def __init__(self, root: str | Path, *, url_prefix: str = "/uploads"):
        self._root = Path(root)
        self._url_prefix = url_prefix.rstrip("/")

    def upload(self, data_url: str, *, folder: str, file_name: Optional[str] = None) -> UploadOutcome:
        name = file_name or f"{uuid.uuid4().hex}.jpg"
        relative = f"{folder.strip('/')}/{name}"
        target = (self._root / relative).resolve()
        if self._root.resolve() not in target.parents:
            _logger.warning("Image upload outside %s refused: %s", self._root, relative)
            return Fallback(original=data_url, reason="Ruta de imagen inválida")
        try:
            payload = to_jpeg(decode_image(data_url))
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(payload)
        except (ValueError, OSError) as e:
            _logger.warning("Image upload to %s failed: %s", relative, e)
            return Fallback(original=data_url, reason=str(e))

        return Uploaded(url=f"{self._url_prefix}/{relative}")

    def load(self, url: str) -> Optional[bytes]:
        """Bytes of an image previously uploaded here, None for foreign URLs."""
        prefix = f"{self._url_prefix}/"
        if not url.startswith(prefix):
            return None
        target = (self._root / url[len(prefix):]).resolve()
        if self._root.resolve() not in target.parents or not target.is_file():
            return None
        return target.read_bytes()
