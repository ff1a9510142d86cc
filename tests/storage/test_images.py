from __future__ import annotations

import base64
import io

from PIL import Image

from src.venue_attendance.venue_attendance.storage.images import (
    Fallback,
    LocalImageStore,
    Uploaded,
    is_data_url,
    strip_data_url,
)


def _png_data_url() -> str:
    buf = io.BytesIO()
    Image.new("RGBA", (4, 4), (255, 0, 0, 255)).save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


def test_upload_writes_jpeg_and_returns_url(tmp_path):
    store = LocalImageStore(tmp_path, url_prefix="/uploads/")

    outcome = store.upload(_png_data_url(), folder="evidence/2026/10", file_name="a.jpg")

    assert outcome == Uploaded(url="/uploads/evidence/2026/10/a.jpg")
    data = (tmp_path / "evidence/2026/10/a.jpg").read_bytes()
    assert data[:2] == b"\xff\xd8"
    assert store.load(outcome.url) == data


def test_upload_of_garbage_falls_back(tmp_path):
    payload = "data:image/jpeg;base64,bm90IGFuIGltYWdl"

    outcome = LocalImageStore(tmp_path).upload(payload, folder="users")

    assert isinstance(outcome, Fallback)
    assert outcome.original == payload
    assert outcome.reason
    assert not any(tmp_path.iterdir())


def test_load_refuses_foreign_or_escaping_urls(tmp_path):
    store = LocalImageStore(tmp_path)
    (tmp_path.parent / "secret.jpg").write_bytes(b"x")

    assert store.load("https://cdn.example.com/a.jpg") is None
    assert store.load("/uploads/../secret.jpg") is None
    assert store.load("/uploads/missing.jpg") is None


def test_data_url_helpers():
    assert is_data_url("data:image/png;base64,AAAA")
    assert not is_data_url("/uploads/a.jpg")
    assert not is_data_url(None)
    assert strip_data_url("data:image/jpeg;base64,AAAA") == "AAAA"
    assert strip_data_url("AAAA") == "AAAA"


def test_oversized_image_falls_back(tmp_path, monkeypatch):
    # 4x4 pixels is more than twice this limit, which Pillow refuses to open
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 4)

    outcome = LocalImageStore(tmp_path).upload(_png_data_url(), folder="evidence", file_name="big.jpg")

    assert isinstance(outcome, Fallback)
    assert not any(tmp_path.iterdir())


def test_upload_refuses_names_escaping_the_root(tmp_path):
    root = tmp_path / "uploads"
    store = LocalImageStore(root)

    outcome = store.upload(_png_data_url(), folder="evidence/2026/10", file_name="../../../../escaped.jpg")

    assert isinstance(outcome, Fallback)
    assert not (tmp_path / "escaped.jpg").exists()
    assert not root.exists()
