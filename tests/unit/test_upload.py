from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from pagecrop.exceptions import UploadError
from pagecrop.extractor import extract_crop
from pagecrop.settings import Settings
from pagecrop.typing.models import CropRegion, DiagramCrop, DiagramPayload
from pagecrop.upload import DiagramUploader


def _settings(*, backend_url: str | None = "https://backend.test", api_key: str | None = "test-key") -> Settings:
    settings = Settings()
    settings.backend_url = backend_url
    settings.backend_api_key = api_key
    return settings


def _payload(pattern_image) -> DiagramPayload:
    image = extract_crop(pattern_image(16, 16), CropRegion(x=0, y=0, width=8, height=6))
    return DiagramPayload(
        problem_id="p-42",
        page_number=3,
        crop=DiagramCrop(x=12, y=34, width=56, height=78),
        image=image,
    )


def _patch_transport(monkeypatch, handler) -> None:
    monkeypatch.setattr(
        Settings,
        "build_async_client",
        lambda _self: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def test_upload_posts_multipart_and_returns_record(monkeypatch, pattern_image) -> None:
    seen: dict[str, httpx.Request] = {}

    def _handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(
            200,
            json={"success": True, "data": {"id": "p-42", "diagram_url": "https://storage.test/p-42.png"}},
        )

    _patch_transport(monkeypatch, _handler)
    payload = _payload(pattern_image)

    record = asyncio.run(DiagramUploader(_settings()).upload(payload))

    request = seen["request"]
    assert str(request.url) == "https://backend.test/functions/v1/upload"
    assert request.method == "POST"
    assert request.headers["Authorization"] == "Bearer test-key"
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    body = request.content
    assert b'name="problem_id"' in body
    assert b"p-42" in body
    assert b'filename="diagram-p-42-p3.png"' in body
    assert json.dumps(payload.crop.model_dump(mode="json")).encode() in body
    assert payload.image.to_bytes() in body

    assert record.image_url == "https://storage.test/p-42.png"
    assert record.page_number == 3
    assert record.image_data == payload.image.data_uri


def test_upload_requires_backend_url(pattern_image) -> None:
    uploader = DiagramUploader(_settings(backend_url=None))

    with pytest.raises(UploadError, match="BACKEND_URL"):
        asyncio.run(uploader.upload(_payload(pattern_image)))


def test_upload_requires_api_key(pattern_image) -> None:
    uploader = DiagramUploader(_settings(api_key=None))

    with pytest.raises(UploadError, match="BACKEND_API_KEY"):
        asyncio.run(uploader.upload(_payload(pattern_image)))


def test_upload_raises_on_error_status(monkeypatch, pattern_image) -> None:
    _patch_transport(monkeypatch, lambda request: httpx.Response(403, json={"error": "forbidden"}))

    with pytest.raises(UploadError, match="status 403"):
        asyncio.run(DiagramUploader(_settings()).upload(_payload(pattern_image)))


def test_upload_raises_when_backend_reports_failure(monkeypatch, pattern_image) -> None:
    _patch_transport(monkeypatch, lambda request: httpx.Response(200, json={"success": False, "error": "quota"}))

    with pytest.raises(UploadError, match="quota"):
        asyncio.run(DiagramUploader(_settings()).upload(_payload(pattern_image)))


def test_upload_raises_on_invalid_json(monkeypatch, pattern_image) -> None:
    _patch_transport(monkeypatch, lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(UploadError, match="invalid response"):
        asyncio.run(DiagramUploader(_settings()).upload(_payload(pattern_image)))


def test_upload_wraps_transport_errors(monkeypatch, pattern_image) -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    _patch_transport(monkeypatch, _handler)

    with pytest.raises(UploadError, match="connection refused"):
        asyncio.run(DiagramUploader(_settings()).upload(_payload(pattern_image)))


def test_upload_reports_timeouts(monkeypatch, pattern_image) -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    _patch_transport(monkeypatch, _handler)

    with pytest.raises(UploadError, match="timed out"):
        asyncio.run(DiagramUploader(_settings()).upload(_payload(pattern_image)))
