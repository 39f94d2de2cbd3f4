"""Diagram upload to the backend's serverless function."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from pagecrop.exceptions import UploadError
from pagecrop.logging import get_logger
from pagecrop.typing.models import DiagramRecord

if TYPE_CHECKING:
    from pagecrop.settings import Settings
    from pagecrop.typing.models import DiagramPayload

logger = get_logger(__name__)


class _UploadData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    diagram_url: str | None = None


class _UploadResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: bool
    data: _UploadData | None = None
    error: str | None = None


class DiagramUploader:
    """Send cropped diagrams as multipart uploads."""

    def __init__(self, settings: Settings) -> None:
        """Initialize uploader.

        Args:
            settings (Settings): Runtime settings.
        """
        self._settings = settings

    def _request_parts(self, payload: DiagramPayload) -> tuple[dict[str, str], dict[str, tuple[str, bytes, str]]]:
        data = {
            "problem_id": payload.problem_id,
            "page_number": str(payload.page_number),
            "crop": json.dumps(payload.crop.model_dump(mode="json")),
        }
        files = {"image": (payload.filename, payload.image.to_bytes(), payload.image.mime_type)}
        return data, files

    async def upload(self, payload: DiagramPayload) -> DiagramRecord:
        """Upload one diagram and return the stored record.

        Args:
            payload (DiagramPayload): Diagram to store.

        Raises:
            UploadError: If the endpoint is misconfigured, unreachable or rejects the upload.

        Returns:
            DiagramRecord: Diagram as stored by the backend.
        """
        endpoint = self._settings.diagram_endpoint
        if not endpoint:
            raise UploadError(message="BACKEND_URL is required to upload diagrams")
        if not self._settings.backend_api_key:
            raise UploadError(message="BACKEND_API_KEY is required to upload diagrams")

        data, files = self._request_parts(payload)
        headers = {"Authorization": f"Bearer {self._settings.backend_api_key}"}

        try:
            async with self._settings.build_async_client() as client:
                response = await client.post(endpoint, data=data, files=files, headers=headers)
        except httpx.TimeoutException as exc:
            raise UploadError(message="Diagram upload timed out") from exc
        except httpx.HTTPError as exc:
            raise UploadError(message=f"Diagram upload failed: {exc}") from exc

        if response.is_error:
            raise UploadError(message="Diagram upload was rejected", status_code=response.status_code)

        try:
            body = _UploadResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise UploadError(message="Diagram upload returned an invalid response") from exc

        if not body.success:
            raise UploadError(message=body.error or "Diagram upload was not accepted")

        image_url = body.data.diagram_url if body.data else None
        logger.info(
            "Diagram uploaded",
            extra={"problem_id": payload.problem_id, "page": payload.page_number, "image_url": image_url},
        )
        return DiagramRecord(
            problem_id=payload.problem_id,
            page_number=payload.page_number,
            crop=payload.crop,
            image_url=image_url,
            image_data=payload.image.data_uri,
        )
