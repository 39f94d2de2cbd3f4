"""Cropped image and problem diagram models."""

from __future__ import annotations

import base64
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from pagecrop.typing.models.geometry import CropRegion, Selection

PNG_MIME_TYPE = "image/png"


class CroppedImage(BaseModel):
    """PNG-encoded pixels of one crop region at native resolution."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    data: bytes = Field(repr=False)
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    region: CropRegion
    mime_type: str = PNG_MIME_TYPE

    @property
    def data_base64(self) -> str:
        """Return the encoded image as base64 text."""
        return base64.b64encode(self.data).decode("ascii")

    @property
    def data_uri(self) -> str:
        """Return a data URI suitable for previews."""
        return f"data:{self.mime_type};base64,{self.data_base64}"

    def to_bytes(self) -> bytes:
        """Return the encoded image bytes for upload."""
        return self.data


class DiagramCrop(BaseModel):
    """Selection stored alongside a problem diagram."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    x: float
    y: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)
    unit: Literal["px"] = "px"

    @classmethod
    def from_selection(cls, selection: Selection) -> DiagramCrop:
        """Copy a selection into the stored crop shape."""
        return cls(x=selection.x, y=selection.y, width=selection.width, height=selection.height)


class DiagramPayload(BaseModel):
    """Everything sent when saving a diagram for a problem."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    problem_id: str = Field(min_length=1)
    page_number: int = Field(ge=1)
    crop: DiagramCrop
    image: CroppedImage

    @property
    def filename(self) -> str:
        """Return the upload file name."""
        return f"diagram-{self.problem_id}-p{self.page_number}.png"


class DiagramRecord(BaseModel):
    """Diagram attached to a problem after a successful save."""

    model_config = ConfigDict(extra="forbid")

    problem_id: str
    page_number: int = Field(ge=1)
    crop: DiagramCrop
    image_url: str | None = None
    image_data: str | None = Field(default=None, repr=False)
