"""Typing-centric domain modules."""

from pagecrop.typing.enums import CropState, ImageEncoding
from pagecrop.typing.models import (
    Box,
    CroppedImage,
    CropRegion,
    DiagramCrop,
    DiagramPayload,
    DiagramRecord,
    Point,
    RenderGeometry,
    Selection,
)
from pagecrop.typing.protocol import RenderSurface, ViewerContainer

__all__ = [
    "Box",
    "CropRegion",
    "CropState",
    "CroppedImage",
    "DiagramCrop",
    "DiagramPayload",
    "DiagramRecord",
    "ImageEncoding",
    "Point",
    "RenderGeometry",
    "RenderSurface",
    "Selection",
    "ViewerContainer",
]
