"""Core domain model exports."""

from pagecrop.typing.models.diagram import CroppedImage, DiagramCrop, DiagramPayload, DiagramRecord
from pagecrop.typing.models.geometry import Box, CropRegion, Point, RenderGeometry, Selection

__all__ = [
    "Box",
    "CropRegion",
    "CroppedImage",
    "DiagramCrop",
    "DiagramPayload",
    "DiagramRecord",
    "Point",
    "RenderGeometry",
    "Selection",
]
