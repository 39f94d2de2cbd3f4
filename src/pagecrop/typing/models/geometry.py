"""Screen and bitmap geometry models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Point(BaseModel):
    """Pointer position relative to the viewing container."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    x: float
    y: float


class Box(BaseModel):
    """Axis-aligned box in screen pixels."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    left: float
    top: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)

    @property
    def right(self) -> float:
        """Return the right edge."""
        return self.left + self.width

    @property
    def bottom(self) -> float:
        """Return the bottom edge."""
        return self.top + self.height


class Selection(BaseModel):
    """User-drawn rectangle in container-relative screen pixels."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    x: float
    y: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)

    @classmethod
    def from_points(cls, start: Point, end: Point) -> Selection:
        """Build a normalized selection from drag start and current pointer.

        The origin is the min corner; extents are absolute, so dragging up or
        left yields the same rectangle as dragging down or right.

        Args:
            start: Pointer position when the drag began.
            end: Current pointer position.

        Returns:
            Selection: Normalized rectangle.
        """
        return cls(
            x=min(start.x, end.x),
            y=min(start.y, end.y),
            width=abs(end.x - start.x),
            height=abs(end.y - start.y),
        )

    @property
    def is_empty(self) -> bool:
        """Return whether the selection has zero area."""
        return self.width <= 0 or self.height <= 0


class RenderGeometry(BaseModel):
    """Snapshot of where a rendered surface sits inside its container."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    surface_box: Box
    container_box: Box
    offset_x: float
    offset_y: float
    scroll_left: float
    scroll_top: float
    native_width: int = Field(ge=0)
    native_height: int = Field(ge=0)
    device_scale: float = Field(gt=0)


class CropRegion(BaseModel):
    """Rectangle in native bitmap pixels."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    x: int = Field(ge=0)
    y: int = Field(ge=0)
    width: int = Field(ge=0)
    height: int = Field(ge=0)

    @property
    def is_empty(self) -> bool:
        """Return whether there is nothing to crop."""
        return self.width == 0 or self.height == 0

    @property
    def box(self) -> tuple[int, int, int, int]:
        """Return `(left, upper, right, lower)` as used by Pillow."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def fits_within(self, width: int, height: int) -> bool:
        """Return whether the region lies inside a `width` x `height` bitmap."""
        return self.x + self.width <= width and self.y + self.height <= height
