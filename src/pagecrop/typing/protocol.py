"""Viewer interfaces consumed by the geometry resolver."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from PIL import Image

    from pagecrop.typing.models import Box


class RenderSurface(Protocol):
    """A rendered page drawn at native resolution and displayed in a CSS box."""

    @property
    def native_size(self) -> tuple[int, int]:
        """Return the bitmap size as `(width, height)` in native pixels."""

    def bounding_box(self) -> Box:
        """Return the displayed box in screen coordinates."""

    def to_image(self) -> Image.Image:
        """Return the full native bitmap."""


class ViewerContainer(Protocol):
    """Scrollable container hosting at most one render surface."""

    @property
    def scroll_left(self) -> float:
        """Return the horizontal scroll offset."""

    @property
    def scroll_top(self) -> float:
        """Return the vertical scroll offset."""

    def bounding_box(self) -> Box:
        """Return the container box in screen coordinates."""

    def find_surface(self) -> RenderSurface | None:
        """Return the rendered surface, or None while the page is loading."""
