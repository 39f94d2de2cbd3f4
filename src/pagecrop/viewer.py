"""In-memory page surface and scroll container."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pagecrop.typing.models import Box

if TYPE_CHECKING:
    from PIL import Image


@dataclass
class PageSurface:
    """A page bitmap and the CSS box it is displayed in.

    The bitmap is usually larger than the box: it is drawn at
    `device_pixel_ratio` pixels per CSS pixel to stay sharp when zoomed.
    """

    image: Image.Image
    box: Box
    page_number: int = 1

    @property
    def native_size(self) -> tuple[int, int]:
        """Return bitmap size in native pixels."""
        return self.image.size

    def bounding_box(self) -> Box:
        """Return the displayed box in screen coordinates."""
        return self.box

    def to_image(self) -> Image.Image:
        """Return the native bitmap."""
        return self.image


@dataclass
class ScrollContainer:
    """Scrollable viewport that shows one page surface."""

    box: Box
    surface: PageSurface | None = None
    scroll_left: float = 0.0
    scroll_top: float = 0.0

    def bounding_box(self) -> Box:
        """Return the container box in screen coordinates."""
        return self.box

    def find_surface(self) -> PageSurface | None:
        """Return the mounted surface, if any."""
        return self.surface

    def scroll_to(self, left: float, top: float) -> None:
        """Set the scroll offsets; negative values clamp to 0."""
        self.scroll_left = max(0.0, left)
        self.scroll_top = max(0.0, top)

    def mount(self, surface: PageSurface) -> None:
        """Show a freshly rendered surface and reset scrolling."""
        self.surface = surface
        self.scroll_to(0.0, 0.0)

    def unmount(self) -> None:
        """Drop the current surface, as while a new page is loading."""
        self.surface = None
