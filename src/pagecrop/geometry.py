"""Measure a rendered page surface against its scroll container."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pagecrop.exceptions import GeometryUnavailableError
from pagecrop.logging import get_logger
from pagecrop.typing.models import RenderGeometry

if TYPE_CHECKING:
    from pagecrop.typing.protocol import ViewerContainer

logger = get_logger(__name__)


def resolve_render_geometry(container: ViewerContainer) -> RenderGeometry:
    """Snapshot the surface position, scroll offsets and device scale.

    The device scale is `native_width / displayed_width`, read fresh on every
    call since zoom and scroll change between selections.

    Args:
        container: Scroll container hosting the rendered page.

    Raises:
        GeometryUnavailableError: If no surface is mounted or it has no displayed size.

    Returns:
        RenderGeometry: Geometry snapshot.
    """
    surface = container.find_surface()
    if surface is None:
        raise GeometryUnavailableError

    surface_box = surface.bounding_box()
    if surface_box.width <= 0 or surface_box.height <= 0:
        raise GeometryUnavailableError(message="Rendered page surface has no displayed size")

    container_box = container.bounding_box()
    native_width, native_height = surface.native_size

    geometry = RenderGeometry(
        surface_box=surface_box,
        container_box=container_box,
        offset_x=surface_box.left - container_box.left,
        offset_y=surface_box.top - container_box.top,
        scroll_left=container.scroll_left,
        scroll_top=container.scroll_top,
        native_width=native_width,
        native_height=native_height,
        device_scale=native_width / surface_box.width,
    )
    logger.debug(
        "Render geometry resolved",
        extra={
            "offset": (geometry.offset_x, geometry.offset_y),
            "scroll": (geometry.scroll_left, geometry.scroll_top),
            "native_size": (native_width, native_height),
            "device_scale": geometry.device_scale,
        },
    )
    return geometry
