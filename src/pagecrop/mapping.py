"""Selection to native-pixel crop region mapping."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pagecrop.typing.models import CropRegion

if TYPE_CHECKING:
    from pagecrop.typing.models import RenderGeometry, Selection


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def map_selection_to_source(selection: Selection, geometry: RenderGeometry) -> CropRegion:
    """Convert a container-relative selection into bitmap pixel coordinates.

    The selection is moved into surface coordinates (minus the surface offset,
    plus the container scroll), multiplied by the device scale, then clamped
    edge by edge to the bitmap. A selection that misses the surface yields an
    empty region.

    Args:
        selection: Rectangle drawn over the container.
        geometry: Snapshot from `resolve_render_geometry`.

    Returns:
        CropRegion: Region contained in the native bitmap.
    """
    scale = geometry.device_scale
    left = (selection.x - geometry.offset_x + geometry.scroll_left) * scale
    top = (selection.y - geometry.offset_y + geometry.scroll_top) * scale
    right = left + selection.width * scale
    bottom = top + selection.height * scale

    x0 = round(_clamp(left, 0, geometry.native_width))
    y0 = round(_clamp(top, 0, geometry.native_height))
    x1 = round(_clamp(right, 0, geometry.native_width))
    y1 = round(_clamp(bottom, 0, geometry.native_height))

    return CropRegion(x=x0, y=y0, width=max(0, x1 - x0), height=max(0, y1 - y0))
