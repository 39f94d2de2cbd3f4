"""Crop extraction: copy a native-pixel window and encode it as PNG."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

from pagecrop.exceptions import DegenerateSelectionError, ExtractionError
from pagecrop.geometry import resolve_render_geometry
from pagecrop.logging import get_logger
from pagecrop.mapping import map_selection_to_source
from pagecrop.typing.models import CroppedImage

if TYPE_CHECKING:
    from PIL import Image

    from pagecrop.typing.models import CropRegion, Selection
    from pagecrop.typing.protocol import ViewerContainer

logger = get_logger(__name__)


def extract_crop(source: Image.Image, region: CropRegion) -> CroppedImage:
    """Copy `region` out of `source` 1:1 and encode it as PNG.

    Args:
        source: Full page bitmap at native resolution.
        region: Region in native pixels.

    Raises:
        DegenerateSelectionError: If the region has zero area.
        ExtractionError: If the region overflows the bitmap or Pillow fails.

    Returns:
        CroppedImage: Encoded crop.
    """
    if region.is_empty:
        raise DegenerateSelectionError

    width, height = source.size
    if not region.fits_within(width, height):
        raise ExtractionError(message=f"Crop region {region.box} exceeds bitmap size {width}x{height}")

    buffer = io.BytesIO()
    try:
        cropped = source.crop(region.box)
        cropped.load()
        cropped.save(buffer, format="PNG")
    except (OSError, ValueError) as exc:
        raise ExtractionError(message=f"Failed to crop the selected area: {exc}") from exc

    logger.info(
        "Crop extracted",
        extra={"region": region.box, "bytes": buffer.tell()},
    )
    return CroppedImage(
        data=buffer.getvalue(),
        width=region.width,
        height=region.height,
        region=region,
    )


def crop_selection(container: ViewerContainer, selection: Selection) -> CroppedImage:
    """Resolve geometry, map the selection and extract the crop.

    Args:
        container: Scroll container hosting the rendered page.
        selection: Rectangle drawn over the container.

    Returns:
        CroppedImage: Encoded crop.
    """
    geometry = resolve_render_geometry(container)
    region = map_selection_to_source(selection, geometry)
    if region.is_empty:
        raise DegenerateSelectionError

    surface = container.find_surface()
    if surface is None:
        raise ExtractionError(message="Rendered page surface disappeared before cropping")
    return extract_crop(surface.to_image(), region)
