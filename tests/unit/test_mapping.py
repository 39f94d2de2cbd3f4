from __future__ import annotations

import pytest

from pagecrop.mapping import map_selection_to_source
from pagecrop.typing.models import Box, CropRegion, RenderGeometry, Selection


def _geometry(
    *,
    native: tuple[int, int],
    display_width: float,
    offset: tuple[float, float] = (0.0, 0.0),
    scroll: tuple[float, float] = (0.0, 0.0),
) -> RenderGeometry:
    scale = native[0] / display_width
    return RenderGeometry(
        surface_box=Box(left=offset[0], top=offset[1], width=display_width, height=native[1] / scale),
        container_box=Box(left=0.0, top=0.0, width=2000.0, height=2000.0),
        offset_x=offset[0],
        offset_y=offset[1],
        scroll_left=scroll[0],
        scroll_top=scroll[1],
        native_width=native[0],
        native_height=native[1],
        device_scale=scale,
    )


def test_maps_scrolled_and_offset_selection_with_device_scale() -> None:
    geometry = _geometry(native=(1600, 2000), display_width=800, offset=(10, 20), scroll=(0, 50))
    selection = Selection(x=100, y=100, width=50, height=40)

    region = map_selection_to_source(selection, geometry)

    assert region == CropRegion(x=180, y=260, width=100, height=80)


def test_caps_width_at_right_edge_of_bitmap() -> None:
    geometry = _geometry(native=(1000, 1200), display_width=1000)
    selection = Selection(x=980, y=10, width=60, height=30)

    region = map_selection_to_source(selection, geometry)

    assert region == CropRegion(x=980, y=10, width=20, height=30)


@pytest.mark.parametrize("scale_display", [400.0, 500.0, 800.0, 1000.0])
def test_inside_selection_scales_extents(scale_display: float) -> None:
    geometry = _geometry(native=(1000, 1000), display_width=scale_display)
    selection = Selection(x=10, y=20, width=30, height=25)

    region = map_selection_to_source(selection, geometry)

    assert abs(region.width - selection.width * geometry.device_scale) <= 1
    assert abs(region.height - selection.height * geometry.device_scale) <= 1
    assert region.fits_within(geometry.native_width, geometry.native_height)


def test_origin_above_left_of_surface_clamps_to_zero() -> None:
    geometry = _geometry(native=(400, 400), display_width=200, offset=(50, 60))
    selection = Selection(x=20, y=30, width=100, height=100)

    region = map_selection_to_source(selection, geometry)

    assert region.x == 0
    assert region.y == 0
    # Only the part overlapping the surface remains: (120 - 50) * 2 and (130 - 60) * 2.
    assert region.width == 140
    assert region.height == 140


@pytest.mark.parametrize(
    "selection",
    [
        Selection(x=500, y=10, width=40, height=40),
        Selection(x=10, y=900, width=40, height=40),
        Selection(x=-300, y=10, width=40, height=40),
        Selection(x=10, y=-300, width=40, height=40),
    ],
)
def test_selection_outside_surface_is_empty(selection: Selection) -> None:
    geometry = _geometry(native=(400, 400), display_width=200)

    region = map_selection_to_source(selection, geometry)

    assert region.is_empty
    assert region.x >= 0
    assert region.y >= 0
    assert region.fits_within(400, 400)


def test_mapping_is_pure() -> None:
    geometry = _geometry(native=(1234, 987), display_width=617, offset=(3.5, 7.25), scroll=(11, 13))
    selection = Selection(x=40.5, y=33.3, width=120.2, height=80.9)

    assert map_selection_to_source(selection, geometry) == map_selection_to_source(selection, geometry)


def test_selection_covering_whole_surface_maps_to_full_bitmap() -> None:
    geometry = _geometry(native=(300, 150), display_width=150, offset=(5, 5))
    selection = Selection(x=0, y=0, width=400, height=400)

    region = map_selection_to_source(selection, geometry)

    assert region == CropRegion(x=0, y=0, width=300, height=150)
