"""Pytest marker auto-assignment by folder and shared image fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from PIL import Image

from pagecrop import logger
from pagecrop.typing.models import Box
from pagecrop.viewer import PageSurface, ScrollContainer

if TYPE_CHECKING:
    from collections.abc import Callable


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    """Mark collected tests located under tests/<marker>/."""
    target_dir = (Path(config.rootpath) / "tests" / marker).resolve()

    for item in items:
        try:
            path = Path(str(item.fspath)).resolve()
        except Exception:
            logger.warning(f"Could not resolve path for test item {item.name!s}; skipping {marker!s} marker")
            continue

        if path == target_dir or target_dir in path.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Apply directory-based markers to test items."""
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")


def _pattern_image(width: int, height: int) -> Image.Image:
    """Return an RGB image whose pixels encode their own coordinates."""
    data = bytearray()
    for y in range(height):
        for x in range(width):
            data.extend((x % 256, y % 256, (x * 7 + y * 13) % 256))
    return Image.frombytes("RGB", (width, height), bytes(data))


@pytest.fixture
def pattern_image() -> Callable[[int, int], Image.Image]:
    return _pattern_image


@pytest.fixture
def make_container() -> Callable[..., ScrollContainer]:
    """Build a container whose surface has the given native and displayed sizes."""

    def _make(
        *,
        native: tuple[int, int] = (200, 100),
        display: tuple[float, float] = (100.0, 50.0),
        offset: tuple[float, float] = (0.0, 0.0),
        scroll: tuple[float, float] = (0.0, 0.0),
    ) -> ScrollContainer:
        surface = PageSurface(
            image=_pattern_image(*native),
            box=Box(left=offset[0], top=offset[1], width=display[0], height=display[1]),
        )
        container = ScrollContainer(
            box=Box(left=0.0, top=0.0, width=offset[0] + display[0], height=offset[1] + display[1]),
        )
        container.mount(surface)
        container.scroll_to(*scroll)
        return container

    return _make
