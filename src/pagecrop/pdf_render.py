"""PDF page rendering into page surfaces."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

try:
    import fitz
except Exception:  # pragma: no cover - optional dependency at runtime
    fitz: Any
    fitz = None

from PIL import Image

from pagecrop.exceptions import RenderError
from pagecrop.logging import get_logger
from pagecrop.typing.models import Box
from pagecrop.viewer import PageSurface

if TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)


def _require_fitz() -> Any:
    if fitz is None:
        raise RenderError(message="PyMuPDF is required for PDF rendering")
    return fitz


def count_pages(pdf_path: Path) -> int:
    """Return the number of pages in a PDF.

    Raises:
        RenderError: If PyMuPDF is unavailable or the file cannot be opened.
    """
    pymupdf = _require_fitz()
    try:
        with pymupdf.open(pdf_path) as doc:
            return len(doc)
    except Exception as exc:
        raise RenderError(message=f"Failed to open PDF: {pdf_path}") from exc


def render_page_surface(
    pdf_path: Path,
    page_number: int,
    *,
    scale: float,
    device_pixel_ratio: float,
    left: float = 0.0,
    top: float = 0.0,
) -> PageSurface:
    """Render one PDF page the way a high-density viewer would.

    The page is displayed at `scale` CSS pixels per PDF point and drawn at
    `scale * device_pixel_ratio` bitmap pixels per point.

    Args:
        pdf_path: PDF file to render.
        page_number: Page to render (1-based).
        scale: Viewer zoom.
        device_pixel_ratio: Bitmap pixels per CSS pixel.
        left: Screen x of the displayed page.
        top: Screen y of the displayed page.

    Raises:
        RenderError: If PyMuPDF is unavailable, the page is out of range or rendering fails.

    Returns:
        PageSurface: Rendered surface.
    """
    pymupdf = _require_fitz()
    if scale <= 0 or device_pixel_ratio <= 0:
        raise RenderError(message="scale and device_pixel_ratio must be positive")

    try:
        with pymupdf.open(pdf_path) as doc:
            if not 1 <= page_number <= len(doc):
                raise RenderError(message=f"Page {page_number} out of range (1-{len(doc)})")

            page = doc.load_page(page_number - 1)
            zoom = scale * device_pixel_ratio
            pix = page.get_pixmap(matrix=pymupdf.Matrix(zoom, zoom), alpha=False)
            image = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
            box = Box(
                left=left,
                top=top,
                width=page.rect.width * scale,
                height=page.rect.height * scale,
            )
    except RenderError:
        raise
    except Exception as exc:  # pragma: no cover - depends on file and fitz internals
        raise RenderError(message=f"Failed to render page {page_number} of {pdf_path}") from exc

    logger.info(
        "PDF page rendered",
        extra={"page": page_number, "native_size": image.size, "input_path": str(pdf_path)},
    )
    return PageSurface(image=image, box=box, page_number=page_number)
