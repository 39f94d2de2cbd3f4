"""CLI entry point for PageCrop."""

from __future__ import annotations

import argparse
from pathlib import Path

from pagecrop import __version__, logger
from pagecrop.async_runner import run_async
from pagecrop.dependencies import ensure_cli_dependencies_for_crop, ensure_package_dependencies
from pagecrop.exceptions import PackageError, WorkflowError
from pagecrop.logging import configure_logging
from pagecrop.pdf_render import count_pages, render_page_surface
from pagecrop.session import CropSession
from pagecrop.settings import Settings, get_settings
from pagecrop.typing.enums import ImageEncoding
from pagecrop.typing.models import Box, CroppedImage, Point
from pagecrop.upload import DiagramUploader
from pagecrop.viewer import ScrollContainer


def _float_pair(value: str) -> tuple[float, float]:
    """Parse `X,Y`.

    Raises:
        argparse.ArgumentTypeError: If the value is not two numbers.
    """
    parts = [part.strip() for part in value.split(",")]
    try:
        x, y = (float(part) for part in parts)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected X,Y but got '{value}'") from exc
    return x, y


def _selection_rect(value: str) -> tuple[float, float, float, float]:
    """Parse `X,Y,W,H` with non-negative width and height.

    Raises:
        argparse.ArgumentTypeError: If the value is malformed.
    """
    parts = [part.strip() for part in value.split(",")]
    try:
        x, y, width, height = (float(part) for part in parts)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected X,Y,W,H but got '{value}'") from exc
    if width < 0 or height < 0:
        raise argparse.ArgumentTypeError("selection width and height must not be negative")
    return x, y, width, height


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="pagecrop")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    info_parser = subparsers.add_parser("info", help="Print the page count of a PDF")
    info_parser.add_argument("--input", required=True, type=Path, dest="input_path")

    crop_parser = subparsers.add_parser("crop", help="Crop a selected region of a PDF page to PNG")
    crop_parser.add_argument("--input", required=True, type=Path, dest="input_path")
    crop_parser.add_argument("--page", type=int, default=1)
    crop_parser.add_argument(
        "--selection",
        required=True,
        type=_selection_rect,
        help="Selection X,Y,W,H in container pixels",
    )
    crop_parser.add_argument("--scale", type=float, default=None)
    crop_parser.add_argument("--device-pixel-ratio", type=float, default=None, dest="device_pixel_ratio")
    crop_parser.add_argument(
        "--offset",
        type=_float_pair,
        default=(0.0, 0.0),
        help="Page position X,Y relative to the container; write negative values as --offset=-5,3",
    )
    crop_parser.add_argument(
        "--scroll",
        type=_float_pair,
        default=(0.0, 0.0),
        help="Container scroll X,Y; write negative values as --scroll=-5,3",
    )
    crop_parser.add_argument("--output", type=Path, default=None, dest="output_path")
    crop_parser.add_argument(
        "--encoding",
        type=ImageEncoding.from_str,
        default=ImageEncoding.BYTES,
        help="bytes (PNG file) or data_uri (text file)",
    )
    crop_parser.add_argument("--problem-id", default=None, dest="problem_id")
    crop_parser.add_argument("--upload", action="store_true")

    return parser


def _default_output_path(args: argparse.Namespace, settings: Settings) -> Path:
    suffix = ".txt" if args.encoding == ImageEncoding.DATA_URI else ".png"
    return Path(settings.output_dir) / f"{args.input_path.stem}-p{args.page}{suffix}"


def persist_crop(cropped: CroppedImage, output_path: Path, encoding: ImageEncoding) -> None:
    """Write a crop to disk as PNG bytes or as a data URI."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if encoding == ImageEncoding.DATA_URI:
        output_path.write_text(cropped.data_uri, encoding="utf-8")
    else:
        output_path.write_bytes(cropped.to_bytes())


def run_crop(args: argparse.Namespace, settings: Settings) -> CropSession:
    """Drive a crop session from parsed CLI arguments.

    Args:
        args (argparse.Namespace): Parsed `crop` arguments.
        settings (Settings): Runtime settings.

    Raises:
        WorkflowError: If the page does not exist or upload lacks a problem id.

    Returns:
        CropSession: Session in `cropped` state.
    """
    if args.upload and not args.problem_id:
        raise WorkflowError(message="--upload requires --problem-id")

    session = CropSession.from_settings(settings)
    session.load_document(count_pages(args.input_path))
    if not session.change_page(args.page):
        raise WorkflowError(message=f"Page {args.page} out of range (1-{session.num_pages})")
    if args.scale is not None:
        session.set_scale(args.scale)

    offset_x, offset_y = args.offset
    surface = render_page_surface(
        args.input_path,
        session.current_page,
        scale=session.scale,
        device_pixel_ratio=args.device_pixel_ratio or settings.device_pixel_ratio,
        left=offset_x,
        top=offset_y,
    )
    container = ScrollContainer(
        box=Box(left=0.0, top=0.0, width=surface.box.right, height=surface.box.bottom),
    )
    container.mount(surface)
    container.scroll_to(*args.scroll)

    x, y, width, height = args.selection
    session.pointer_down(Point(x=x, y=y))
    session.pointer_move(Point(x=x + width, y=y + height))
    session.pointer_up()

    session.crop(container)
    return session


def upload_crop(session: CropSession, settings: Settings, problem_id: str) -> None:
    """Save the session crop as the diagram of `problem_id`."""
    run_async(session.save(DiagramUploader(settings), problem_id))


def main() -> int:
    """Run the CLI.

    Returns:
        int: Exit code (0 for success, 1 for error).
    """
    ensure_package_dependencies()
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args()

    if args.command not in {"info", "crop"}:
        parser.print_help()
        return 0

    ensure_cli_dependencies_for_crop(upload=getattr(args, "upload", False))

    try:
        if args.command == "info":
            print(count_pages(args.input_path))  # noqa: T201
            return 0

        session = run_crop(args, settings)
        if session.cropped_image is None:
            return 1
        output_path = args.output_path or _default_output_path(args, settings)
        persist_crop(session.cropped_image, output_path, args.encoding)
        if args.upload:
            upload_crop(session, settings, args.problem_id)
    except PackageError as exc:
        logger.error("Crop failed", extra={"reason": str(exc)})
        return 1
    except KeyboardInterrupt:
        logger.info("Crop aborted by user")
        return 130

    logger.info(
        "Crop completed",
        extra={
            "output_path": str(output_path),
            "state": session.state.to_str(),
            "image_url": session.diagram.image_url if session.diagram else None,
        },
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
