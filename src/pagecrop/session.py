"""Crop workflow for one problem being annotated."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pagecrop.exceptions import DegenerateSelectionError, UploadError, WorkflowError
from pagecrop.extractor import crop_selection
from pagecrop.logging import get_logger
from pagecrop.typing.enums import CropState
from pagecrop.typing.models import DiagramCrop, DiagramPayload, Selection

if TYPE_CHECKING:
    from pagecrop.settings import Settings
    from pagecrop.typing.models import CroppedImage, DiagramRecord, Point
    from pagecrop.typing.protocol import ViewerContainer
    from pagecrop.upload import DiagramUploader

logger = get_logger(__name__)


class CropSession:
    """Track page, zoom, selection and crop for a document viewer.

    States move `idle -> selecting -> selection_ready -> cropped -> saved`.
    Changing page returns to `idle` from anywhere and drops the selection and
    any unsaved crop. Failed crops and uploads leave the state untouched so
    the user can retry.
    """

    def __init__(
        self,
        *,
        default_scale: float = 1.5,
        min_scale: float = 0.5,
        max_scale: float = 2.0,
        scale_step: float = 0.1,
    ) -> None:
        """Initialize an empty session."""
        self.min_scale = min_scale
        self.max_scale = max_scale
        self.scale_step = scale_step
        self.num_pages = 0
        self.current_page = 1
        self.scale = default_scale
        self.state = CropState.IDLE
        self.selection: Selection | None = None
        self.start_point: Point | None = None
        self.cropped_image: CroppedImage | None = None
        self.diagram: DiagramRecord | None = None
        self.is_saving = False

    @classmethod
    def from_settings(cls, settings: Settings) -> CropSession:
        """Build a session using configured zoom bounds."""
        return cls(
            default_scale=settings.default_scale,
            min_scale=settings.min_scale,
            max_scale=settings.max_scale,
            scale_step=settings.scale_step,
        )

    @property
    def is_selecting(self) -> bool:
        """Return whether a drag is in progress."""
        return self.state == CropState.SELECTING

    @property
    def can_crop(self) -> bool:
        """Return whether the crop action should be enabled."""
        return (
            self.state in {CropState.SELECTION_READY, CropState.CROPPED}
            and self.selection is not None
            and not self.selection.is_empty
        )

    @property
    def can_save(self) -> bool:
        """Return whether the save action should be enabled."""
        return self.state == CropState.CROPPED and self.cropped_image is not None and not self.is_saving

    def load_document(self, num_pages: int) -> None:
        """Reset the session for a newly loaded document."""
        if num_pages < 0:
            raise WorkflowError(message="num_pages must not be negative")
        self.num_pages = num_pages
        self.current_page = 1
        self.reset()

    def change_page(self, page: int) -> bool:
        """Navigate to `page`; out-of-range pages are ignored.

        Returns:
            bool: True when the page changed.
        """
        if not 1 <= page <= self.num_pages:
            return False
        self.current_page = page
        self.reset()
        return True

    def next_page(self) -> bool:
        """Navigate forward one page."""
        return self.change_page(self.current_page + 1)

    def previous_page(self) -> bool:
        """Navigate back one page."""
        return self.change_page(self.current_page - 1)

    def set_scale(self, value: float) -> float:
        """Set the zoom, clamped to the configured bounds."""
        self.scale = max(self.min_scale, min(self.max_scale, round(value, 2)))
        return self.scale

    def zoom_in(self) -> float:
        """Increase the zoom by one step."""
        return self.set_scale(self.scale + self.scale_step)

    def zoom_out(self) -> float:
        """Decrease the zoom by one step."""
        return self.set_scale(self.scale - self.scale_step)

    def pointer_down(self, point: Point) -> None:
        """Start a new selection drag."""
        self.start_point = point
        self.selection = None
        self.cropped_image = None
        self.state = CropState.SELECTING

    def pointer_move(self, point: Point) -> Selection | None:
        """Update the selection while dragging."""
        if not self.is_selecting or self.start_point is None:
            return self.selection
        self.selection = Selection.from_points(self.start_point, point)
        return self.selection

    def pointer_up(self) -> None:
        """Finish the drag."""
        if not self.is_selecting:
            return
        if self.selection is not None and not self.selection.is_empty:
            self.state = CropState.SELECTION_READY
        else:
            self.selection = None
            self.state = CropState.IDLE

    def crop(self, container: ViewerContainer) -> CroppedImage:
        """Crop the current selection from the rendered page.

        Raises:
            DegenerateSelectionError: If there is nothing to crop.

        Returns:
            CroppedImage: The crop, also kept on the session for preview.
        """
        if not self.can_crop or self.selection is None:
            raise DegenerateSelectionError(message="No selection to crop")

        cropped = crop_selection(container, self.selection)
        self.cropped_image = cropped
        self.state = CropState.CROPPED
        return cropped

    def build_payload(self, problem_id: str) -> DiagramPayload:
        """Package the current crop for saving against `problem_id`."""
        if not problem_id:
            raise WorkflowError(message="A problem id is required to save a diagram")
        if self.cropped_image is None or self.selection is None:
            raise WorkflowError(message="Crop a selection before saving")
        return DiagramPayload(
            problem_id=problem_id,
            page_number=self.current_page,
            crop=DiagramCrop.from_selection(self.selection),
            image=self.cropped_image,
        )

    async def save(self, uploader: DiagramUploader, problem_id: str) -> DiagramRecord:
        """Upload the current crop as the problem's diagram.

        Raises:
            WorkflowError: If nothing is cropped, a save is running or the problem id is empty.
            UploadError: If the upload fails; the crop is kept for retry.

        Returns:
            DiagramRecord: Stored diagram.
        """
        if self.is_saving:
            raise WorkflowError(message="A diagram save is already in progress")
        if self.state != CropState.CROPPED:
            raise WorkflowError(message=f"Cannot save diagram from state '{self.state}'")
        payload = self.build_payload(problem_id)

        self.is_saving = True
        try:
            record = await uploader.upload(payload)
        except UploadError:
            logger.warning("Diagram save failed", extra={"problem_id": problem_id})
            raise
        finally:
            self.is_saving = False

        self.diagram = record
        self.state = CropState.SAVED
        return record

    def reset(self) -> None:
        """Discard the selection and any unsaved crop."""
        self.selection = None
        self.start_point = None
        self.cropped_image = None
        self.state = CropState.IDLE
