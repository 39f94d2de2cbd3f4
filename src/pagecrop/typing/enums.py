"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class CropState(_EnumMixin):
    """Stage of the crop workflow for the problem being annotated."""

    IDLE = "idle"
    SELECTING = "selecting"
    SELECTION_READY = "selection_ready"
    CROPPED = "cropped"
    SAVED = "saved"


class ImageEncoding(_EnumMixin):
    """How a cropped image is handed to the caller."""

    DATA_URI = "data_uri"
    BYTES = "bytes"
