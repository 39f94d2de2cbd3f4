"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class AsyncExecutionError(PackageError):
    """Raised when a coroutine fails inside the sync bridge."""

    result: BaseException
    message: str = "Async operation failed"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.result}"


@dataclass(frozen=True)
class DependencyError(PackageError):
    """Raised when optional runtime dependencies are missing."""

    missing_package: list[str]
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Missing runtime dependencies for '{self.message}': {', '.join(self.missing_package)}"


@dataclass(frozen=True)
class GeometryUnavailableError(PackageError):
    """Raised when no rendered surface can be measured (document still loading)."""

    message: str = "No rendered page surface is available"

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class DegenerateSelectionError(PackageError):
    """Raised when a selection maps to a zero-area crop region."""

    message: str = "Selection does not cover any page pixels"

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class ExtractionError(PackageError):
    """Raised when copying or encoding the cropped pixels fails."""

    message: str = "Failed to crop the selected area"

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class RenderError(PackageError):
    """Raised when a PDF page cannot be rendered."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class UploadError(PackageError):
    """Raised when a diagram upload fails."""

    message: str
    status_code: int | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        if self.status_code is None:
            return self.message
        return f"{self.message} (status {self.status_code})"


@dataclass(frozen=True)
class WorkflowError(PackageError):
    """Raised when a crop workflow step is requested from the wrong state."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message
