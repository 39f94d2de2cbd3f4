"""PageCrop package."""

from pagecrop.async_runner import run_async
from pagecrop.exceptions import (
    AsyncExecutionError,
    DegenerateSelectionError,
    DependencyError,
    ExtractionError,
    GeometryUnavailableError,
    PackageError,
    RenderError,
    SettingsError,
    UploadError,
    WorkflowError,
)
from pagecrop.logging import configure_logging, get_logger
from pagecrop.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("pagecrop")

__all__ = [
    "AsyncExecutionError",
    "DegenerateSelectionError",
    "DependencyError",
    "ExtractionError",
    "GeometryUnavailableError",
    "PackageError",
    "RenderError",
    "Settings",
    "SettingsError",
    "UploadError",
    "WorkflowError",
    "__version__",
    "configure_logging",
    "get_logger",
    "get_settings",
    "logger",
    "run_async",
]
