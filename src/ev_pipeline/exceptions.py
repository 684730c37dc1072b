# ========================
# src/ev_pipeline/exceptions.py
# ========================

"""
Pipeline Exceptions

Error types raised by the loader, the cleaner and the orchestrator.
"""

from typing import List


class PipelineError(Exception):
    """Base class for all EV pipeline errors."""


class LoadError(PipelineError):
    """The CSV resource could not be fetched or parsed."""


class LoadCancelledError(LoadError):
    """The load was cancelled before it finished."""

    def __init__(self, message: str = "Load cancelled"):
        super().__init__(message)


class MissingColumnsError(PipelineError):
    """Mapped columns are absent from the CSV header (strict mode only)."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required columns: {', '.join(self.missing)}")


class DatasetNotLoadedError(PipelineError):
    """A view was requested before a successful load."""
