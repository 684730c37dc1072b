# ========================
# src/ev_pipeline/loader.py
# ========================

"""
Dataset Loader

Wraps the CSV reader with a pending/success/failure status so callers can
tell whether data views can be rendered yet.
"""

import asyncio
import csv
import enum
import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional

from .exceptions import LoadError
from .ingestion import CSVReader

logger = logging.getLogger(__name__)


class LoadStatus(str, enum.Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class LoadResult:
    """Outcome of one load attempt: rows on success, an error string on failure."""

    status: LoadStatus
    rows: List[Dict[str, Any]] = field(default_factory=list)
    header: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is LoadStatus.SUCCESS


class DataLoader:
    """
    Loads a CSV resource once per call and tracks the load state.
    Failures are reported through the result, never raised.
    """

    def __init__(self, source: str, timeout: Optional[float] = None):
        """
        Initialize the loader.

        Args:
            source (str): Path or URL of the CSV resource
            timeout (float): Seconds to wait for a remote fetch
        """
        self.source = source
        self.timeout = timeout
        self.status = LoadStatus.PENDING
        self.error: Optional[str] = None
        self._cancel_event = threading.Event()

    def load(self) -> LoadResult:
        """
        Fetch and parse the resource.

        Returns:
            LoadResult: The parsed rows, or the error message.
        """
        self.status = LoadStatus.PENDING
        self.error = None

        reader = CSVReader(self.source, timeout=self.timeout, cancel_event=self._cancel_event)
        logger.info(f"Loading dataset from '{self.source}'...")
        try:
            rows = reader.read_all()
        except (LoadError, OSError, csv.Error, UnicodeDecodeError, ValueError) as e:
            return self.fail(str(e) or e.__class__.__name__)
        finally:
            # Consumes a cancel issued before or during this load
            self._cancel_event.clear()

        self.status = LoadStatus.SUCCESS
        logger.info(f"Loaded {len(rows)} rows from '{self.source}'")
        return LoadResult(status=self.status, rows=rows, header=reader.header)

    async def load_async(self) -> LoadResult:
        """Run ``load`` on a worker thread so the event loop stays free."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.load)

    def cancel(self) -> None:
        """
        Ask an in-progress or scheduled load to stop at the next row.
        The request is consumed by the next load to finish.
        """
        logger.info(f"Cancelling load of '{self.source}'")
        self._cancel_event.set()

    def fail(self, message: str) -> LoadResult:
        """Record a failed load and build its result."""
        self.status = LoadStatus.FAILURE
        self.error = message
        logger.error(f"Failed to load '{self.source}': {message}")
        return LoadResult(status=self.status, error=message)
