# ========================
# src/ev_pipeline/ingestion.py
# ========================

"""
Data Ingestion Module

Reads the EV registration CSV (local file or HTTP URL) into header-keyed
rows, converting numeric-looking cells on the way.
"""

import csv
import io
import re
import logging
import threading
from typing import Dict, Iterator, List, Any, Optional

import requests

from .exceptions import LoadError, LoadCancelledError
from ..utils.config import is_url

logger = logging.getLogger(__name__)

NUMERIC_PATTERN = re.compile(r'^\s*-?(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$')
INTEGER_PATTERN = re.compile(r'^\s*-?\d+\s*$')


def convert_value(value: Optional[str]) -> Any:
    """
    Opportunistically type a raw CSV cell.

    Empty cells become None, numeric-looking cells become int or float,
    anything else is returned unchanged. Numbers too long for int/float
    conversion stay strings.
    """
    if value is None or value == '':
        return None
    try:
        if INTEGER_PATTERN.match(value):
            return int(value)
        if NUMERIC_PATTERN.match(value):
            return float(value)
    except (ValueError, OverflowError):
        return value
    return value


class CSVReader:
    """
    Reads a CSV resource row by row, using the first line as the header.
    """

    def __init__(self, source: str,
                 timeout: Optional[float] = None,
                 cancel_event: Optional[threading.Event] = None):
        """
        Initialize the CSV reader.

        Args:
            source (str): Path or http(s) URL of the CSV resource
            timeout (float): Seconds to wait for a remote fetch
            cancel_event (threading.Event): Set to abort an in-progress read
        """
        self.source = source
        self.timeout = timeout
        self.cancel_event = cancel_event
        self.header: List[str] = []
        self.rows_read = 0
        logger.info(f"Initialized CSVReader for source: {source}")

    def read_rows(self) -> Iterator[Dict[str, Any]]:
        """
        A generator that yields one dictionary per CSV line.

        Yields:
            dict: Column name -> typed cell value.
        """
        self.rows_read = 0
        try:
            with self._open() as f:
                reader = csv.DictReader(f)
                self.header = list(reader.fieldnames or [])
                logger.info(f"CSV header: {self.header}")

                for row in reader:
                    self._check_cancelled()
                    # Surplus cells on a ragged line land under the None key
                    row.pop(None, None)
                    self.rows_read += 1
                    yield {key: convert_value(value) for key, value in row.items()}

                logger.info(f"Total rows read: {self.rows_read}")

        except FileNotFoundError:
            logger.error(f"File '{self.source}' was not found")
            raise
        except LoadError:
            raise
        except Exception as e:
            logger.error(f"Error reading CSV source: {e}")
            raise

    def read_all(self) -> List[Dict[str, Any]]:
        """Read the whole resource into a list of rows."""
        return list(self.read_rows())

    def _open(self):
        if is_url(self.source):
            return io.StringIO(self._fetch())
        return open(self.source, 'r', newline='', encoding='utf-8-sig')

    def _fetch(self) -> str:
        """Download the remote CSV body."""
        self._check_cancelled()
        logger.info(f"Fetching {self.source} (timeout={self.timeout})")
        try:
            response = requests.get(self.source, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise LoadError(str(e)) from e
        return response.content.decode('utf-8-sig')

    def _check_cancelled(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise LoadCancelledError()
