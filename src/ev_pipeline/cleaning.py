# ========================
# src/ev_pipeline/cleaning.py
# ========================

"""
Data Cleaning Module

Turns loosely-typed CSV rows into typed EV registration records.
"""

import math
import logging
from typing import Dict, Iterable, List, Optional, Any

from .exceptions import MissingColumnsError
from .schema import ColumnMapping, Record, UNKNOWN, OTHER

logger = logging.getLogger(__name__)


def to_number(value: Any) -> Optional[float]:
    """
    Parse a cell as a finite number.

    Returns None for empty, non-numeric or non-finite values.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except (ValueError, OverflowError):
            return None
    else:
        return None
    return number if math.isfinite(number) else None


class RecordCleaner:
    """
    Applies the field mapping, drop rule and defaults to raw rows.
    Rows without a usable model year are dropped; every other field falls
    back to a default.
    """

    def __init__(self, columns: Optional[ColumnMapping] = None, strict_columns: bool = False):
        """
        Initialize the record cleaner.

        Args:
            columns (ColumnMapping): CSV header for each record field
            strict_columns (bool): Raise on missing columns instead of defaulting
        """
        self.columns = columns or ColumnMapping()
        self.strict_columns = strict_columns
        self.records_processed = 0
        self.records_dropped = 0
        logger.info("RecordCleaner initialized")

    def validate_columns(self, header: Iterable[str]) -> List[str]:
        """
        Check the CSV header against the column mapping.

        Returns:
            list[str]: Mapped columns that are absent from the header.

        Raises:
            MissingColumnsError: In strict mode, when any column is missing.
        """
        present = set(header)
        missing = [name for name in self.columns.columns().values() if name not in present]
        if missing:
            if self.strict_columns:
                raise MissingColumnsError(missing)
            logger.warning(f"CSV is missing columns {missing}; defaults will apply")
        return missing

    def clean(self, rows: Iterable[Dict[str, Any]]) -> List[Record]:
        """Clean every row, keeping input order and dropping invalid ones."""
        cleaned = []
        for row in rows:
            record = self.clean_record(row)
            if record is not None:
                cleaned.append(record)
        logger.info(
            f"Cleaned {len(cleaned)} records "
            f"({self.records_dropped} dropped of {self.records_processed} processed)"
        )
        return cleaned

    def clean_record(self, row: Dict[str, Any]) -> Optional[Record]:
        """
        Build a Record from one raw row.

        Returns:
            Record or None: None when the row has no valid model year.
        """
        self.records_processed += 1
        columns = self.columns

        year = self._clean_year(row.get(columns.year))
        if year is None:
            self.records_dropped += 1
            logger.debug(f"Record dropped due to missing or malformed year: {row}")
            return None

        return Record(
            year=year,
            state=self._clean_string(row.get(columns.state), UNKNOWN),
            make=self._clean_string(row.get(columns.make), UNKNOWN),
            model=self._clean_string(row.get(columns.model), UNKNOWN),
            vehicle_type=self._clean_string(row.get(columns.vehicle_type), OTHER),
            range=self._clean_range(row.get(columns.range)),
        )

    def _clean_year(self, value: Any) -> Optional[int]:
        """A year must be a non-zero whole number."""
        number = to_number(value)
        if not number or not number.is_integer():
            return None
        return int(number)

    def _clean_string(self, value: Any, default: str) -> str:
        if value is None:
            return default
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        text = str(value).strip()
        return text or default

    def _clean_range(self, value: Any) -> float:
        number = to_number(value)
        if number is None or number < 0:
            return 0
        return int(number) if number.is_integer() else number

    def get_statistics(self) -> Dict[str, Any]:
        """Get cleaning statistics."""
        return {
            'records_processed': self.records_processed,
            'records_dropped': self.records_dropped,
            'records_cleaned': self.records_processed - self.records_dropped,
            'success_rate': (self.records_processed - self.records_dropped) / self.records_processed * 100 if self.records_processed > 0 else 0
        }


def clean(rows: Iterable[Dict[str, Any]], columns: Optional[ColumnMapping] = None) -> List[Record]:
    """Clean raw rows with a fresh cleaner."""
    return RecordCleaner(columns).clean(rows)
