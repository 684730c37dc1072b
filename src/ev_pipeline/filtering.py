# ========================
# src/ev_pipeline/filtering.py
# ========================

"""
Record filtering by the year/state dropdown selection.
"""

from typing import Iterable, List

from .cleaning import to_number
from .schema import ALL, FilterSelection, Record


def filter_records(records: Iterable[Record], selection: FilterSelection) -> List[Record]:
    """
    Keep the records matching both halves of the selection.

    "All" disables a predicate; otherwise matching is exact. A year
    selection that is not a number matches nothing.
    """
    match_any_year = selection.year == ALL
    year = None if match_any_year else to_number(selection.year)
    match_any_state = selection.state == ALL

    return [
        record for record in records
        if (match_any_year or record.year == year)
        and (match_any_state or record.state == selection.state)
    ]
