# ========================
# src/ev_pipeline/options.py
# ========================

"""
Dropdown option lists derived from the cleaned dataset.
"""

from typing import Iterable

from .schema import ALL, FilterOptions, Record


def derive_filter_options(records: Iterable[Record]) -> FilterOptions:
    """
    Distinct years (ascending) and states (lexicographic), each behind "All".

    Computed from the cleaned set, never the filtered one, so picking a
    year does not shrink the state list and vice versa.
    """
    years = set()
    states = set()
    for record in records:
        years.add(record.year)
        states.add(record.state)
    return FilterOptions(years=[ALL, *sorted(years)], states=[ALL, *sorted(states)])
