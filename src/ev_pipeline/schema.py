# ========================
# src/ev_pipeline/schema.py
# ========================

"""
Data Model

Typed records, filter selection and the derived aggregate views that the
pipeline hands to the presentation layer.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Union

ALL = "All"
UNKNOWN = "Unknown"
OTHER = "Other"


@dataclass(frozen=True)
class ColumnMapping:
    """Maps CSV headers onto Record fields."""

    year: str = "Model Year"
    state: str = "State"
    make: str = "Make"
    model: str = "Model"
    vehicle_type: str = "Electric Vehicle Type"
    range: str = "Electric Range"

    def columns(self) -> Dict[str, str]:
        """Field name -> CSV header."""
        return {
            'year': self.year,
            'state': self.state,
            'make': self.make,
            'model': self.model,
            'vehicle_type': self.vehicle_type,
            'range': self.range,
        }


@dataclass(frozen=True)
class Record:
    """One cleaned EV registration."""

    year: int
    state: str = UNKNOWN
    make: str = UNKNOWN
    model: str = UNKNOWN
    vehicle_type: str = OTHER
    range: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'year': self.year,
            'state': self.state,
            'make': self.make,
            'model': self.model,
            'vehicleType': self.vehicle_type,
            'range': self.range,
        }


@dataclass(frozen=True)
class FilterSelection:
    """Active dropdown selection. ``year`` is "All" or an integer as string."""

    year: str = ALL
    state: str = ALL

    def to_dict(self) -> Dict[str, str]:
        return {'year': self.year, 'state': self.state}


@dataclass(frozen=True)
class YearlyCount:
    year: int
    count: int

    def to_dict(self) -> Dict[str, int]:
        return {'year': self.year, 'count': self.count}


@dataclass(frozen=True)
class StateCount:
    state: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {'state': self.state, 'count': self.count}


@dataclass(frozen=True)
class VehicleTypeShare:
    type: str
    value: int

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type, 'value': self.value}


@dataclass(frozen=True)
class KPISet:
    total: int = 0
    current_year_count: int = 0
    avg_range: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total': self.total,
            'currentYearCount': self.current_year_count,
            'avgRange': self.avg_range,
        }


@dataclass(frozen=True)
class AggregateViews:
    """The four chart-ready summaries of a filtered set."""

    yearly: List[YearlyCount] = field(default_factory=list)
    top_states: List[StateCount] = field(default_factory=list)
    vehicle_types: List[VehicleTypeShare] = field(default_factory=list)
    kpis: KPISet = field(default_factory=KPISet)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'yearly': [item.to_dict() for item in self.yearly],
            'topStates': [item.to_dict() for item in self.top_states],
            'vehicleTypes': [item.to_dict() for item in self.vehicle_types],
            'kpis': self.kpis.to_dict(),
        }


@dataclass(frozen=True)
class FilterOptions:
    """Dropdown options, each list starting with the "All" sentinel."""

    years: List[Union[str, int]] = field(default_factory=lambda: [ALL])
    states: List[str] = field(default_factory=lambda: [ALL])

    def to_dict(self) -> Dict[str, List[Any]]:
        return {'years': list(self.years), 'states': list(self.states)}


@dataclass(frozen=True)
class DashboardView:
    """Everything a view layer needs for one render."""

    selection: FilterSelection
    current_year: int
    cleaned_count: int
    filtered: List[Record]
    aggregates: AggregateViews
    options: FilterOptions
    table: List[Dict[str, Any]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'selection': self.selection.to_dict(),
            'currentYear': self.current_year,
            'cleanedCount': self.cleaned_count,
            'filteredCount': len(self.filtered),
            **self.aggregates.to_dict(),
            'options': self.options.to_dict(),
            'table': self.table,
        }
