# ========================
# src/utils/data_generator.py
# ========================

"""
Data Generation Utilities

Builds sample EV population CSVs shaped like the public registration
export, with controlled data-quality problems mixed in.
"""

import csv
import random
import logging
from datetime import date
from pathlib import Path
from typing import List, Dict, Any, Optional

logger = logging.getLogger(__name__)

HEADER = [
    'VIN (1-10)', 'County', 'City', 'State', 'Model Year',
    'Make', 'Model', 'Electric Vehicle Type', 'Electric Range',
]

BEV = "Battery Electric Vehicle (BEV)"
PHEV = "Plug-in Hybrid Electric Vehicle (PHEV)"


class DataGenerator:
    """
    Sample data generator for EV registration datasets.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize data generator.

        Args:
            seed (int): Random seed for reproducible data generation
        """
        self.random = random.Random(seed)
        self._initialize_data_patterns()
        logger.info(f"DataGenerator initialized with seed: {seed}")

    def _initialize_data_patterns(self) -> None:
        """Initialize vehicle catalog and regional weights."""
        self.vehicles = [
            {"make": "TESLA", "model": "MODEL Y", "type": BEV, "range": 291},
            {"make": "TESLA", "model": "MODEL 3", "type": BEV, "range": 272},
            {"make": "NISSAN", "model": "LEAF", "type": BEV, "range": 150},
            {"make": "CHEVROLET", "model": "BOLT EV", "type": BEV, "range": 259},
            {"make": "FORD", "model": "MUSTANG MACH-E", "type": BEV, "range": 230},
            {"make": "KIA", "model": "NIRO", "type": PHEV, "range": 26},
            {"make": "TOYOTA", "model": "PRIUS PRIME", "type": PHEV, "range": 25},
            {"make": "BMW", "model": "X5", "type": PHEV, "range": 30},
            {"make": "JEEP", "model": "WRANGLER", "type": PHEV, "range": 21},
            {"make": "RIVIAN", "model": "R1S", "type": BEV, "range": 0},
        ]

        # (state, county, city, weight): most registrations in the export are in WA
        self.locations = [
            ("WA", "King", "Seattle", 0.45),
            ("WA", "Snohomish", "Everett", 0.15),
            ("WA", "Pierce", "Tacoma", 0.1),
            ("CA", "Alameda", "Berkeley", 0.05),
            ("OR", "Multnomah", "Portland", 0.04),
            ("TX", "Travis", "Austin", 0.03),
            ("VA", "Fairfax", "Fairfax", 0.03),
            ("MD", "Montgomery", "Bethesda", 0.03),
            ("NY", "Kings", "Brooklyn", 0.03),
            ("IL", "Cook", "Chicago", 0.03),
            ("CO", "Denver", "Denver", 0.02),
            ("FL", "Miami-Dade", "Miami", 0.02),
            ("NC", "Wake", "Raleigh", 0.02),
        ]

        self.first_year = 2011
        self.last_year = date.today().year

    def generate_dataset(self,
                         file_path: str,
                         num_rows: int,
                         error_rate: float = 0.1) -> Dict[str, Any]:
        """
        Generate a dataset with controlled error injection.

        Args:
            file_path (str): Output CSV file path
            num_rows (int): Number of rows to generate
            error_rate (float): Fraction of records with intentional errors

        Returns:
            dict: Generation statistics
        """
        logger.info(f"Generating {num_rows:,} rows with {error_rate:.1%} error rate...")

        stats = {
            'total_rows': num_rows,
            'error_rate': error_rate,
            'records_with_errors': 0,
            'error_types': {}
        }

        Path(file_path).parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(HEADER)

            for _ in range(num_rows):
                record = self._generate_single_record(error_rate, stats)
                writer.writerow([record[column] for column in HEADER])

        stats['error_rate_actual'] = stats['records_with_errors'] / num_rows if num_rows else 0

        logger.info(f"Dataset generated: {file_path}")
        logger.info(f"Error breakdown: {stats['error_types']}")

        return stats

    def _generate_single_record(self, error_rate: float, stats: Dict[str, Any]) -> Dict[str, Any]:
        """Generate a single record with potential errors."""
        vehicle = self.random.choice(self.vehicles)
        weights = [location[3] for location in self.locations]
        state, county, city, _ = self.random.choices(self.locations, weights=weights)[0]

        # Newer model years are more common
        years = list(range(self.first_year, self.last_year + 1))
        year = self.random.choices(years, weights=[i + 1 for i in range(len(years))])[0]

        record = {
            'VIN (1-10)': ''.join(self.random.choices('ABCDEFGHJKLMNPRSTUVWXYZ0123456789', k=10)),
            'County': county,
            'City': city,
            'State': state,
            'Model Year': year,
            'Make': vehicle["make"],
            'Model': vehicle["model"],
            'Electric Vehicle Type': vehicle["type"],
            'Electric Range': vehicle["range"],
        }

        if self.random.random() < error_rate:
            stats['records_with_errors'] += 1
            self._inject_error(record, stats)

        return record

    def _inject_error(self, record: Dict[str, Any], stats: Dict[str, Any]) -> None:
        """Corrupt one field of the record in place."""
        error_type = self.random.choice([
            'malformed_year', 'missing_year', 'missing_state',
            'missing_make', 'malformed_range', 'missing_vehicle_type'
        ])

        if error_type == 'malformed_year':
            record['Model Year'] = self.random.choice(["N/A", "unknown", "20X1"])
        elif error_type == 'missing_year':
            record['Model Year'] = ''
        elif error_type == 'missing_state':
            record['State'] = ''
        elif error_type == 'missing_make':
            record['Make'] = ''
        elif error_type == 'malformed_range':
            record['Electric Range'] = self.random.choice(["n/a", "", "-1"])
        elif error_type == 'missing_vehicle_type':
            record['Electric Vehicle Type'] = ''

        self._track_error_type(stats, error_type)

    def _track_error_type(self, stats: Dict[str, Any], error_type: str) -> None:
        """Track error types for statistics."""
        if error_type not in stats['error_types']:
            stats['error_types'][error_type] = 0
        stats['error_types'][error_type] += 1

    def generate_rows(self, num_rows: int) -> List[Dict[str, Any]]:
        """Generate clean rows in memory, keyed by the CSV header."""
        stats = {'records_with_errors': 0, 'error_types': {}}
        return [self._generate_single_record(0.0, stats) for _ in range(num_rows)]
