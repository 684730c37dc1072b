# ========================
# src/utils/config.py
# ========================

"""
Configuration Management

Centralized configuration for the EV dashboard with environment support.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


def is_url(source: str) -> bool:
    """True for http(s) data sources, False for local paths."""
    return source.lower().startswith(('http://', 'https://'))


class Config:
    """
    Configuration class for the EV dashboard.
    Supports environment variables and default values.
    """

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_dict (dict): Optional configuration overrides
        """
        # Data Source
        self.DATA_PATH = os.getenv('EV_DATA_PATH', 'data/ev_data.csv')
        self.FETCH_TIMEOUT_SECONDS = float(os.getenv('EV_FETCH_TIMEOUT', '30'))

        # Column Mapping
        self.YEAR_COLUMN = os.getenv('EV_COLUMN_YEAR', 'Model Year')
        self.STATE_COLUMN = os.getenv('EV_COLUMN_STATE', 'State')
        self.MAKE_COLUMN = os.getenv('EV_COLUMN_MAKE', 'Make')
        self.MODEL_COLUMN = os.getenv('EV_COLUMN_MODEL', 'Model')
        self.VEHICLE_TYPE_COLUMN = os.getenv('EV_COLUMN_VEHICLE_TYPE', 'Electric Vehicle Type')
        self.RANGE_COLUMN = os.getenv('EV_COLUMN_RANGE', 'Electric Range')
        self.STRICT_COLUMNS = _env_flag('EV_STRICT_COLUMNS', 'false')

        # Dashboard Settings
        self.TOP_STATES_LIMIT = int(os.getenv('TOP_STATES_LIMIT', '10'))
        self.TABLE_ROW_LIMIT = int(os.getenv('TABLE_ROW_LIMIT', '20'))

        # API Server
        self.API_HOST = os.getenv('API_HOST', '0.0.0.0')
        self.API_PORT = int(os.getenv('API_PORT', '8000'))

        # Sample Data Generation
        self.SAMPLE_ROWS = int(os.getenv('SAMPLE_ROWS', '5000'))

        # Logging Configuration
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
        self.LOG_DIR = os.getenv('LOG_DIR', 'logs')

        # Override with provided config
        if config_dict:
            self._update_from_dict(config_dict)

    def _update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """Update configuration from dictionary."""
        for key, value in config_dict.items():
            if hasattr(self, key.upper()):
                setattr(self, key.upper(), value)

    def column_names(self) -> Dict[str, str]:
        """The CSV header used for each record field."""
        return {
            'year': self.YEAR_COLUMN,
            'state': self.STATE_COLUMN,
            'make': self.MAKE_COLUMN,
            'model': self.MODEL_COLUMN,
            'vehicle_type': self.VEHICLE_TYPE_COLUMN,
            'range': self.RANGE_COLUMN,
        }

    def ensure_directories(self) -> None:
        """Create the data and log directories if they don't exist."""
        Path(self.LOG_DIR).mkdir(parents=True, exist_ok=True)
        if not is_url(self.DATA_PATH):
            Path(self.DATA_PATH).parent.mkdir(parents=True, exist_ok=True)

    def validate_config(self) -> Dict[str, bool]:
        """
        Validate configuration values.

        Returns:
            dict: Validation results for each setting
        """
        validations = {}

        validations['data_path'] = bool(self.DATA_PATH)
        validations['fetch_timeout'] = self.FETCH_TIMEOUT_SECONDS > 0
        validations['top_states_limit'] = self.TOP_STATES_LIMIT > 0
        validations['table_row_limit'] = self.TABLE_ROW_LIMIT > 0
        validations['api_port'] = 1000 <= self.API_PORT <= 65535
        validations['sample_rows'] = self.SAMPLE_ROWS > 0

        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        validations['log_level'] = self.LOG_LEVEL.upper() in valid_log_levels

        return validations

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            attr: getattr(self, attr)
            for attr in dir(self)
            if not attr.startswith('_') and not callable(getattr(self, attr))
        }

    def save_to_file(self, file_path: str) -> None:
        """Save configuration to JSON file."""
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2, default=str)

    @classmethod
    def load_from_file(cls, file_path: str) -> 'Config':
        """Load configuration from JSON file."""
        with open(file_path, 'r') as f:
            config_dict = json.load(f)
        return cls(config_dict)

    def __str__(self) -> str:
        """String representation of configuration."""
        lines = ["Configuration Settings:"]
        config_dict = self.to_dict()
        for key, value in sorted(config_dict.items()):
            lines.append(f"  {key}: {value}")
        return "\n".join(lines)
