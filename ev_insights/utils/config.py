# ========================
# ev_insights/utils/config.py
# ========================

"""
Configuration Management

Centralized configuration for the dashboard with environment support.
"""

import os
from typing import Any, Dict, Optional


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    return float(value)


class Config:
    """
    Configuration class for the dashboard.
    Supports environment variables and default values.
    """

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_dict (dict): Optional configuration overrides
        """
        # Data source
        self.DATA_SOURCE = os.getenv('EV_DATA_SOURCE', 'data/Electric_Vehicle_Population_Data.csv')
        self.FETCH_TIMEOUT_SECONDS = _optional_float(os.getenv('FETCH_TIMEOUT_SECONDS'))

        # Table
        self.RECORDS_PER_PAGE = int(os.getenv('RECORDS_PER_PAGE', '10'))

        # Sample data generation
        self.SAMPLE_ROWS = int(os.getenv('SAMPLE_ROWS', '500'))
        self.SAMPLE_SEED = int(os.getenv('SAMPLE_SEED', '42'))
        self.SAMPLE_ERROR_RATE = float(os.getenv('SAMPLE_ERROR_RATE', '0.1'))

        # Dashboard server
        self.DASHBOARD_HOST = os.getenv('DASHBOARD_HOST', '0.0.0.0')
        self.DASHBOARD_PORT = int(os.getenv('DASHBOARD_PORT', '8000'))

        # Logging
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
        self.LOG_DIR = os.getenv('LOG_DIR', 'logs')

        if config_dict:
            self._update_from_dict(config_dict)

    def _update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """Update configuration from dictionary."""
        for key, value in config_dict.items():
            if hasattr(self, key.upper()):
                setattr(self, key.upper(), value)

    def validate_config(self) -> Dict[str, bool]:
        """
        Validate configuration values.

        Returns:
            dict: Validation results for each setting
        """
        validations = {}

        validations['data_source'] = bool(str(self.DATA_SOURCE).strip())
        validations['records_per_page'] = self.RECORDS_PER_PAGE > 0
        validations['fetch_timeout'] = self.FETCH_TIMEOUT_SECONDS is None or self.FETCH_TIMEOUT_SECONDS > 0
        validations['sample_rows'] = self.SAMPLE_ROWS > 0
        validations['sample_error_rate'] = 0.0 <= self.SAMPLE_ERROR_RATE <= 1.0
        validations['dashboard_port'] = 1000 <= self.DASHBOARD_PORT <= 65535

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

    def __str__(self) -> str:
        lines = ["Configuration Settings:"]
        for key, value in sorted(self.to_dict().items()):
            lines.append(f"  {key}: {value}")
        return "\n".join(lines)
