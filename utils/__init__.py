"""
Utilities Module

This module provides common helpers shared across the package:
- Logging setup driven by the monitoring settings
"""

from .logging_config import configure_logging, NOISY_LOGGERS

__all__ = [
    'configure_logging',
    'NOISY_LOGGERS',
]
