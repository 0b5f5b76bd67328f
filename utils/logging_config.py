"""
Logging Configuration

Applies the monitoring settings to the standard library logging setup.
"""

import logging
from typing import Optional

from config.settings import EtcdBackupSettings, MonitoringSettings

# Third-party loggers that are chatty at INFO and below
NOISY_LOGGERS = ("kubernetes", "urllib3", "botocore", "boto3", "s3transfer", "grpc")


def configure_logging(
    settings: Optional[EtcdBackupSettings] = None,
    quiet_third_party: bool = True
) -> None:
    """
    Configure the root logger from the monitoring settings.

    Args:
        settings: Loaded settings; defaults and environment are used if None
        quiet_third_party: Raise client libraries to WARNING so backup
            progress stays readable

    Raises:
        ValueError: If the configured log level is not a logging level name
    """
    monitoring = settings.monitoring if settings is not None else MonitoringSettings()
    level_name = monitoring.log_level.upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {monitoring.log_level}")

    logging.basicConfig(level=level, format=monitoring.log_format, force=True)

    if quiet_third_party:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))
