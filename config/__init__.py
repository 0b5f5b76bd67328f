"""
Configuration Module

This module provides centralized configuration management for etcd backups:
- Member connection timeouts and transport security
- Cluster identity
- Backup sink selection and location
- Latest-backup lookup retry policy
- Logging settings

Implements a flexible, environment-aware configuration system
with sensible defaults and validation using Pydantic.
"""

from .settings import (
    EtcdBackupSettings,
    ConnectionSettings,
    TLSSettings,
    ClusterSettings,
    StorageSettings,
    LedgerSettings,
    MonitoringSettings,
    StorageType,
    load_settings
)

__all__ = [
    'EtcdBackupSettings',
    'ConnectionSettings',
    'TLSSettings',
    'ClusterSettings',
    'StorageSettings',
    'LedgerSettings',
    'MonitoringSettings',
    'StorageType',
    'load_settings'
]
