"""
etcd Backup Operations Exceptions

This module defines custom exceptions for the etcd_backup_ops package
to provide clear error handling and reporting.
"""

class EtcdBackupOpsError(Exception):
    """Base exception for all etcd_backup_ops errors"""
    pass


class ConnectionError(EtcdBackupOpsError):
    """Raised when connecting to or talking with an etcd member fails"""
    pass


class ConfigurationError(EtcdBackupOpsError):
    """Raised when configuration is invalid or missing"""
    pass


class BackupError(EtcdBackupOpsError):
    """Raised when a backup operation fails"""
    pass


class OperationTimeoutError(EtcdBackupOpsError):
    """Raised when an operation times out"""
    pass
