"""
Backup Sinks

Pluggable persistence backends for snapshots, all exposing the single
BackupSink capability interface.
"""

from config.settings import StorageSettings, StorageType
from etcd_backup_ops_exceptions import ConfigurationError

from .base import BackupSink, CountingReader, latest_backup_name
from .local_sink import LocalFileSink
from .s3_sink import S3Sink


def create_sink(settings: StorageSettings) -> BackupSink:
    """
    Build the sink selected by the storage settings.

    Raises:
        ConfigurationError: If the selected backend is missing required settings
    """
    if settings.storage_type == StorageType.LOCAL_FILE:
        if not settings.local_root_path:
            raise ConfigurationError("local_root_path must be set for LOCAL_FILE storage")
        return LocalFileSink(settings.local_root_path)
    elif settings.storage_type == StorageType.S3:
        if not settings.s3_bucket:
            raise ConfigurationError("s3_bucket must be set for S3 storage")
        return S3Sink(
            bucket=settings.s3_bucket,
            prefix=settings.s3_prefix,
            region=settings.s3_region,
            endpoint_url=settings.s3_endpoint_url
        )
    else:
        raise ConfigurationError(f"Unsupported storage type: {settings.storage_type}")


__all__ = [
    'BackupSink',
    'CountingReader',
    'latest_backup_name',
    'LocalFileSink',
    'S3Sink',
    'create_sink'
]
