"""
etcd Backup Utilities

Exports artifact naming helpers and size normalization.
"""

from .naming import (
    BACKUP_FILENAME_SUFFIX,
    REVISION_WIDTH,
    MAX_REVISION,
    make_backup_name,
    make_backup_path,
    is_backup_name,
    parse_revision,
    parse_version
)
from .size import to_mb, BYTES_PER_MB

__all__ = [
    'BACKUP_FILENAME_SUFFIX',
    'REVISION_WIDTH',
    'MAX_REVISION',
    'make_backup_name',
    'make_backup_path',
    'is_backup_name',
    'parse_revision',
    'parse_version',
    'to_mb',
    'BYTES_PER_MB'
]
