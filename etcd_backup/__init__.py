"""
etcd Backup Module

Takes consistent point-in-time backups of an etcd cluster. Every attempt
picks the running member with the highest revision as its source, streams
that member's snapshot into a pluggable sink and reports what was stored.

Features:
- Source selection by serializable revision probes (first-seen wins ties)
- Skipping the backup when nothing changed since the latest stored one
- Local file system and S3 sinks with atomic publish
- Prefix-addressed backups for callers that choose the destination
- Phase-tagged errors for every way an attempt can fail

Typical usage:

    from cluster_membership import KubernetesMemberLister
    from config import load_settings
    from etcd_backup import BackupManager

    settings = load_settings("config.yaml")
    manager = BackupManager.from_settings(settings, member_lister=KubernetesMemberLister())

    status = manager.save_snap_if_changed()
    if status is not None:
        print(f"stored revision {status.revision} ({status.size} MB)")
"""

# Models
from .models.entities import (
    BackupPhase,
    RevisionObservation,
    SelectedSource,
    BackupStatus
)

# Exceptions
from .exceptions import (
    BackupCoordinationError,
    MemberDiscoveryError,
    NoRunningMembersError,
    NoReachableMemberError,
    SourceConnectionError,
    VersionQueryError,
    SnapshotOpenError,
    SnapshotWriteError,
    BackupStorageError,
    BackupLedgerError,
    InvalidBackupNameError
)

# Utilities
from .utils import (
    make_backup_name,
    make_backup_path,
    parse_revision,
    parse_version,
    to_mb
)

# Sinks
from .sinks import BackupSink, LocalFileSink, S3Sink, create_sink

# Core
from .core import (
    BackupManager,
    RevisionLedger,
    RevisionProber,
    SnapshotStreamer,
    SourceSelector
)

__all__ = [
    # Core
    'BackupManager',
    'RevisionLedger',
    'RevisionProber',
    'SnapshotStreamer',
    'SourceSelector',

    # Sinks
    'BackupSink',
    'LocalFileSink',
    'S3Sink',
    'create_sink',

    # Entities
    'BackupPhase',
    'RevisionObservation',
    'SelectedSource',
    'BackupStatus',

    # Exceptions
    'BackupCoordinationError',
    'MemberDiscoveryError',
    'NoRunningMembersError',
    'NoReachableMemberError',
    'SourceConnectionError',
    'VersionQueryError',
    'SnapshotOpenError',
    'SnapshotWriteError',
    'BackupStorageError',
    'BackupLedgerError',
    'InvalidBackupNameError',

    # Utilities
    'make_backup_name',
    'make_backup_path',
    'parse_revision',
    'parse_version',
    'to_mb'
]
