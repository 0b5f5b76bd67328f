"""
etcd Backup Core

Core classes of a backup attempt: revision probing, source selection,
snapshot streaming, the latest-backup ledger and the coordinating manager.
"""

from .prober import RevisionProber
from .selector import SourceSelector, select_max_revision
from .streamer import SnapshotStreamer
from .ledger import RevisionLedger
from .manager import BackupManager

__all__ = [
    'RevisionProber',
    'SourceSelector',
    'select_max_revision',
    'SnapshotStreamer',
    'RevisionLedger',
    'BackupManager'
]
