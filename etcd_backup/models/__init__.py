"""
etcd Backup Models

Exports the data models used across a backup attempt.
"""

from .entities import (
    BackupPhase,
    RevisionObservation,
    SelectedSource,
    BackupStatus
)

__all__ = [
    'BackupPhase',
    'RevisionObservation',
    'SelectedSource',
    'BackupStatus'
]
