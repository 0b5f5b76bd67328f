"""
etcd Backup Exceptions

Defines a granular exception hierarchy for backup coordination, providing
specific exception types for each phase of a backup attempt so callers can
tell a retryable attempt failure from a condition that must stop the
process.
"""

from typing import Optional, Dict, Any

from etcd_backup_ops_exceptions import BackupError as BaseBackupError
from .models.entities import BackupPhase


class BackupCoordinationError(BaseBackupError):
    """
    Base exception for all backup coordination failures.

    Carries the phase that failed and the underlying cause so that every
    attempt-fatal error reports where it broke.

    Attributes:
        message: Human-readable error message
        cluster_name: Name of the cluster being backed up (if known)
        phase: Phase of the attempt that failed
        context: Additional context information as key-value pairs

    Example:
        ```python
        try:
            manager.save_snap(last_rev)
        except BackupCoordinationError as e:
            logger.error(f"{e.phase.value} failed for {e.cluster_name}: {e.message}")
        ```
    """

    phase: BackupPhase = BackupPhase.DISCOVERY
    fatal: bool = False

    def __init__(
        self,
        message: str,
        cluster_name: Optional[str] = None,
        phase: Optional[BackupPhase] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.cluster_name = cluster_name
        if phase is not None:
            self.phase = phase
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.phase.value}] {self.message}"]
        if self.cluster_name:
            parts.append(f"Cluster: {self.cluster_name}")
        if self.context:
            parts.append(f"Context: {self.context}")
        return " | ".join(parts)


class MemberDiscoveryError(BackupCoordinationError):
    """The member list for the cluster could not be obtained."""
    phase = BackupPhase.DISCOVERY


class NoRunningMembersError(BackupCoordinationError):
    """
    The cluster has no member in the running phase.

    Distinct from NoReachableMemberError: nothing was probed at all.
    """
    phase = BackupPhase.DISCOVERY

    def __init__(self, cluster_name: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__("no running replicas found", cluster_name=cluster_name, context=context)


class NoReachableMemberError(BackupCoordinationError):
    """Running members exist but every revision probe failed."""
    phase = BackupPhase.PROBE

    def __init__(self, cluster_name: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__("no reachable member", cluster_name=cluster_name, context=context)


class SourceConnectionError(BackupCoordinationError):
    """The selected member could not be connected to for the transfer."""
    phase = BackupPhase.PROBE


class VersionQueryError(BackupCoordinationError):
    """The status query for the member's software version failed."""
    phase = BackupPhase.VERSION


class SnapshotOpenError(BackupCoordinationError):
    """The snapshot stream could not be opened."""
    phase = BackupPhase.SNAPSHOT


class SnapshotWriteError(BackupCoordinationError):
    """Persisting the snapshot stream to the sink failed."""
    phase = BackupPhase.WRITE


class BackupStorageError(BackupCoordinationError):
    """
    A sink operation (listing, writing, publishing) failed.

    Additional Attributes:
        storage_path: Path or key the sink was operating on
    """
    phase = BackupPhase.WRITE

    def __init__(
        self,
        message: str,
        storage_path: Optional[str] = None,
        cluster_name: Optional[str] = None,
        phase: Optional[BackupPhase] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, cluster_name=cluster_name, phase=phase, context=context)
        self.storage_path = storage_path

    def __str__(self) -> str:
        text = super().__str__()
        if self.storage_path:
            text += f" | Path: {self.storage_path}"
        return text


class BackupLedgerError(BackupCoordinationError):
    """
    The revision of the latest stored backup could not be determined.

    Fatal for the process: without a baseline, a backup run could silently
    duplicate or silently skip a needed backup.
    """
    phase = BackupPhase.LEDGER
    fatal = True


class InvalidBackupNameError(BackupCoordinationError, ValueError):
    """An artifact name does not follow ``<version>_<revision>_etcd.backup``."""
    phase = BackupPhase.LEDGER
