"""
etcd Backup Entities

Defines data models for backup coordination: the phases of an attempt,
the observation produced by probing one member, the source chosen for a
backup and the status returned once a backup has been stored.

BackupStatus uses Pydantic for validation; the transient per-attempt
records are plain dataclasses.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, TYPE_CHECKING
from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from cluster_membership import EtcdMember
    from connection_management import EtcdConnection


class BackupPhase(str, Enum):
    """
    Phase of a backup attempt, reported with every attempt-fatal error.

    Phases:
        DISCOVERY: Listing the running members of the cluster
        PROBE: Querying members for their revision / connecting to the source
        VERSION: Querying the source for its software version
        SNAPSHOT: Opening the snapshot stream
        WRITE: Persisting the stream to the sink
        LEDGER: Determining the revision of the latest stored backup
    """
    DISCOVERY = "discovery"
    PROBE = "probe"
    VERSION = "version"
    SNAPSHOT = "snapshot"
    WRITE = "write"
    LEDGER = "ledger"


@dataclass(frozen=True)
class RevisionObservation:
    """
    Result of probing one member.

    Attributes:
        member: The member that was probed
        revision: Revision from the response header (0 when the probe failed)
        error: Why the probe failed, None on success
    """
    member: "EtcdMember"
    revision: int = 0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class SelectedSource:
    """
    The member chosen as backup source together with an open connection to it.

    Owned by one backup attempt; closing it releases the connection.
    """
    member: "EtcdMember"
    revision: int
    connection: "EtcdConnection"

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> "SelectedSource":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class BackupStatus(BaseModel):
    """
    Metadata of a completed backup.

    Attributes:
        creation_time: RFC 3339 timestamp of when the backup finished
        size: Artifact size in megabytes (see ``to_mb``)
        version: Software version of the member the snapshot came from
        revision: Revision of the keyspace captured by the snapshot
        time_took_in_second: Whole seconds the backup took, rounded up

    Example:
        ```python
        status = BackupStatus(
            creation_time="2017-08-01T10:00:00Z",
            size=12.5,
            version="3.1.8",
            revision=9,
            time_took_in_second=3
        )
        ```
    """
    creation_time: str = Field(..., description="RFC 3339 creation timestamp")
    size: float = Field(default=0.0, ge=0.0, description="Backup size in MB")
    version: str = Field(..., description="etcd version of the source member")
    revision: int = Field(..., ge=0, description="Revision captured by the backup")
    time_took_in_second: int = Field(default=0, ge=0, description="Seconds taken by the backup")
