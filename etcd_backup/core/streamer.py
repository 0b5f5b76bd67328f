"""
Snapshot Streamer

Queries the selected member for its software version and opens the
full-keyspace snapshot stream on it. Both calls are bounded by the
snapshot timeout, which is independent of (and much longer than) the probe
timeout. The stream itself is read without a per-chunk timeout; only the
overall transfer ceiling applies.
"""

import logging

from connection_management import EtcdConnection, SnapshotStream
from etcd_backup_ops_exceptions import EtcdBackupOpsError
from ..exceptions import SnapshotOpenError, VersionQueryError

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_TIMEOUT = 60.0
DEFAULT_MAX_TRANSFER_SECONDS = 3600.0


class SnapshotStreamer:
    """Version query and snapshot open against a connected member."""

    def __init__(
        self,
        snapshot_timeout: float = DEFAULT_SNAPSHOT_TIMEOUT,
        max_transfer_seconds: float = DEFAULT_MAX_TRANSFER_SECONDS
    ):
        self.snapshot_timeout = snapshot_timeout
        self.max_transfer_seconds = max_transfer_seconds

    def get_version(self, conn: EtcdConnection) -> str:
        """
        Software version of the member behind ``conn``.

        Raises:
            VersionQueryError: If the status query fails
        """
        try:
            status = conn.status(timeout=self.snapshot_timeout)
        except (EtcdBackupOpsError, OSError) as e:
            raise VersionQueryError(
                f"failed to receive etcd version ({e})",
                context={"endpoint": conn.endpoint}
            ) from e
        # The version becomes part of the artifact name
        if not status.version or "_" in status.version or "/" in status.version:
            raise VersionQueryError(
                f"member reported an unusable etcd version: {status.version!r}",
                context={"endpoint": conn.endpoint}
            )
        return status.version

    def open_snapshot(self, conn: EtcdConnection) -> SnapshotStream:
        """
        Open the snapshot stream. The caller owns the stream and must close it.

        Raises:
            SnapshotOpenError: If the stream cannot be opened
        """
        try:
            stream = conn.open_snapshot(
                timeout=self.snapshot_timeout,
                max_transfer_seconds=self.max_transfer_seconds
            )
        except (EtcdBackupOpsError, OSError) as e:
            raise SnapshotOpenError(
                f"failed to receive snapshot ({e})",
                context={"endpoint": conn.endpoint}
            ) from e
        logger.debug(f"Opened snapshot stream on {conn.endpoint}")
        return stream
