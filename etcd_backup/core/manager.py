"""
Backup Manager

Main orchestration class for etcd backups. One call is one backup attempt:

    discover running members -> probe revisions -> select source
        -> fetch version -> open snapshot -> stream into the sink

Each attempt owns its connection and stream exclusively and releases both
on every exit path. Attempts are not meant to run concurrently on the same
manager; callers taking periodic backups must let one attempt finish
before starting the next.
"""

import logging
import time
from datetime import datetime, timezone
from typing import List, Optional

from cluster_membership import EtcdMember, MemberLister, running_members
from config.settings import ConnectionSettings, EtcdBackupSettings, LedgerSettings
from connection_management import EtcdClientFactory, TLSConfig
from etcd_backup_ops_exceptions import EtcdBackupOpsError
from ..exceptions import (
    BackupCoordinationError,
    MemberDiscoveryError,
    SnapshotWriteError,
    SourceConnectionError
)
from ..models.entities import BackupStatus, SelectedSource
from ..sinks import BackupSink, create_sink
from ..utils.naming import make_backup_path
from ..utils.size import to_mb
from .ledger import RevisionLedger
from .prober import RevisionProber
from .selector import SourceSelector
from .streamer import SnapshotStreamer

logger = logging.getLogger(__name__)


class BackupManager:
    """
    Backs up an etcd cluster from its most advanced member.

    Example:
        ```python
        manager = BackupManager(
            member_lister=KubernetesMemberLister(),
            cluster_name="example-etcd-cluster",
            namespace="default",
            sink=LocalFileSink("/var/backups/etcd"),
            tls_config=None
        )

        # Back up only if something changed since the latest stored backup
        status = manager.save_snap(manager.get_latest_backup_rev())

        # Back up unconditionally to a caller-chosen prefix
        path = manager.save_snap_with_prefix("etcd-backups/v1/default/example-etcd-cluster")
        ```
    """

    def __init__(
        self,
        member_lister: MemberLister,
        cluster_name: str,
        namespace: str,
        sink: BackupSink,
        tls_config: Optional[TLSConfig] = None,
        client_factory: Optional[EtcdClientFactory] = None,
        connection_settings: Optional[ConnectionSettings] = None,
        ledger_settings: Optional[LedgerSettings] = None
    ):
        """
        Initialize BackupManager.

        Args:
            member_lister: Provides the members of the cluster
            cluster_name: Name of the etcd cluster
            namespace: Namespace of the cluster members
            sink: Where backups are persisted
            tls_config: Transport security for member connections (None = plaintext)
            client_factory: Builds member connections (defaults to the etcd3 gRPC client)
            connection_settings: Timeouts and probing settings (uses defaults if None)
            ledger_settings: Retry policy of the latest-backup lookup (uses defaults if None)
        """
        self._member_lister = member_lister
        self.cluster_name = cluster_name
        self.namespace = namespace
        self._sink = sink
        self._tls_config = tls_config
        self._connection_settings = connection_settings or ConnectionSettings()
        ledger_settings = ledger_settings or LedgerSettings()

        self._client_factory = client_factory or EtcdClientFactory(self._connection_settings.dial_timeout)
        self._selector = SourceSelector(
            RevisionProber(self._client_factory, tls_config, self._connection_settings.request_timeout),
            probe_workers=self._connection_settings.probe_workers
        )
        self._streamer = SnapshotStreamer(
            snapshot_timeout=self._connection_settings.snapshot_timeout,
            max_transfer_seconds=self._connection_settings.max_transfer_seconds
        )
        self._ledger = RevisionLedger(
            sink,
            retry_attempts=ledger_settings.retry_attempts,
            retry_wait_seconds=ledger_settings.retry_wait_seconds
        )

        logger.info(
            f"BackupManager initialized for cluster '{cluster_name}' in namespace '{namespace}' "
            f"({'secure' if tls_config else 'insecure'} client, {sink.storage_type} sink)"
        )

    @classmethod
    def from_settings(
        cls,
        settings: EtcdBackupSettings,
        member_lister: MemberLister,
        sink: Optional[BackupSink] = None,
        client_factory: Optional[EtcdClientFactory] = None
    ) -> "BackupManager":
        """Build a manager from loaded settings; the sink defaults to the configured one."""
        return cls(
            member_lister=member_lister,
            cluster_name=settings.cluster.cluster_name,
            namespace=settings.cluster.namespace,
            sink=sink or create_sink(settings.storage),
            tls_config=settings.tls.to_tls_config(),
            client_factory=client_factory,
            connection_settings=settings.connection,
            ledger_settings=settings.ledger
        )

    @property
    def sink(self) -> BackupSink:
        return self._sink

    def _attribute(self, error: BackupCoordinationError) -> BackupCoordinationError:
        if error.cluster_name is None:
            error.cluster_name = self.cluster_name
        return error

    def _discover_members(self) -> List[EtcdMember]:
        try:
            members = self._member_lister.list_members(self.cluster_name, self.namespace)
        except Exception as e:
            raise MemberDiscoveryError(f"failed to list cluster members: {e}") from e

        running = running_members(members)
        logger.debug(f"Cluster '{self.cluster_name}': {len(running)}/{len(members)} members running")
        return [
            EtcdMember.from_cluster_member(
                m,
                secure_client=self._tls_config is not None,
                client_port=self._connection_settings.client_port
            )
            for m in running
        ]

    def _select_source(self):
        members = self._discover_members()
        return self._selector.select(members, cluster_name=self.cluster_name)

    def _connect_source(self, member: EtcdMember, revision: int) -> SelectedSource:
        try:
            conn = self._client_factory.connect(member.client_url, self._tls_config)
        except (EtcdBackupOpsError, OSError) as e:
            raise SourceConnectionError(
                f"create etcd client failed: {e}",
                context={"member": member.name}
            ) from e
        return SelectedSource(member=member, revision=revision, connection=conn)

    def save_snap(self, last_snap_rev: int) -> Optional[BackupStatus]:
        """
        Save the latest snapshot if its revision is greater than ``last_snap_rev``.

        Returns:
            BackupStatus of the stored backup, or None when nothing changed
            since ``last_snap_rev`` (no snapshot is opened in that case)

        Raises:
            BackupCoordinationError: If the attempt failed; the error names the phase
        """
        try:
            member, revision = self._select_source()
            if revision <= last_snap_rev:
                logger.info("skipped creating new backup: no change since last time")
                return None

            with self._connect_source(member, revision) as source:
                status = self._write_snap(source)
        except BackupCoordinationError as e:
            logger.error(f"Backup of cluster '{self.cluster_name}' failed: {self._attribute(e)}")
            raise

        logger.info(
            f"saved backup (rev: {status.revision}, etcdVersion: {status.version}) "
            f"for cluster ({self.cluster_name})"
        )
        return status

    def _write_snap(self, source: SelectedSource) -> BackupStatus:
        start = time.monotonic()
        conn = source.connection

        version = self._streamer.get_version(conn)
        with self._streamer.open_snapshot(conn) as stream:
            try:
                written = self._sink.save(version, source.revision, stream)
            except (EtcdBackupOpsError, OSError) as e:
                raise SnapshotWriteError(
                    f"failed to save snapshot ({e})",
                    context={"member": source.member.name, "revision": source.revision}
                ) from e

        return BackupStatus(
            creation_time=datetime.now(timezone.utc).isoformat(timespec="seconds"),
            size=to_mb(written),
            version=version,
            revision=source.revision,
            time_took_in_second=int(time.monotonic() - start + 1)
        )

    def save_snap_with_prefix(self, prefix: str) -> str:
        """
        Save the latest snapshot to a path prepended with ``prefix``.

        The full path has the format ``<prefix>/<etcd_version>_<revision>_etcd.backup``,
        e.g. prefix ``etcd-backups/v1/default/example-etcd-cluster`` and
        revision 1 of etcd 3.1.8 give
        ``etcd-backups/v1/default/example-etcd-cluster/3.1.8_0000000000000001_etcd.backup``.

        Returns:
            The full path the backup was written to

        Raises:
            BackupCoordinationError: If the attempt failed; the error names the phase
        """
        try:
            member, revision = self._select_source()
            with self._connect_source(member, revision) as source:
                version = self._streamer.get_version(source.connection)
                full_path = make_backup_path(prefix, version, revision)
                with self._streamer.open_snapshot(source.connection) as stream:
                    try:
                        written = self._sink.write(full_path, stream)
                    except (EtcdBackupOpsError, OSError) as e:
                        raise SnapshotWriteError(
                            f"failed to write snapshot ({e})",
                            context={"path": full_path}
                        ) from e
        except BackupCoordinationError as e:
            logger.error(f"Backup of cluster '{self.cluster_name}' failed: {self._attribute(e)}")
            raise

        logger.info(f"saved backup {full_path} ({written} bytes) for cluster ({self.cluster_name})")
        return full_path

    def get_latest_backup_rev(self) -> int:
        """
        Revision of the latest stored backup (0 if none).

        Raises:
            BackupLedgerError: Fatal; the caller must stop instead of
                backing up without a known baseline
        """
        try:
            return self._ledger.latest_revision()
        except BackupCoordinationError as e:
            logger.critical(f"Cannot determine latest backup of cluster '{self.cluster_name}': {self._attribute(e)}")
            raise

    def save_snap_if_changed(self) -> Optional[BackupStatus]:
        """Back up only if the cluster moved past the latest stored backup."""
        return self.save_snap(self.get_latest_backup_rev())
