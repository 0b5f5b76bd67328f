"""
Revision Prober

Learns the current revision of one member with a serializable read of the
root key. The read is served from the member's local state without a
consensus round-trip, so an overloaded member or one in a partitioned
minority still answers quickly.
"""

import logging
from typing import Optional

from cluster_membership import EtcdMember
from connection_management import EtcdClientFactory, TLSConfig, ROOT_KEY
from etcd_backup_ops_exceptions import EtcdBackupOpsError
from ..models.entities import RevisionObservation

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 5.0


class RevisionProber:
    """
    Probes members for their revision.

    A failed probe never raises: it is logged and reported as an
    observation carrying the error, so the member is simply left out of
    selection. The probe connection is closed before ``probe`` returns.
    """

    def __init__(
        self,
        client_factory: EtcdClientFactory,
        tls_config: Optional[TLSConfig] = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    ):
        self._client_factory = client_factory
        self._tls_config = tls_config
        self.request_timeout = request_timeout

    def probe(self, member: EtcdMember) -> RevisionObservation:
        """Probe ``member`` and return what was observed."""
        try:
            url = member.client_url
            conn = self._client_factory.connect(url, self._tls_config)
        except (EtcdBackupOpsError, OSError, ValueError) as e:
            logger.warning(f"failed to create etcd client for member ({member.name}): {e}")
            return RevisionObservation(member=member, error=f"connect: {e}")

        with conn:
            try:
                revision = conn.get_revision(ROOT_KEY, timeout=self.request_timeout)
            except (EtcdBackupOpsError, OSError, ValueError) as e:
                logger.warning(f"failed to get revision from member {member.name} ({url}): {e}")
                return RevisionObservation(member=member, error=f"get: {e}")

        logger.info(f"member {member.name} revision ({revision})")
        return RevisionObservation(member=member, revision=revision)
