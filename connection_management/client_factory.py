"""
etcd Client Factory

Builds a client handle bound to a single etcd member endpoint. The factory
never retries: a dial failure is reported immediately and the caller
decides whether to try another member.
"""

import logging
from typing import Optional

from .etcd_connection import EtcdConnection, TLSConfig

logger = logging.getLogger(__name__)

DEFAULT_DIAL_TIMEOUT = 5.0


class EtcdClientFactory:
    """
    Creates EtcdConnection handles with a bounded dial timeout.

    The returned handle is owned by the caller, who must close it (it is a
    context manager). The default implementation dials with the ``etcd3``
    gRPC client; tests and alternative wire clients override ``connect``.

    Example:
        ```python
        factory = EtcdClientFactory(dial_timeout=5.0)
        with factory.connect("https://etcd-0.etcd.default.svc:2379", tls) as conn:
            revision = conn.get_revision()
        ```
    """

    def __init__(self, dial_timeout: float = DEFAULT_DIAL_TIMEOUT):
        if dial_timeout <= 0:
            raise ValueError("dial_timeout must be positive")
        self.dial_timeout = dial_timeout

    def connect(self, endpoint: str, tls_config: Optional[TLSConfig] = None) -> EtcdConnection:
        """
        Connect to ``endpoint``.

        Args:
            endpoint: Client URL of the member, e.g. ``http://host:2379``
            tls_config: Transport security, or None for a plaintext connection

        Returns:
            A connected EtcdConnection

        Raises:
            ConnectionError: If the member cannot be reached within the dial timeout
        """
        from .etcd3_connection import dial

        logger.debug(
            f"Dialing {endpoint} ({'secure' if tls_config else 'insecure'}, "
            f"timeout {self.dial_timeout}s)"
        )
        return dial(endpoint, tls_config, self.dial_timeout)
