"""
etcd3 gRPC Connection

Concrete EtcdConnection built on the ``etcd3`` client. Every call is issued
directly against the gRPC stubs with an explicit deadline, so the timeouts
configured for probes, status queries and snapshots are honoured per call
rather than through the client's single default timeout.

This module is imported lazily by EtcdClientFactory so the rest of the
package does not require the gRPC stack to be importable.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Iterator, Optional
from urllib.parse import urlsplit

import etcd3
import grpc
from etcd3 import etcdrpc

from .connection_exceptions import (
    ConnectionError,
    ConnectionTimeoutError,
    RequestFailedError,
    ServerUnavailableError
)
from .etcd_connection import ROOT_KEY, EtcdConnection, MemberStatus, SnapshotStream, TLSConfig

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_PORT = 2379


def _translate_rpc_error(err: grpc.RpcError, endpoint: str, action: str) -> ConnectionError:
    """Map a gRPC failure onto the connection exception hierarchy."""
    code = err.code() if hasattr(err, "code") else None
    details = err.details() if hasattr(err, "details") else str(err)
    message = f"{action} failed: {details}"
    if code == grpc.StatusCode.DEADLINE_EXCEEDED:
        return ConnectionTimeoutError(message, endpoint=endpoint)
    if code == grpc.StatusCode.UNAVAILABLE:
        return ServerUnavailableError(message, endpoint=endpoint)
    return RequestFailedError(message, endpoint=endpoint)


class Etcd3Connection(EtcdConnection):
    """
    EtcdConnection backed by an ``etcd3.Etcd3Client`` bound to one endpoint.
    """

    def __init__(self, endpoint: str, client: "etcd3.Etcd3Client"):
        super().__init__(endpoint)
        self._client = client

    def _call_kwargs(self):
        return {
            "credentials": getattr(self._client, "call_credentials", None),
            "metadata": getattr(self._client, "metadata", None),
        }

    def get_revision(self, key: str = ROOT_KEY, timeout: Optional[float] = None) -> int:
        self._ensure_open()
        request = etcdrpc.RangeRequest(key=key.encode("utf-8"), serializable=True)
        try:
            response = self._client.kvstub.Range(request, timeout, **self._call_kwargs())
        except grpc.RpcError as e:
            raise _translate_rpc_error(e, self.endpoint, "serializable get") from e
        return int(response.header.revision)

    def status(self, timeout: Optional[float] = None) -> MemberStatus:
        self._ensure_open()
        try:
            response = self._client.maintenancestub.Status(
                etcdrpc.StatusRequest(), timeout, **self._call_kwargs()
            )
        except grpc.RpcError as e:
            raise _translate_rpc_error(e, self.endpoint, "status") from e
        return MemberStatus(
            version=response.version,
            revision=int(response.header.revision),
            db_size=int(response.dbSize),
            leader=int(response.leader),
        )

    def open_snapshot(
        self,
        timeout: Optional[float] = None,
        max_transfer_seconds: Optional[float] = None
    ) -> SnapshotStream:
        self._ensure_open()
        # The gRPC deadline covers the whole stream, so it carries the
        # transfer ceiling; ``timeout`` bounds the wait for the first chunk.
        deadline = max_transfer_seconds or timeout
        call = self._client.maintenancestub.Snapshot(
            etcdrpc.SnapshotRequest(), deadline, **self._call_kwargs()
        )
        try:
            first = self._first_chunk(call, timeout)
        except grpc.RpcError as e:
            call.cancel()
            raise _translate_rpc_error(e, self.endpoint, "snapshot open") from e

        return SnapshotStream(
            self._chunks(call, first),
            max_transfer_seconds=max_transfer_seconds,
            on_close=call.cancel,
        )

    def _first_chunk(self, call, timeout: Optional[float]) -> Optional[bytes]:
        if not timeout:
            response = next(call, None)
        else:
            executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="EtcdSnapshotOpen")
            try:
                response = executor.submit(next, call, None).result(timeout=timeout)
            except FutureTimeoutError as e:
                call.cancel()
                raise ConnectionTimeoutError(
                    f"snapshot open timed out after {timeout}s", endpoint=self.endpoint
                ) from e
            finally:
                executor.shutdown(wait=False)
        return response.blob if response is not None else None

    def _chunks(self, call, first: Optional[bytes]) -> Iterator[bytes]:
        if first:
            yield first
        try:
            for response in call:
                yield response.blob
        except grpc.RpcError as e:
            # Any error, CANCELLED included, means the snapshot is incomplete
            raise _translate_rpc_error(e, self.endpoint, "snapshot transfer") from e

    def _release(self) -> None:
        self._client.close()


def dial(endpoint: str, tls_config: Optional[TLSConfig], dial_timeout: float) -> Etcd3Connection:
    """
    Open a connection to a single endpoint, waiting at most ``dial_timeout``.

    Raises:
        ConnectionTimeoutError: The channel did not become ready in time
        ConnectionError: The client could not be constructed
    """
    parts = urlsplit(endpoint if "://" in endpoint else f"//{endpoint}")
    host = parts.hostname or "localhost"
    port = parts.port or DEFAULT_CLIENT_PORT

    tls_kwargs = {}
    if tls_config is not None:
        tls_kwargs = {
            "ca_cert": tls_config.ca_cert,
            "cert_cert": tls_config.cert_cert,
            "cert_key": tls_config.cert_key,
        }

    try:
        client = etcd3.client(host=host, port=port, timeout=dial_timeout, **tls_kwargs)
    except (ValueError, OSError) as e:
        raise ConnectionError(f"failed to create etcd client: {e}", endpoint=endpoint) from e

    try:
        grpc.channel_ready_future(client.channel).result(timeout=dial_timeout)
    except grpc.FutureTimeoutError as e:
        client.close()
        raise ConnectionTimeoutError(
            f"dial timed out after {dial_timeout}s", endpoint=endpoint
        ) from e

    logger.debug(f"Connected to etcd member at {endpoint}")
    return Etcd3Connection(endpoint, client)
