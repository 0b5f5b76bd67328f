"""
etcd Connection Handles

This module defines the client-side handles the backup engine works with:
a connection bound to a single etcd member and the snapshot stream opened
on it. Concrete wire clients subclass EtcdConnection; the engine only ever
depends on the interface defined here.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional

from etcd_backup_ops_exceptions import OperationTimeoutError
from .connection_exceptions import ConnectionClosedError

logger = logging.getLogger(__name__)

# Key read by revision probes; any key works since only the header is used.
ROOT_KEY = "/"


@dataclass(frozen=True)
class TLSConfig:
    """
    Transport security material for member connections.

    Attributes:
        ca_cert: Path to the CA bundle used to verify the member
        cert_cert: Path to the client certificate (mutual TLS only)
        cert_key: Path to the client private key (mutual TLS only)
    """
    ca_cert: str
    cert_cert: Optional[str] = None
    cert_key: Optional[str] = None


@dataclass(frozen=True)
class MemberStatus:
    """Status reported by one member."""
    version: str
    revision: int = 0
    db_size: int = 0
    leader: int = 0


class SnapshotStream:
    """
    Read-once byte stream over the chunks of an etcd snapshot.

    The stream is file-like (``read(size)``) so sinks can hand it to
    ``shutil.copyfileobj`` or ``upload_fileobj``. There is no per-chunk
    timeout; ``max_transfer_seconds`` bounds the whole transfer instead.

    ``close()`` releases the underlying call exactly once, later calls are
    no-ops.
    """

    def __init__(
        self,
        chunks: Iterable[bytes],
        max_transfer_seconds: Optional[float] = None,
        on_close: Optional[Callable[[], None]] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self._chunks: Iterator[bytes] = iter(chunks)
        self._buffer = bytearray()
        self._exhausted = False
        self._closed = False
        self._on_close = on_close
        self._clock = clock
        self._max_transfer_seconds = max_transfer_seconds
        self._deadline = clock() + max_transfer_seconds if max_transfer_seconds else None
        self.bytes_read = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def readable(self) -> bool:
        return True

    def _check_deadline(self) -> None:
        if self._deadline is not None and self._clock() > self._deadline:
            raise OperationTimeoutError(
                f"Snapshot transfer exceeded {self._max_transfer_seconds}s"
            )

    def _fill(self, size: int) -> None:
        while not self._exhausted and (size < 0 or len(self._buffer) < size):
            self._check_deadline()
            try:
                chunk = next(self._chunks)
            except StopIteration:
                self._exhausted = True
                break
            self._buffer.extend(chunk)

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes, or everything left when size is negative."""
        if self._closed:
            raise ConnectionClosedError("read from closed snapshot stream")
        if size is None:
            size = -1
        self._fill(size)
        if size < 0 or size >= len(self._buffer):
            data = bytes(self._buffer)
            self._buffer.clear()
        else:
            data = bytes(self._buffer[:size])
            del self._buffer[:size]
        self.bytes_read += len(data)
        return data

    def __iter__(self) -> Iterator[bytes]:
        while True:
            data = self.read(64 * 1024)
            if not data:
                return
            yield data

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._buffer.clear()
        if self._on_close is not None:
            self._on_close()
        logger.debug(f"Snapshot stream closed after {self.bytes_read} bytes")

    def __enter__(self) -> "SnapshotStream":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class EtcdConnection(ABC):
    """
    Client handle bound to a single etcd member endpoint.

    The handle owns a network connection; whoever obtains it must close it.
    ``close()`` is idempotent and the handle is a context manager so callers
    can scope it with ``with``.
    """

    def __init__(self, endpoint: str):
        self.endpoint = endpoint
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @abstractmethod
    def get_revision(self, key: str = ROOT_KEY, timeout: Optional[float] = None) -> int:
        """
        Serializable (local, non-consensus) read of ``key``.

        Returns:
            Revision from the response header
        """

    @abstractmethod
    def status(self, timeout: Optional[float] = None) -> MemberStatus:
        """Status of the member this handle is bound to."""

    @abstractmethod
    def open_snapshot(
        self,
        timeout: Optional[float] = None,
        max_transfer_seconds: Optional[float] = None
    ) -> SnapshotStream:
        """
        Open a snapshot of the full keyspace at the member's current revision.

        ``timeout`` bounds opening the stream only.
        """

    @abstractmethod
    def _release(self) -> None:
        """Release the underlying network resources."""

    def _ensure_open(self) -> None:
        if self._closed:
            raise ConnectionClosedError("connection already closed", endpoint=self.endpoint)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._release()
        logger.debug(f"Closed connection to {self.endpoint}")

    def __enter__(self) -> "EtcdConnection":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(endpoint={self.endpoint!r}, closed={self._closed})"
