"""
Backup Sink Interface

One capability interface for persisting snapshots, covering both ways a
backup can be addressed:

- ``save(version, revision, stream)``: the sink derives the artifact name
  and location itself
- ``write(path, stream)``: the caller supplies the full destination path

plus the listing queries the revision ledger relies on. Every write must
publish atomically: a partially written artifact is never listed.
"""

import logging
from abc import ABC, abstractmethod
from typing import BinaryIO, List, Optional

from ..utils.naming import is_backup_name, make_backup_name, parse_revision

logger = logging.getLogger(__name__)


class CountingReader:
    """File-like wrapper counting the bytes read through it."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self.bytes_read = 0

    def read(self, size: int = -1) -> bytes:
        data = self._stream.read(size)
        self.bytes_read += len(data)
        return data


def latest_backup_name(names: List[str]) -> str:
    """
    Pick the latest artifact among ``names``.

    Names that are not backup artifacts are ignored. The highest revision
    wins; among equal revisions the lexicographically greatest name wins.
    Returns "" when there is no artifact.
    """
    candidates = [n for n in names if is_backup_name(n)]
    if not candidates:
        return ""
    return max(candidates, key=lambda n: (parse_revision(n), n))


class BackupSink(ABC):
    """
    Persistence backend for etcd snapshots.

    Example:
        ```python
        sink = LocalFileSink("/var/backups/etcd")

        # Sink-named backup
        written = sink.save("3.1.8", 9, stream)

        # Caller-addressed backup
        written = sink.write("v1/default/example/3.1.8_0000000000000009_etcd.backup", stream)

        latest = sink.get_latest()
        ```
    """

    storage_type: str = ""

    def backup_name(self, version: str, revision: int) -> str:
        return make_backup_name(version, revision)

    def save(self, version: str, revision: int, stream: BinaryIO) -> int:
        """
        Persist ``stream`` under the name derived from ``version`` and ``revision``.

        Returns:
            Number of bytes written
        """
        name = self.backup_name(version, revision)
        written = self.write(name, stream)
        logger.info(f"Saved backup {name} ({written} bytes) to {self.storage_type} sink")
        return written

    @abstractmethod
    def write(self, path: str, stream: BinaryIO) -> int:
        """
        Persist ``stream`` at ``path`` (relative to the sink root), atomically.

        Returns:
            Number of bytes written

        Raises:
            BackupStorageError: If the artifact could not be written
        """

    @abstractmethod
    def list_names(self) -> List[str]:
        """All object names under the sink root (artifacts and anything else)."""

    @abstractmethod
    def size_of(self, name: str) -> int:
        """Size in bytes of a stored artifact."""

    def list_backups(self) -> List[str]:
        """Artifact names ordered from oldest to newest revision."""
        names = [n for n in self.list_names() if is_backup_name(n)]
        return sorted(names, key=lambda n: (parse_revision(n), n))

    def get_latest(self) -> str:
        """
        Name of the latest stored artifact, or "" if there is none.

        Raises:
            BackupStorageError: If the sink cannot be listed
        """
        return latest_backup_name(self.list_names())

    def total(self) -> int:
        """Number of stored artifacts."""
        return len(self.list_backups())

    def total_size(self) -> int:
        """Combined size in bytes of all stored artifacts."""
        return sum(self.size_of(name) for name in self.list_backups())

    def describe(self, path: Optional[str] = None) -> str:
        """Human-readable location of the sink (or of ``path`` within it)."""
        return f"{self.storage_type}:{path or ''}"
