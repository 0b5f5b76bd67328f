"""
Local File System Backup Sink

Stores snapshots as files below a root directory:

    backup_root/
    ├── 3.1.8_0000000000000007_etcd.backup
    ├── 3.1.8_0000000000000009_etcd.backup
    └── etcd-backups/v1/default/example/      # prefix-addressed writes
        └── 3.1.8_0000000000000001_etcd.backup

Each artifact is streamed into a hidden temporary file in the destination
directory, fsynced, then renamed into place, so readers only ever see
complete artifacts.
"""

import logging
import os
import uuid
from pathlib import Path
from typing import BinaryIO, List, Union

from ..exceptions import BackupStorageError
from .base import BackupSink

logger = logging.getLogger(__name__)


class LocalFileSink(BackupSink):
    """
    Backup sink writing to a local (or mounted) directory.

    Example:
        ```python
        sink = LocalFileSink("./etcd_backups")
        sink.save("3.1.8", 9, stream)
        sink.get_latest()  # '3.1.8_0000000000000009_etcd.backup'
        ```
    """

    storage_type = "LOCAL_FILE"

    # Buffer size for streaming writes (1 MB)
    BUFFER_SIZE = 1024 * 1024

    def __init__(self, root_path: Union[str, Path]):
        self.root_path = Path(root_path)
        self.root_path.mkdir(parents=True, exist_ok=True)
        logger.info(f"LocalFileSink initialized with root: {self.root_path}")

    def _resolve(self, path: str) -> Path:
        """Map ``path`` below the root; absolute paths are taken as root-relative."""
        root = self.root_path.resolve()
        resolved = (root / path.lstrip("/")).resolve()
        try:
            resolved.relative_to(root)
        except ValueError:
            raise BackupStorageError(
                f"path escapes the backup root: {path!r}",
                storage_path=str(root)
            ) from None
        return resolved

    def write(self, path: str, stream: BinaryIO) -> int:
        destination = self._resolve(path)
        temp_file = destination.parent / f".{destination.name}.{uuid.uuid4().hex}.tmp"
        written = 0

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_file, 'wb') as f:
                while True:
                    data = stream.read(self.BUFFER_SIZE)
                    if not data:
                        break
                    f.write(data)
                    written += len(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_file, destination)
        except Exception as e:
            logger.error(f"Failed to write backup to {destination}: {e}")
            if temp_file.exists():
                try:
                    temp_file.unlink()
                except OSError as cleanup_err:
                    logger.warning(f"Failed to cleanup partial backup {temp_file}: {cleanup_err}")
            raise BackupStorageError(
                f"failed to write backup: {e}",
                storage_path=str(destination)
            ) from e

        logger.debug(f"Wrote {written} bytes to {destination}")
        return written

    def list_names(self) -> List[str]:
        try:
            return [
                p.relative_to(self.root_path).as_posix()
                for p in self.root_path.rglob("*")
                if p.is_file()
            ]
        except OSError as e:
            raise BackupStorageError(
                f"failed to list backups: {e}",
                storage_path=str(self.root_path)
            ) from e

    def size_of(self, name: str) -> int:
        return self._resolve(name).stat().st_size

    def describe(self, path=None) -> str:
        return str(self._resolve(path) if path else self.root_path)
