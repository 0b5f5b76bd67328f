"""
Backup Artifact Naming

Backup identity is encoded in the artifact name:

    <etcd_version>_<revision zero-padded to 16 digits>_etcd.backup

e.g. ``3.1.8_0000000000000009_etcd.backup``. The fixed padding keeps the
lexicographic order of names equal to the numeric order of revisions, so
the latest backup of a version is the greatest name.
"""

import posixpath
from typing import Optional

from ..exceptions import InvalidBackupNameError

BACKUP_FILENAME_SUFFIX = "etcd.backup"
REVISION_WIDTH = 16
MAX_REVISION = 10 ** REVISION_WIDTH - 1


def make_backup_name(version: str, revision: int) -> str:
    """
    Build the artifact name for a snapshot of ``version`` at ``revision``.

    Raises:
        ValueError: If the version is empty or contains the separator, or
            the revision does not fit the fixed width
    """
    if not version or "_" in version or "/" in version:
        raise ValueError(f"invalid etcd version for backup name: {version!r}")
    if revision < 0 or revision > MAX_REVISION:
        raise ValueError(f"revision {revision} outside [0, {MAX_REVISION}]")
    return f"{version}_{revision:0{REVISION_WIDTH}d}_{BACKUP_FILENAME_SUFFIX}"


def make_backup_path(prefix: Optional[str], version: str, revision: int) -> str:
    """
    Join ``prefix`` with the artifact name.

    Example:
        >>> make_backup_path("etcd-backups/v1/default/example", "3.1.8", 1)
        'etcd-backups/v1/default/example/3.1.8_0000000000000001_etcd.backup'
    """
    name = make_backup_name(version, revision)
    if not prefix:
        return name
    return posixpath.join(prefix, name)


def _split_name(name: str):
    base = posixpath.basename(name)
    parts = base.split("_")
    if len(parts) != 3 or parts[2] != BACKUP_FILENAME_SUFFIX:
        raise InvalidBackupNameError(f"not a backup name: {name!r}")
    version, revision = parts[0], parts[1]
    if not version or len(revision) != REVISION_WIDTH or not revision.isdigit():
        raise InvalidBackupNameError(f"not a backup name: {name!r}")
    return version, int(revision)


def is_backup_name(name: str) -> bool:
    """True if the last path component of ``name`` is a backup artifact name."""
    try:
        _split_name(name)
    except InvalidBackupNameError:
        return False
    return True


def parse_revision(name: str) -> int:
    """
    Extract the revision encoded in an artifact name (path prefixes allowed).

    Raises:
        InvalidBackupNameError: If the name is not a backup artifact name
    """
    return _split_name(name)[1]


def parse_version(name: str) -> str:
    """Extract the etcd version encoded in an artifact name."""
    return _split_name(name)[0]
