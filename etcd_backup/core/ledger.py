"""
Revision Ledger

Determines the revision of the most recently stored backup by asking the
sink for its latest artifact and parsing the revision out of the name.
Listing is retried a bounded number of times for transient storage
failures; if the baseline still cannot be established the ledger raises
BackupLedgerError, which callers must treat as fatal.
"""

import logging

from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_fixed

from ..exceptions import BackupLedgerError, BackupStorageError, InvalidBackupNameError
from ..sinks.base import BackupSink
from ..utils.naming import parse_revision

logger = logging.getLogger(__name__)


class RevisionLedger:
    """
    Reads the backup baseline from a sink.

    Example:
        ```python
        ledger = RevisionLedger(sink, retry_attempts=3, retry_wait_seconds=1.0)
        last_rev = ledger.latest_revision()  # 0 when nothing is stored yet
        ```
    """

    def __init__(self, sink: BackupSink, retry_attempts: int = 3, retry_wait_seconds: float = 1.0):
        if retry_attempts < 1:
            raise ValueError("retry_attempts must be at least 1")
        self._sink = sink
        self.retry_attempts = retry_attempts
        self.retry_wait_seconds = retry_wait_seconds

    def latest_backup_name(self) -> str:
        """
        Name of the latest stored artifact, "" if the sink holds none.

        Raises:
            BackupLedgerError: If the sink could not be listed
        """
        retrying = Retrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_fixed(self.retry_wait_seconds),
            retry=retry_if_exception_type((BackupStorageError, OSError)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    return self._sink.get_latest()
        except (BackupStorageError, OSError) as e:
            raise BackupLedgerError(
                f"failed to get latest backup: {e}",
                context={"sink": self._sink.describe(), "attempts": self.retry_attempts}
            ) from e

    def latest_revision(self) -> int:
        """
        Revision of the latest stored backup, 0 if there is none.

        Raises:
            BackupLedgerError: If the sink could not be listed or the name is malformed
        """
        name = self.latest_backup_name()
        if not name:
            logger.info("No previous backup found")
            return 0
        try:
            revision = parse_revision(name)
        except InvalidBackupNameError as e:
            raise BackupLedgerError(f"malformed latest backup name {name!r}: {e}") from e
        logger.info(f"Latest backup {name} is at revision {revision}")
        return revision
