"""
Unit tests for RevisionLedger.
"""

import pytest

from etcd_backup import BackupLedgerError, BackupPhase, RevisionLedger

from ..fakes import MemorySink


class StaleNameSink(MemorySink):
    """Reports a latest name that does not parse."""

    def get_latest(self) -> str:
        return "3.1.8_notarevision_etcd.backup"


class TestRevisionLedger:

    def test_empty_sink_is_revision_zero(self):
        ledger = RevisionLedger(MemorySink(), retry_wait_seconds=0)

        assert ledger.latest_backup_name() == ""
        assert ledger.latest_revision() == 0

    def test_latest_revision_across_versions(self):
        sink = MemorySink(names=[
            "3.1.8_0000000000000012_etcd.backup",
            "3.2.0_0000000000000030_etcd.backup",
            "3.2.0_0000000000000021_etcd.backup",
        ])

        assert RevisionLedger(sink, retry_wait_seconds=0).latest_revision() == 30

    def test_transient_listing_failures_are_retried(self):
        sink = MemorySink(names=["3.1.8_0000000000000004_etcd.backup"], list_failures=2)
        ledger = RevisionLedger(sink, retry_attempts=3, retry_wait_seconds=0)

        assert ledger.latest_revision() == 4
        assert sink.list_calls == 3

    def test_persistent_listing_failure_is_fatal(self):
        sink = MemorySink(list_failures=5)
        ledger = RevisionLedger(sink, retry_attempts=2, retry_wait_seconds=0)

        with pytest.raises(BackupLedgerError) as exc_info:
            ledger.latest_revision()

        assert exc_info.value.fatal
        assert exc_info.value.phase == BackupPhase.LEDGER
        assert exc_info.value.context["attempts"] == 2
        assert sink.list_calls == 2

    def test_malformed_latest_name_is_fatal(self):
        ledger = RevisionLedger(StaleNameSink(), retry_wait_seconds=0)

        with pytest.raises(BackupLedgerError, match="malformed latest backup name"):
            ledger.latest_revision()

    def test_retry_attempts_must_be_positive(self):
        with pytest.raises(ValueError):
            RevisionLedger(MemorySink(), retry_attempts=0)
