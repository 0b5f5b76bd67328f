"""Shared fixtures for the etcd_backup_ops tests."""

import os
from typing import Dict, Optional

import pytest

from cluster_membership import StaticMemberLister
from config.settings import ConnectionSettings, LedgerSettings
from etcd_backup import BackupManager

from .fakes import CLUSTER, NAMESPACE, FakeClientFactory, MemberBehavior, MemorySink, running


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep ETCD_BACKUP_* variables of the host out of the tests."""
    for key in list(os.environ):
        if key.upper().startswith("ETCD_BACKUP_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def connection_settings():
    return ConnectionSettings(
        client_port=2379,
        dial_timeout=1.0,
        request_timeout=1.0,
        snapshot_timeout=5.0,
        max_transfer_seconds=60.0,
        probe_workers=1
    )


@pytest.fixture
def ledger_settings():
    return LedgerSettings(retry_attempts=3, retry_wait_seconds=0)


@pytest.fixture
def make_manager(connection_settings, ledger_settings):
    """
    Build a BackupManager over fake members.

    ``behaviors`` maps member names (``example-0`` ...) to how they answer;
    all of them are listed as running unless ``members`` is given.
    """

    def _make(
        behaviors: Dict[str, MemberBehavior],
        sink: Optional[MemorySink] = None,
        members=None,
        tls_config=None,
        probe_workers: int = 1
    ):
        factory = FakeClientFactory(behaviors)
        lister = StaticMemberLister(members if members is not None else running(*behaviors))
        manager = BackupManager(
            member_lister=lister,
            cluster_name=CLUSTER,
            namespace=NAMESPACE,
            sink=sink if sink is not None else MemorySink(),
            tls_config=tls_config,
            client_factory=factory,
            connection_settings=connection_settings.model_copy(update={"probe_workers": probe_workers}),
            ledger_settings=ledger_settings
        )
        return manager, factory

    return _make
