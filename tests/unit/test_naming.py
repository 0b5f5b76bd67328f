"""
Unit tests for artifact naming and size normalization.
"""

import pytest

from etcd_backup import InvalidBackupNameError
from etcd_backup.utils import (
    MAX_REVISION,
    is_backup_name,
    make_backup_name,
    make_backup_path,
    parse_revision,
    parse_version,
    to_mb
)


class TestBackupNames:

    def test_name_format(self):
        assert make_backup_name("3.1.8", 9) == "3.1.8_0000000000000009_etcd.backup"

    def test_parse_name(self):
        name = make_backup_name("3.2.11", 123456789)

        assert parse_revision(name) == 123456789
        assert parse_version(name) == "3.2.11"

    def test_parse_with_path_prefix(self):
        assert parse_revision("v1/default/example/3.1.8_0000000000000042_etcd.backup") == 42

    def test_name_order_follows_revision_order(self):
        revisions = [10, 9, 100, 0, 99999, 1000]
        names = [make_backup_name("3.1.8", r) for r in revisions]

        assert [parse_revision(n) for n in sorted(names)] == sorted(revisions)

    def test_prefix_path(self):
        path = make_backup_path("etcd-backups/v1/default/example-etcd-cluster", "3.1.8", 1)

        assert path == "etcd-backups/v1/default/example-etcd-cluster/3.1.8_0000000000000001_etcd.backup"

    def test_empty_prefix(self):
        assert make_backup_path("", "3.1.8", 1) == "3.1.8_0000000000000001_etcd.backup"

    @pytest.mark.parametrize("revision", [-1, MAX_REVISION + 1])
    def test_revision_out_of_range(self, revision):
        with pytest.raises(ValueError):
            make_backup_name("3.1.8", revision)

    @pytest.mark.parametrize("version", ["", "3_1", "3/1"])
    def test_invalid_version(self, version):
        with pytest.raises(ValueError):
            make_backup_name(version, 1)

    @pytest.mark.parametrize("name", [
        "backup.tar.gz",
        "3.1.8_9_etcd.backup",
        "3.1.8_000000000000000x_etcd.backup",
        "_0000000000000009_etcd.backup",
        ".3.1.8_0000000000000009_etcd.backup.abcd.tmp",
    ])
    def test_not_backup_names(self, name):
        assert not is_backup_name(name)
        with pytest.raises(InvalidBackupNameError):
            parse_revision(name)

    def test_invalid_name_is_value_error(self):
        with pytest.raises(ValueError):
            parse_revision("nonsense")


class TestToMb:

    @pytest.mark.parametrize("size_bytes, expected", [
        (0, 0.0),
        (1048576, 1.0),
        (1572864, 1.5),
        (1048575, 0.99),
        (10485, 0.0),
        (10486, 0.01),
    ])
    def test_truncates_to_two_decimals(self, size_bytes, expected):
        assert to_mb(size_bytes) == expected

    def test_negative_size(self):
        with pytest.raises(ValueError):
            to_mb(-1)
