"""
Unit tests for backup sinks.

Tests cover:
- Atomic publish and cleanup of partial artifacts (local file system)
- Latest-artifact lookup, totals and listing order
- S3 uploads, listing and error translation against a stub client
- Sink construction from storage settings
"""

import io

import pytest
from botocore.exceptions import ClientError

from config.settings import StorageSettings, StorageType
from etcd_backup import BackupStorageError, LocalFileSink, S3Sink, create_sink
from etcd_backup.sinks import latest_backup_name
from etcd_backup_ops_exceptions import ConfigurationError


class FailingStream:
    """Yields some bytes, then fails like a dropped connection."""

    def __init__(self):
        self._calls = 0

    def read(self, size=-1):
        self._calls += 1
        if self._calls == 1:
            return b"partial"
        raise OSError("connection reset by peer")


class TestLatestBackupName:

    def test_highest_revision_wins(self):
        names = [
            "3.1.8_0000000000000009_etcd.backup",
            "3.2.0_0000000000000010_etcd.backup",
            "3.1.8_0000000000000007_etcd.backup",
        ]

        assert latest_backup_name(names) == "3.2.0_0000000000000010_etcd.backup"

    def test_equal_revisions_pick_greatest_name(self):
        names = ["3.1.8_0000000000000009_etcd.backup", "3.2.0_0000000000000009_etcd.backup"]

        assert latest_backup_name(names) == "3.2.0_0000000000000009_etcd.backup"

    def test_ignores_other_objects(self):
        names = ["README", ".3.1.8_0000000000000099_etcd.backup.1a2b.tmp"]

        assert latest_backup_name(names) == ""


class TestLocalFileSink:

    def test_save_publishes_named_artifact(self, tmp_path):
        sink = LocalFileSink(tmp_path)

        written = sink.save("3.1.8", 9, io.BytesIO(b"snapshot"))

        assert written == 8
        assert (tmp_path / "3.1.8_0000000000000009_etcd.backup").read_bytes() == b"snapshot"
        assert [p.name for p in tmp_path.iterdir()] == ["3.1.8_0000000000000009_etcd.backup"]

    def test_write_creates_prefix_directories(self, tmp_path):
        sink = LocalFileSink(tmp_path)
        path = "etcd-backups/v1/default/example/3.1.8_0000000000000001_etcd.backup"

        sink.write(path, io.BytesIO(b"data"))

        assert (tmp_path / path).read_bytes() == b"data"
        assert sink.get_latest() == path

    def test_failed_write_leaves_nothing_behind(self, tmp_path):
        sink = LocalFileSink(tmp_path)
        sink.save("3.1.8", 3, io.BytesIO(b"old"))

        with pytest.raises(BackupStorageError, match="connection reset by peer") as exc_info:
            sink.save("3.1.8", 4, FailingStream())

        assert exc_info.value.storage_path.endswith("3.1.8_0000000000000004_etcd.backup")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["3.1.8_0000000000000003_etcd.backup"]
        assert sink.get_latest() == "3.1.8_0000000000000003_etcd.backup"

    def test_listing_and_totals(self, tmp_path):
        sink = LocalFileSink(tmp_path)
        sink.save("3.1.8", 12, io.BytesIO(b"12345"))
        sink.save("3.1.8", 2, io.BytesIO(b"12"))
        (tmp_path / "notes.txt").write_text("not a backup")

        assert sink.list_backups() == [
            "3.1.8_0000000000000002_etcd.backup",
            "3.1.8_0000000000000012_etcd.backup",
        ]
        assert sink.total() == 2
        assert sink.total_size() == 7

    def test_absolute_path_stays_under_root(self, tmp_path):
        sink = LocalFileSink(tmp_path / "root")

        sink.write("/etc/x/3.1.8_0000000000000001_etcd.backup", io.BytesIO(b"data"))

        assert (tmp_path / "root" / "etc" / "x" / "3.1.8_0000000000000001_etcd.backup").read_bytes() == b"data"

    def test_path_escaping_root_is_rejected(self, tmp_path):
        sink = LocalFileSink(tmp_path / "root")

        with pytest.raises(BackupStorageError, match="escapes the backup root"):
            sink.write("../outside/3.1.8_0000000000000001_etcd.backup", io.BytesIO(b"data"))

        assert not (tmp_path / "outside").exists()

    def test_empty_root(self, tmp_path):
        sink = LocalFileSink(tmp_path / "missing")

        assert sink.get_latest() == ""
        assert sink.total() == 0


class StubPaginator:
    def __init__(self, keys):
        self._keys = keys

    def paginate(self, Bucket, Prefix):
        keys = [k for k in self._keys if k.startswith(Prefix)]
        # Two pages to exercise pagination
        yield {"Contents": [{"Key": k} for k in keys[:1]]}
        yield {"Contents": [{"Key": k} for k in keys[1:]]}


class StubS3Client:
    def __init__(self, fail_upload=False):
        self.objects = {}
        self.fail_upload = fail_upload

    def upload_fileobj(self, fileobj, bucket, key):
        if self.fail_upload:
            raise ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")
        self.objects[(bucket, key)] = fileobj.read()

    def get_paginator(self, name):
        assert name == "list_objects_v2"
        return StubPaginator([key for _, key in self.objects])

    def head_object(self, Bucket, Key):
        return {"ContentLength": len(self.objects[(Bucket, Key)])}


class TestS3Sink:

    def test_save_uploads_under_prefix(self):
        client = StubS3Client()
        sink = S3Sink(bucket="backups", prefix="/etcd/example/", client=client)

        written = sink.save("3.1.8", 9, io.BytesIO(b"snapshot"))

        assert written == 8
        assert client.objects == {("backups", "etcd/example/3.1.8_0000000000000009_etcd.backup"): b"snapshot"}

    def test_latest_and_totals(self):
        client = StubS3Client()
        sink = S3Sink(bucket="backups", prefix="etcd", client=client)
        sink.save("3.1.8", 5, io.BytesIO(b"aaa"))
        sink.save("3.1.8", 6, io.BytesIO(b"bbbb"))
        client.objects[("backups", "other/3.1.8_0000000000000099_etcd.backup")] = b""

        assert sink.get_latest() == "3.1.8_0000000000000006_etcd.backup"
        assert sink.total() == 2
        assert sink.total_size() == 7

    def test_upload_failure(self):
        sink = S3Sink(bucket="backups", client=StubS3Client(fail_upload=True))

        with pytest.raises(BackupStorageError) as exc_info:
            sink.write("3.1.8_0000000000000001_etcd.backup", io.BytesIO(b"x"))

        assert exc_info.value.storage_path == "s3://backups/3.1.8_0000000000000001_etcd.backup"

    def test_bucket_is_required(self):
        with pytest.raises(ValueError):
            S3Sink(bucket="")


class TestCreateSink:

    def test_local_sink(self, tmp_path):
        sink = create_sink(StorageSettings(storage_type=StorageType.LOCAL_FILE, local_root_path=str(tmp_path)))

        assert isinstance(sink, LocalFileSink)

    def test_s3_sink(self):
        sink = create_sink(StorageSettings(storage_type=StorageType.S3, s3_bucket="backups", s3_prefix="etcd"))

        assert isinstance(sink, S3Sink)
        assert sink.describe() == "s3://backups/etcd"

    def test_s3_without_bucket(self):
        with pytest.raises(ConfigurationError):
            create_sink(StorageSettings(storage_type=StorageType.S3))
