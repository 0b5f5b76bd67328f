"""
S3 Backup Sink

Stores snapshots as objects under a key prefix of an S3 (or S3 compatible)
bucket. ``upload_fileobj`` only makes an object visible once the upload,
multipart or not, has completed, which gives the atomic publish the
revision ledger depends on.
"""

import logging
import posixpath
from typing import BinaryIO, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import BackupStorageError
from .base import BackupSink, CountingReader

logger = logging.getLogger(__name__)


class S3Sink(BackupSink):
    """
    Backup sink writing to an S3 bucket.

    Example:
        ```python
        sink = S3Sink(bucket="backups", prefix="etcd/example", region="us-east-1")
        sink.save("3.1.8", 9, stream)
        ```
    """

    storage_type = "S3"

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        client=None
    ):
        if not bucket:
            raise ValueError("bucket must be set for the S3 sink")
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        self.region = region
        self.endpoint_url = endpoint_url
        self._client = client

        logger.info(f"S3Sink initialized for s3://{self.bucket}/{self.prefix}")

    @property
    def client(self):
        """Lazy initialization of S3 client."""
        if self._client is None:
            self._client = boto3.client('s3', region_name=self.region, endpoint_url=self.endpoint_url)
        return self._client

    def _key(self, path: str) -> str:
        path = path.lstrip("/")
        return posixpath.join(self.prefix, path) if self.prefix else path

    def write(self, path: str, stream: BinaryIO) -> int:
        key = self._key(path)
        reader = CountingReader(stream)
        try:
            self.client.upload_fileobj(reader, self.bucket, key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 upload failed for s3://{self.bucket}/{key}: {e}")
            raise BackupStorageError(
                f"failed to upload backup: {e}",
                storage_path=f"s3://{self.bucket}/{key}"
            ) from e

        logger.debug(f"Uploaded {reader.bytes_read} bytes to s3://{self.bucket}/{key}")
        return reader.bytes_read

    def list_names(self) -> List[str]:
        list_prefix = f"{self.prefix}/" if self.prefix else ""
        names = []
        try:
            paginator = self.client.get_paginator('list_objects_v2')
            for page in paginator.paginate(Bucket=self.bucket, Prefix=list_prefix):
                for obj in page.get('Contents', []):
                    names.append(obj['Key'][len(list_prefix):])
        except (ClientError, BotoCoreError) as e:
            raise BackupStorageError(
                f"failed to list backups: {e}",
                storage_path=f"s3://{self.bucket}/{list_prefix}"
            ) from e
        return names

    def size_of(self, name: str) -> int:
        key = self._key(name)
        try:
            response = self.client.head_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise BackupStorageError(
                f"failed to stat backup: {e}",
                storage_path=f"s3://{self.bucket}/{key}"
            ) from e
        return int(response['ContentLength'])

    def describe(self, path=None) -> str:
        return f"s3://{self.bucket}/{self._key(path) if path else self.prefix}"
