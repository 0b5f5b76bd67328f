"""
Connection Management Module

This module provides the client side of talking to individual etcd members:

- A factory that dials one member endpoint with a bounded timeout
- A connection handle exposing serializable reads, status and snapshot
- A read-once snapshot stream with an overall transfer ceiling
- Specific exception types for dial, request and closed-handle failures

Every handle and stream is a context manager and releases its resources
exactly once.
"""

from .client_factory import EtcdClientFactory, DEFAULT_DIAL_TIMEOUT
from .etcd_connection import (
    EtcdConnection,
    SnapshotStream,
    MemberStatus,
    TLSConfig,
    ROOT_KEY
)
from .connection_exceptions import (
    ConnectionError,
    ConnectionTimeoutError,
    ServerUnavailableError,
    RequestFailedError,
    ConnectionClosedError
)

__all__ = [
    'EtcdClientFactory',
    'DEFAULT_DIAL_TIMEOUT',
    'EtcdConnection',
    'SnapshotStream',
    'MemberStatus',
    'TLSConfig',
    'ROOT_KEY',
    'ConnectionError',
    'ConnectionTimeoutError',
    'ServerUnavailableError',
    'RequestFailedError',
    'ConnectionClosedError',
]
