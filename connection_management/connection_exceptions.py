"""
Connection Management Exceptions

This module defines specialized exceptions for etcd member connections,
providing detailed error reporting and handling for connection-related issues.

These exceptions let callers tell apart:
- A member that could not be dialed in time
- A member that refused or dropped the connection
- A request the member answered with an error
- Use of a handle that has already been released
"""

from etcd_backup_ops_exceptions import ConnectionError as BaseConnectionError


class ConnectionError(BaseConnectionError):
    """
    Base exception for all connection-related errors.

    Carries the endpoint that failed so that callers probing many members
    can report which one misbehaved.
    """

    def __init__(self, message: str, endpoint: str = ""):
        self.message = message
        self.endpoint = endpoint
        super().__init__(message)

    def __str__(self) -> str:
        if self.endpoint:
            return f"{self.message} (endpoint: {self.endpoint})"
        return self.message


class ConnectionTimeoutError(ConnectionError):
    """
    Raised when dialing a member or a request against it exceeds its deadline.
    """
    pass


class ServerUnavailableError(ConnectionError):
    """
    Raised when the member is unreachable or refuses the connection.
    """
    pass


class RequestFailedError(ConnectionError):
    """
    Raised when the member answers a request with an error status.
    """
    pass


class ConnectionClosedError(ConnectionError):
    """
    Raised when attempting to use a connection or stream that was already closed.
    """
    pass
