"""Byte-count normalization for backup reporting."""

BYTES_PER_MB = 1024 * 1024


def to_mb(size_bytes: int) -> float:
    """
    Convert a byte count to megabytes (2^20 bytes).

    The result is truncated, not rounded, to two decimal places, using
    integer arithmetic so it is deterministic:

        >>> to_mb(1572864)
        1.5
        >>> to_mb(1048575)
        0.99
    """
    if size_bytes < 0:
        raise ValueError("size_bytes cannot be negative")
    return (size_bytes * 100 // BYTES_PER_MB) / 100
