"""
Utility functions for keysmith.
"""

import hashlib
import hmac
from typing import Union

from .exceptions import InvalidParameterError


def to_bytes(data: Union[bytes, bytearray, memoryview, str], name: str = "data") -> bytes:
    """
    Normalize a message argument to bytes.

    Strings are encoded as UTF-8.

    Args:
        data: Bytes-like object or string
        name: Argument name used in the error message

    Returns:
        The data as bytes

    Raises:
        InvalidParameterError: If data is None or not bytes-like
    """
    if data is None:
        raise InvalidParameterError(f"{name} cannot be None")
    if isinstance(data, str):
        return data.encode('utf-8')
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise InvalidParameterError(f"{name} must be bytes or str, got {type(data).__name__}")


def int_to_bytes(value: int, length: int) -> bytes:
    """Big-endian encoding of a non-negative integer, left-padded to length bytes."""
    return value.to_bytes(length, byteorder='big')


def sha256_hex(data: bytes) -> str:
    """
    Compute SHA-256 hash and return as hex string.

    Args:
        data: Data to hash

    Returns:
        Hex-encoded SHA-256 hash
    """
    return hashlib.sha256(data).hexdigest()


def constant_time_compare(a: bytes, b: bytes) -> bool:
    """
    Constant-time comparison to prevent timing attacks.

    Args:
        a: First bytes object
        b: Second bytes object

    Returns:
        True if equal, False otherwise
    """
    return hmac.compare_digest(a, b)
