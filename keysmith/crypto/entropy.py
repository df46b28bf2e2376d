"""
Injectable entropy sources.

Every randomized operation in keysmith takes an optional ``random_source``.
A source only has to provide ``read(size) -> bytes``. Any exception it raises,
or a short read, reaches the caller as RandomnessError: there is no retry and
no silent fallback to another source.
"""

import logging
import secrets
from functools import partial
from typing import BinaryIO, Callable, Optional, Protocol, runtime_checkable

from keysmith.common.exceptions import RandomnessError, InvalidParameterError

logger = logging.getLogger(__name__)


@runtime_checkable
class RandomSource(Protocol):
    """Anything that can produce random bytes on demand."""

    def read(self, size: int) -> bytes:
        ...


class SystemRandomSource:
    """Operating-system CSPRNG."""

    def read(self, size: int) -> bytes:
        return secrets.token_bytes(size)

    def __repr__(self) -> str:
        return "SystemRandomSource()"


class ReaderRandomSource:
    """
    Random source backed by a binary stream.

    Useful for /dev/urandom or for replaying fixed bytes in tests. A read that
    returns fewer bytes than requested is a failure.
    """

    def __init__(self, stream: BinaryIO):
        if stream is None:
            raise InvalidParameterError("stream cannot be None")
        self._stream = stream

    def read(self, size: int) -> bytes:
        return self._stream.read(size)


DEFAULT_RANDOM_SOURCE = SystemRandomSource()


def resolve_random_source(random_source: Optional[RandomSource]) -> RandomSource:
    """
    Return the source to use for an operation.

    Args:
        random_source: Caller-supplied source, or None for the system CSPRNG

    Raises:
        InvalidParameterError: If the object has no read() method
    """
    if random_source is None:
        return DEFAULT_RANDOM_SOURCE
    if not isinstance(random_source, RandomSource):
        raise InvalidParameterError(
            f"random source must provide read(size), got {type(random_source).__name__}"
        )
    return random_source


def read_random(random_source: RandomSource, size: int) -> bytes:
    """
    Read exactly ``size`` bytes from a source.

    Args:
        random_source: Source to read from
        size: Number of bytes required

    Returns:
        ``size`` random bytes

    Raises:
        RandomnessError: If the source raises or returns a short read
    """
    try:
        data = random_source.read(size)
    except RandomnessError:
        raise
    except Exception as e:
        logger.warning("Random source %r failed: %s", random_source, e)
        raise RandomnessError(f"failed to read {size} random bytes: {e}") from e

    if data is None or len(data) != size:
        got = 0 if data is None else len(data)
        logger.warning("Random source %r returned %d of %d bytes", random_source, got, size)
        raise RandomnessError(f"short read from random source: wanted {size} bytes, got {got}")

    return bytes(data)


def randfunc(random_source: Optional[RandomSource]) -> Callable[[int], bytes]:
    """
    Adapt a source to the ``randfunc(n) -> bytes`` callable used by
    pycryptodome and python-ecdsa.
    """
    return partial(read_random, resolve_random_source(random_source))
