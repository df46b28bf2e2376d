"""
Tests for injectable random sources.
"""
import io

import pytest

from keysmith.common.exceptions import InvalidParameterError, RandomnessError
from keysmith.crypto.entropy import (
    DEFAULT_RANDOM_SOURCE,
    RandomSource,
    ReaderRandomSource,
    SystemRandomSource,
    randfunc,
    read_random,
    resolve_random_source,
)
from tests.utils.crypto_test_utils import (
    CountingRandomSource,
    FailingRandomSource,
    ShortReadRandomSource,
)


class TestSystemRandomSource:
    """Tests for the OS-backed source."""

    def test_returns_requested_length(self):
        """read(n) returns exactly n bytes."""
        assert len(SystemRandomSource().read(32)) == 32

    def test_reads_differ(self):
        """Two reads are not identical."""
        source = SystemRandomSource()
        assert source.read(32) != source.read(32)

    def test_satisfies_protocol(self):
        """SystemRandomSource is a RandomSource."""
        assert isinstance(SystemRandomSource(), RandomSource)


class TestReaderRandomSource:
    """Tests for the stream-backed source."""

    def test_reads_from_stream(self):
        """Bytes come from the wrapped stream in order."""
        source = ReaderRandomSource(io.BytesIO(b"abcdef"))
        assert read_random(source, 3) == b"abc"
        assert read_random(source, 3) == b"def"

    def test_exhausted_stream_is_failure(self):
        """A short read from the stream raises RandomnessError."""
        source = ReaderRandomSource(io.BytesIO(b"ab"))
        with pytest.raises(RandomnessError, match="short read"):
            read_random(source, 4)

    def test_rejects_none_stream(self):
        """A None stream is rejected at construction."""
        with pytest.raises(InvalidParameterError):
            ReaderRandomSource(None)


class TestResolveRandomSource:
    """Tests for source selection."""

    def test_none_means_system_source(self):
        """None resolves to the default system source."""
        assert resolve_random_source(None) is DEFAULT_RANDOM_SOURCE

    def test_custom_source_is_kept(self):
        """A caller-supplied source is used as-is."""
        source = CountingRandomSource()
        assert resolve_random_source(source) is source

    def test_rejects_object_without_read(self):
        """Objects lacking read() are rejected."""
        with pytest.raises(InvalidParameterError, match="read"):
            resolve_random_source(object())


class TestReadRandom:
    """Tests for failure translation."""

    def test_source_exception_becomes_randomness_error(self):
        """Any exception from the source surfaces as RandomnessError."""
        with pytest.raises(RandomnessError, match="entropy pool unavailable") as exc_info:
            read_random(FailingRandomSource(), 16)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_short_read_is_failure(self):
        """Returning fewer bytes than requested is a failure."""
        with pytest.raises(RandomnessError, match="wanted 16 bytes, got 15"):
            read_random(ShortReadRandomSource(), 16)

    def test_no_retry_after_failure(self):
        """A failing source is called exactly once."""
        source = FailingRandomSource()
        with pytest.raises(RandomnessError):
            read_random(source, 8)
        assert source.calls == 1

    def test_randfunc_reads_from_source(self):
        """randfunc adapts a source to randfunc(n) -> bytes."""
        source = CountingRandomSource()
        func = randfunc(source)
        assert len(func(24)) == 24
        assert source.bytes_read == 24
