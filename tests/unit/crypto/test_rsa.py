"""
Tests for RSA key generation, encryption and signatures.

These tests verify:
- Key generation limits and entropy handling
- OAEP and PKCS#1 v1.5 round trips across every admissible message length
- PSS and PKCS#1 v1.5 signatures, including cross-scheme rejection
"""
import pytest
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes

from keysmith.common.exceptions import (
    InvalidCiphertextError,
    InvalidParameterError,
    InvalidSignatureError,
    RandomnessError,
    WeakParameterError,
)
from keysmith.crypto.rsa import (
    OAEP,
    PKCS1V15,
    RSAKeyPair,
    decrypt_oaep,
    decrypt_pkcs1v15,
    encrypt_oaep,
    encrypt_pkcs1v15,
    generate_rsa_key_pair,
    max_message_length,
    rsa_key_size,
    rsa_private_key_from_pem,
    rsa_public_key_from_pem,
    sign_pkcs1v15,
    sign_pss,
    verify_pkcs1v15,
    verify_pss,
)
from tests.utils.crypto_test_utils import CountingRandomSource, FailingRandomSource


# =============================================================================
# Key Generation Tests
# =============================================================================

class TestGenerateRSAKeyPair:
    """Tests for RSA key generation."""

    def test_rejects_512_bits(self):
        """512-bit keys are too weak."""
        with pytest.raises(WeakParameterError, match="at least 1024"):
            generate_rsa_key_pair(512)

    def test_weak_size_checked_before_entropy(self):
        """A weak size is rejected without reading the source."""
        source = CountingRandomSource()
        with pytest.raises(WeakParameterError):
            generate_rsa_key_pair(1023, source)
        assert source.reads == 0

    @pytest.mark.parametrize("bits", ["2048", 2048.0, True, None])
    def test_rejects_non_integer_size(self, bits):
        """The key size must be an int."""
        with pytest.raises(InvalidParameterError):
            generate_rsa_key_pair(bits)

    def test_failing_source(self):
        """Entropy failure during prime generation propagates."""
        with pytest.raises(RandomnessError):
            generate_rsa_key_pair(1024, FailingRandomSource())

    def test_entropy_drawn_from_source(self):
        """All prime generation draws from the supplied source."""
        source = CountingRandomSource()
        pair = generate_rsa_key_pair(1024, source)
        assert source.bytes_read > 0
        assert rsa_key_size(pair.private_key) == 1024

    def test_key_properties(self, rsa_2048):
        """Generated keys have the requested size and e = 65537."""
        assert rsa_key_size(rsa_2048.private_key) == 2048
        assert rsa_key_size(rsa_2048.public_key) == 2048
        assert rsa_2048.public_key.public_numbers().e == 65537
        assert rsa_2048.public_key.public_numbers() == rsa_2048.private_key.private_numbers().public_numbers

    def test_key_size_of_none(self):
        """rsa_key_size(None) is 0."""
        assert rsa_key_size(None) == 0

    def test_keypair_is_immutable(self, rsa_1024):
        """RSAKeyPair is frozen."""
        with pytest.raises(AttributeError):
            rsa_1024.private_key = None


class TestRSAPem:
    """Tests for RSA PEM helpers."""

    def test_keypair_pem_round_trip(self, rsa_1024):
        """Both halves round-trip through PEM."""
        private_key = rsa_private_key_from_pem(rsa_1024.private_key_to_pem())
        public_key = rsa_public_key_from_pem(rsa_1024.public_key_to_pem())
        assert private_key.private_numbers() == rsa_1024.private_key.private_numbers()
        assert public_key.public_numbers() == rsa_1024.public_key.public_numbers()

    def test_none_halves(self):
        """Serializing a missing half is an invalid parameter."""
        pair = RSAKeyPair(private_key=None, public_key=None)
        with pytest.raises(InvalidParameterError):
            pair.private_key_to_pem()
        with pytest.raises(InvalidParameterError):
            pair.public_key_to_pem()


# =============================================================================
# Encryption Tests
# =============================================================================

class TestMaxMessageLength:
    """Tests for plaintext limits."""

    def test_limits_for_1024(self, rsa_1024):
        """k - 66 for OAEP-SHA256 and k - 11 for PKCS#1 v1.5."""
        assert max_message_length(rsa_1024.public_key, OAEP) == 62
        assert max_message_length(rsa_1024.public_key, PKCS1V15) == 117

    def test_scheme_is_case_insensitive(self, rsa_1024):
        """Scheme names ignore case."""
        assert max_message_length(rsa_1024.public_key, "oaep") == 62

    def test_unknown_scheme(self, rsa_1024):
        """Unknown schemes are rejected."""
        with pytest.raises(InvalidParameterError, match="unsupported padding"):
            max_message_length(rsa_1024.public_key, "raw")


class TestOAEP:
    """Tests for RSA-OAEP."""

    def test_round_trip_2048(self, rsa_2048):
        """A short message round-trips under a 2048-bit key."""
        ciphertext = encrypt_oaep(rsa_2048.public_key, b"test message")
        assert len(ciphertext) == 256
        assert decrypt_oaep(rsa_2048.private_key, ciphertext) == b"test message"

    def test_every_admissible_length(self, rsa_1024):
        """Every length from 0 to the maximum round-trips."""
        limit = max_message_length(rsa_1024.public_key, OAEP)
        for length in range(limit + 1):
            message = bytes((i * 7) & 0xFF for i in range(length))
            ciphertext = encrypt_oaep(rsa_1024.public_key, message)
            assert decrypt_oaep(rsa_1024.private_key, ciphertext) == message

    def test_rejects_oversized_message(self, rsa_1024):
        """One byte over the limit is rejected, not truncated."""
        with pytest.raises(InvalidParameterError, match="message too long"):
            encrypt_oaep(rsa_1024.public_key, b"\x00" * 63)

    def test_randomized(self, rsa_1024):
        """Encrypting twice gives different ciphertexts."""
        assert encrypt_oaep(rsa_1024.public_key, b"m") != encrypt_oaep(rsa_1024.public_key, b"m")

    def test_seed_drawn_from_source(self, rsa_1024):
        """The 32-byte seed comes from the supplied source."""
        source = CountingRandomSource()
        encrypt_oaep(rsa_1024.public_key, b"m", source)
        assert source.bytes_read == 32

    def test_failing_source(self, rsa_1024):
        """Entropy failure propagates."""
        with pytest.raises(RandomnessError):
            encrypt_oaep(rsa_1024.public_key, b"m", FailingRandomSource())

    def test_wrong_key(self, rsa_1024, other_rsa_1024):
        """Decrypting with another key fails."""
        ciphertext = encrypt_oaep(rsa_1024.public_key, b"secret")
        with pytest.raises(InvalidCiphertextError):
            decrypt_oaep(other_rsa_1024.private_key, ciphertext)

    def test_tampered_ciphertext(self, rsa_1024):
        """Flipping a bit makes decryption fail."""
        ciphertext = bytearray(encrypt_oaep(rsa_1024.public_key, b"secret"))
        ciphertext[-1] ^= 0x01
        with pytest.raises(InvalidCiphertextError):
            decrypt_oaep(rsa_1024.private_key, bytes(ciphertext))

    def test_truncated_ciphertext(self, rsa_1024):
        """Short ciphertexts fail uniformly."""
        with pytest.raises(InvalidCiphertextError, match="RSA decryption failed"):
            decrypt_oaep(rsa_1024.private_key, b"\x01" * 10)

    def test_none_key(self):
        """A None key is an invalid parameter."""
        with pytest.raises(InvalidParameterError, match="public key cannot be None"):
            encrypt_oaep(None, b"m")
        with pytest.raises(InvalidParameterError, match="private key cannot be None"):
            decrypt_oaep(None, b"m")

    def test_pkcs1v15_ciphertext_rejected(self, rsa_1024):
        """OAEP decryption refuses PKCS#1 v1.5 ciphertext."""
        ciphertext = encrypt_pkcs1v15(rsa_1024.public_key, b"secret")
        with pytest.raises(InvalidCiphertextError):
            decrypt_oaep(rsa_1024.private_key, ciphertext)


class TestPKCS1v15Encryption:
    """Tests for RSA PKCS#1 v1.5 encryption."""

    def test_every_admissible_length(self, rsa_1024):
        """Every length from 0 to the maximum round-trips."""
        limit = max_message_length(rsa_1024.public_key, PKCS1V15)
        for length in range(limit + 1):
            message = bytes((i * 13 + 1) & 0xFF for i in range(length))
            ciphertext = encrypt_pkcs1v15(rsa_1024.public_key, message)
            assert decrypt_pkcs1v15(rsa_1024.private_key, ciphertext) == message

    def test_rejects_oversized_message(self, rsa_1024):
        """One byte over the limit is rejected."""
        with pytest.raises(InvalidParameterError, match="message too long"):
            encrypt_pkcs1v15(rsa_1024.public_key, b"\x00" * 118)

    def test_failing_source(self, rsa_1024):
        """Entropy failure propagates."""
        with pytest.raises(RandomnessError):
            encrypt_pkcs1v15(rsa_1024.public_key, b"m", FailingRandomSource())

    def test_wrong_key(self, rsa_1024, other_rsa_1024):
        """Decrypting with another key fails."""
        ciphertext = encrypt_pkcs1v15(rsa_1024.public_key, b"secret")
        with pytest.raises(InvalidCiphertextError):
            decrypt_pkcs1v15(other_rsa_1024.private_key, ciphertext)

    def test_tampered_ciphertext(self, rsa_1024):
        """Flipping a bit makes decryption fail."""
        ciphertext = bytearray(encrypt_pkcs1v15(rsa_1024.public_key, b"secret"))
        ciphertext[-1] ^= 0x01
        with pytest.raises(InvalidCiphertextError, match="RSA decryption failed"):
            decrypt_pkcs1v15(rsa_1024.private_key, bytes(ciphertext))

    @pytest.mark.parametrize("value", [0, 1])
    def test_bad_padding_is_not_empty_plaintext(self, rsa_1024, value):
        """Blocks that decrypt to themselves have bad padding and raise."""
        ciphertext = value.to_bytes(128, "big")
        with pytest.raises(InvalidCiphertextError, match="RSA decryption failed"):
            decrypt_pkcs1v15(rsa_1024.private_key, ciphertext)

    def test_wrong_length(self, rsa_1024):
        """Ciphertext of the wrong length fails."""
        with pytest.raises(InvalidCiphertextError):
            decrypt_pkcs1v15(rsa_1024.private_key, b"\x00" * 127)

    def test_none_ciphertext(self, rsa_1024):
        """None ciphertext is an invalid parameter."""
        with pytest.raises(InvalidParameterError):
            decrypt_pkcs1v15(rsa_1024.private_key, None)


# =============================================================================
# Signature Tests
# =============================================================================

class TestPSS:
    """Tests for RSA-PSS signatures."""

    def test_sign_verify(self, rsa_2048):
        """A PSS signature verifies under the matching key."""
        signature = sign_pss(rsa_2048.private_key, b"test", hashes.SHA256)
        assert len(signature) == 256
        verify_pss(rsa_2048.public_key, b"test", signature, hashes.SHA256)

    @pytest.mark.parametrize("algorithm", [hashes.SHA1, hashes.SHA384, hashes.SHA3_256])
    def test_other_hashes(self, rsa_1024, algorithm):
        """Other hash constructors work too."""
        signature = sign_pss(rsa_1024.private_key, b"data", algorithm)
        verify_pss(rsa_1024.public_key, b"data", signature, algorithm)

    def test_randomized(self, rsa_1024):
        """Two PSS signatures of one message differ."""
        a = sign_pss(rsa_1024.private_key, b"m", hashes.SHA256)
        b = sign_pss(rsa_1024.private_key, b"m", hashes.SHA256)
        assert a != b

    def test_modified_message(self, rsa_1024):
        """Changing the message breaks the signature."""
        signature = sign_pss(rsa_1024.private_key, b"original", hashes.SHA256)
        with pytest.raises(InvalidSignatureError):
            verify_pss(rsa_1024.public_key, b"modified", signature, hashes.SHA256)

    def test_wrong_key(self, rsa_1024, other_rsa_1024):
        """Another key does not verify."""
        signature = sign_pss(rsa_1024.private_key, b"m", hashes.SHA256)
        with pytest.raises(InvalidSignatureError):
            verify_pss(other_rsa_1024.public_key, b"m", signature, hashes.SHA256)

    def test_wrong_hash(self, rsa_1024):
        """Verifying with a different hash fails."""
        signature = sign_pss(rsa_1024.private_key, b"m", hashes.SHA256)
        with pytest.raises(InvalidSignatureError):
            verify_pss(rsa_1024.public_key, b"m", signature, hashes.SHA384)

    def test_pkcs1v15_signature_rejected(self, rsa_1024):
        """A PKCS#1 v1.5 signature is not a PSS signature."""
        signature = sign_pkcs1v15(rsa_1024.private_key, b"m", hashes.SHA256)
        with pytest.raises(InvalidSignatureError):
            verify_pss(rsa_1024.public_key, b"m", signature, hashes.SHA256)

    def test_hash_too_large_for_key(self, rsa_1024):
        """SHA-512 with a full-length salt does not fit a 1024-bit key."""
        with pytest.raises(InvalidParameterError, match="PSS signing failed"):
            sign_pss(rsa_1024.private_key, b"m", hashes.SHA512)

    def test_failing_source(self, rsa_1024):
        """Entropy failure propagates."""
        with pytest.raises(RandomnessError):
            sign_pss(rsa_1024.private_key, b"m", hashes.SHA256, FailingRandomSource())

    def test_none_hash(self, rsa_1024):
        """A None hash constructor is an invalid parameter."""
        with pytest.raises(InvalidParameterError):
            sign_pss(rsa_1024.private_key, b"m", None)
        with pytest.raises(InvalidParameterError):
            verify_pss(rsa_1024.public_key, b"m", b"\x00" * 128, None)

    def test_none_key(self):
        """A None key is an invalid parameter."""
        with pytest.raises(InvalidParameterError):
            verify_pss(None, b"m", b"sig", hashes.SHA256)

    def test_unsupported_hash(self, rsa_1024):
        """A hash the RSA backend cannot use is an invalid parameter."""
        with pytest.raises(InvalidParameterError, match="unsupported hash") as exc_info:
            verify_pss(rsa_1024.public_key, b"m", b"\x00" * 128, hashes.BLAKE2b(64))
        assert isinstance(exc_info.value.__cause__, UnsupportedAlgorithm)


class TestPKCS1v15Signatures:
    """Tests for RSA PKCS#1 v1.5 signatures."""

    def test_sign_verify(self, rsa_1024):
        """A signature verifies under the matching key."""
        signature = sign_pkcs1v15(rsa_1024.private_key, b"test", hashes.SHA256)
        verify_pkcs1v15(rsa_1024.public_key, b"test", signature, hashes.SHA256)

    def test_deterministic(self, rsa_1024):
        """Signing the same message twice gives the same signature."""
        a = sign_pkcs1v15(rsa_1024.private_key, b"m", hashes.SHA512)
        b = sign_pkcs1v15(rsa_1024.private_key, b"m", hashes.SHA512)
        assert a == b

    def test_modified_message(self, rsa_1024):
        """Changing the message breaks the signature."""
        signature = sign_pkcs1v15(rsa_1024.private_key, b"original", hashes.SHA256)
        with pytest.raises(InvalidSignatureError):
            verify_pkcs1v15(rsa_1024.public_key, b"modified", signature, hashes.SHA256)

    def test_wrong_key(self, rsa_1024, other_rsa_1024):
        """Another key does not verify."""
        signature = sign_pkcs1v15(rsa_1024.private_key, b"m", hashes.SHA256)
        with pytest.raises(InvalidSignatureError):
            verify_pkcs1v15(other_rsa_1024.public_key, b"m", signature, hashes.SHA256)

    def test_pss_signature_rejected(self, rsa_1024):
        """A PSS signature is not a PKCS#1 v1.5 signature."""
        signature = sign_pss(rsa_1024.private_key, b"m", hashes.SHA256)
        with pytest.raises(InvalidSignatureError):
            verify_pkcs1v15(rsa_1024.public_key, b"m", signature, hashes.SHA256)

    def test_none_key(self):
        """A None key is an invalid parameter."""
        with pytest.raises(InvalidParameterError):
            sign_pkcs1v15(None, b"m", hashes.SHA256)

    def test_unsupported_hash(self, rsa_1024):
        """A hash the RSA backend cannot use is an invalid parameter."""
        with pytest.raises(InvalidParameterError, match="unsupported hash"):
            sign_pkcs1v15(rsa_1024.private_key, b"m", hashes.BLAKE2b(64))
        with pytest.raises(InvalidParameterError, match="unsupported hash"):
            verify_pkcs1v15(rsa_1024.public_key, b"m", b"\x00" * 128, hashes.BLAKE2b(64))
