"""
RSA key generation, encryption and signatures.

- Key generation: primes drawn from the caller's random source
- Encryption: RSA-OAEP (SHA-256, MGF1-SHA-256) and PKCS#1 v1.5
- Signatures: RSA-PSS (salt length = digest length) and PKCS#1 v1.5

Randomized operations (generation, encryption, PSS signing) run on
pycryptodome, which accepts an injected randfunc. Key objects, decryption,
deterministic signing and verification use cryptography.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from Crypto.Cipher import PKCS1_OAEP, PKCS1_v1_5
from Crypto.Hash import SHA256
from Crypto.PublicKey import RSA
from Crypto.Random import get_random_bytes
from Crypto.Signature import pss

from keysmith.common.config import MIN_RSA_KEY_BITS
from keysmith.common.exceptions import (
    InvalidCiphertextError,
    InvalidParameterError,
    InvalidSignatureError,
    RandomnessError,
    WeakParameterError,
)
from keysmith.common.utils import to_bytes
from . import pem
from .entropy import RandomSource, randfunc
from .hashing import HashConstructor, pycryptodome_hash, resolve_hash

logger = logging.getLogger(__name__)

PUBLIC_EXPONENT = 65537

OAEP = "OAEP"
PKCS1V15 = "PKCS1v15"

# OAEP always uses SHA-256 for both the label hash and MGF1
_OAEP_HASH_LEN = 32
_PKCS1V15_OVERHEAD = 11

_DECRYPTION_FAILED = "RSA decryption failed"


@dataclass(frozen=True)
class RSAKeyPair:
    """
    RSA key pair.

    Attributes:
        private_key: RSA private key (KEEP SECRET)
        public_key: Matching public key
    """

    private_key: Optional[rsa.RSAPrivateKey]
    public_key: Optional[rsa.RSAPublicKey]

    def private_key_to_pem(self) -> bytes:
        """PKCS#8 PEM of the private key."""
        return rsa_private_key_to_pem(self.private_key)

    def public_key_to_pem(self) -> bytes:
        """SubjectPublicKeyInfo PEM of the public key."""
        return rsa_public_key_to_pem(self.public_key)


# =============================================================================
# Key Generation
# =============================================================================


def generate_rsa_key_pair(bits: int, random_source: Optional[RandomSource] = None) -> RSAKeyPair:
    """
    Generate an RSA key pair with public exponent 65537.

    Args:
        bits: Modulus size; 2048, 3072 or 4096 recommended
        random_source: Entropy for prime generation (system CSPRNG if None)

    Returns:
        RSAKeyPair

    Raises:
        InvalidParameterError: If bits is not an integer
        WeakParameterError: If bits < 1024
        RandomnessError: If the random source fails
    """
    if isinstance(bits, bool) or not isinstance(bits, int):
        raise InvalidParameterError(f"RSA key size must be an integer, got {type(bits).__name__}")
    if bits < MIN_RSA_KEY_BITS:
        logger.warning("Rejected RSA key size %d", bits)
        raise WeakParameterError(f"RSA key size must be at least {MIN_RSA_KEY_BITS} bits, got {bits}")

    try:
        generated = RSA.generate(bits, randfunc=randfunc(random_source), e=PUBLIC_EXPONENT)
    except RandomnessError:
        logger.warning("RSA-%d key generation failed: random source error", bits)
        raise

    private_key = _to_cryptography_private_key(generated)
    logger.debug("Generated RSA-%d key pair", bits)
    return RSAKeyPair(private_key=private_key, public_key=private_key.public_key())


def _to_cryptography_private_key(key: RSA.RsaKey) -> rsa.RSAPrivateKey:
    p, q, d = key.p, key.q, key.d
    numbers = rsa.RSAPrivateNumbers(
        p=p,
        q=q,
        d=d,
        dmp1=rsa.rsa_crt_dmp1(d, p),
        dmq1=rsa.rsa_crt_dmq1(d, q),
        iqmp=rsa.rsa_crt_iqmp(p, q),
        public_numbers=rsa.RSAPublicNumbers(key.e, key.n),
    )
    return numbers.private_key()


def _to_pycryptodome_public(public_key: rsa.RSAPublicKey) -> RSA.RsaKey:
    numbers = public_key.public_numbers()
    return RSA.construct((numbers.n, numbers.e))


def _to_pycryptodome_private(private_key: rsa.RSAPrivateKey) -> RSA.RsaKey:
    numbers = private_key.private_numbers()
    return RSA.construct(
        (numbers.public_numbers.n, numbers.public_numbers.e, numbers.d, numbers.p, numbers.q),
        consistency_check=False,
    )


def rsa_key_size(key) -> int:
    """Modulus size in bits of an RSA private or public key; 0 for None."""
    if key is None:
        return 0
    return key.key_size


# =============================================================================
# PEM Serialization
# =============================================================================


def rsa_private_key_to_pem(private_key: rsa.RSAPrivateKey) -> bytes:
    """
    Serialize an RSA private key to PKCS#8 PEM.

    Raises:
        InvalidParameterError: If the key is None or not an RSA key
    """
    _require_private(private_key)
    return pem.private_key_to_pem(private_key)


def rsa_public_key_to_pem(public_key: rsa.RSAPublicKey) -> bytes:
    """
    Serialize an RSA public key to SubjectPublicKeyInfo PEM.

    Raises:
        InvalidParameterError: If the key is None or not an RSA key
    """
    _require_public(public_key)
    return pem.public_key_to_pem(public_key)


def rsa_private_key_from_pem(pem_data) -> rsa.RSAPrivateKey:
    """
    Load an RSA private key from PKCS#8 or PKCS#1 PEM.

    Raises:
        EncodingError: If the data is empty, not PEM, of the wrong block type,
            malformed, or holds a non-RSA key
    """
    return pem.load_private_key(
        pem_data, (pem.PRIVATE_KEY, pem.RSA_PRIVATE_KEY), rsa.RSAPrivateKey, "RSA"
    )


def rsa_public_key_from_pem(pem_data) -> rsa.RSAPublicKey:
    """
    Load an RSA public key from PKIX or PKCS#1 PEM.

    Raises:
        EncodingError: If the data is empty, not PEM, of the wrong block type,
            malformed, or holds a non-RSA key
    """
    return pem.load_public_key(
        pem_data, (pem.PUBLIC_KEY, pem.RSA_PUBLIC_KEY), rsa.RSAPublicKey, "RSA"
    )


# =============================================================================
# Encryption
# =============================================================================


def max_message_length(public_key: rsa.RSAPublicKey, scheme: str) -> int:
    """
    Largest plaintext that can be encrypted under a padding scheme.

    OAEP (SHA-256): k - 2*32 - 2.  PKCS#1 v1.5: k - 11.
    k is the modulus length in bytes.

    Args:
        public_key: RSA public key
        scheme: "OAEP" or "PKCS1v15" (case-insensitive)

    Raises:
        InvalidParameterError: If the key is None or the scheme is unknown
    """
    _require_public(public_key)
    if not isinstance(scheme, str):
        raise InvalidParameterError(f"unsupported padding: {scheme!r}")

    key_bytes = (public_key.key_size + 7) // 8
    normalized = scheme.strip().lower()
    if normalized == OAEP.lower():
        return key_bytes - 2 * _OAEP_HASH_LEN - 2
    if normalized == PKCS1V15.lower():
        return key_bytes - _PKCS1V15_OVERHEAD
    raise InvalidParameterError(f"unsupported padding: {scheme}")


def _check_length(public_key: rsa.RSAPublicKey, message: bytes, scheme: str) -> None:
    limit = max_message_length(public_key, scheme)
    if len(message) > limit:
        raise InvalidParameterError(
            f"message too long for RSA {scheme}: {len(message)} bytes, maximum is {limit}"
        )


def encrypt_oaep(
    public_key: rsa.RSAPublicKey,
    message: bytes,
    random_source: Optional[RandomSource] = None,
) -> bytes:
    """
    Encrypt with RSA-OAEP (SHA-256, MGF1-SHA-256, empty label).

    Args:
        public_key: Recipient's RSA public key
        message: Plaintext, at most max_message_length(public_key, "OAEP") bytes
        random_source: Entropy for the OAEP seed

    Returns:
        Ciphertext, same length as the modulus

    Raises:
        InvalidParameterError: If the key is None or the message is too long
        RandomnessError: If the random source fails
    """
    _require_public(public_key)
    message = to_bytes(message, "message")
    _check_length(public_key, message, OAEP)

    cipher = PKCS1_OAEP.new(
        _to_pycryptodome_public(public_key),
        hashAlgo=SHA256,
        randfunc=randfunc(random_source),
    )
    return cipher.encrypt(message)


def decrypt_oaep(private_key: rsa.RSAPrivateKey, ciphertext: bytes) -> bytes:
    """
    Decrypt RSA-OAEP ciphertext.

    Raises:
        InvalidParameterError: If the key is None
        InvalidCiphertextError: On any decryption failure, with one uniform
            message
    """
    _require_private(private_key)
    ciphertext = to_bytes(ciphertext, "ciphertext")

    try:
        return private_key.decrypt(
            ciphertext,
            padding.OAEP(
                mgf=padding.MGF1(algorithm=hashes.SHA256()),
                algorithm=hashes.SHA256(),
                label=None,
            ),
        )
    except ValueError:
        pass
    raise InvalidCiphertextError(_DECRYPTION_FAILED)


def encrypt_pkcs1v15(
    public_key: rsa.RSAPublicKey,
    message: bytes,
    random_source: Optional[RandomSource] = None,
) -> bytes:
    """
    Encrypt with RSA PKCS#1 v1.5 padding.

    Args:
        public_key: Recipient's RSA public key
        message: Plaintext, at most max_message_length(public_key, "PKCS1v15") bytes
        random_source: Entropy for the non-zero padding string

    Raises:
        InvalidParameterError: If the key is None or the message is too long
        RandomnessError: If the random source fails
    """
    _require_public(public_key)
    message = to_bytes(message, "message")
    _check_length(public_key, message, PKCS1V15)

    cipher = PKCS1_v1_5.new(_to_pycryptodome_public(public_key), randfunc=randfunc(random_source))
    return cipher.encrypt(message)


def decrypt_pkcs1v15(private_key: rsa.RSAPrivateKey, ciphertext: bytes) -> bytes:
    """
    Decrypt RSA PKCS#1 v1.5 ciphertext.

    The padding check uses pycryptodome's sentinel decoder with a random
    sentinel of modulus length. A valid plaintext is at most k - 11 bytes, so
    a k-byte result marks a padding failure.

    Raises:
        InvalidParameterError: If the key is None
        InvalidCiphertextError: On any decryption failure
    """
    _require_private(private_key)
    ciphertext = to_bytes(ciphertext, "ciphertext")

    k = (private_key.key_size + 7) // 8
    sentinel = get_random_bytes(k)
    plaintext = sentinel
    if len(ciphertext) == k:
        cipher = PKCS1_v1_5.new(_to_pycryptodome_private(private_key))
        try:
            plaintext = cipher.decrypt(ciphertext, sentinel)
        except ValueError:
            plaintext = sentinel

    if len(plaintext) == k:
        raise InvalidCiphertextError(_DECRYPTION_FAILED)
    return plaintext


# =============================================================================
# Signatures
# =============================================================================


def sign_pss(
    private_key: rsa.RSAPrivateKey,
    message: bytes,
    hash_constructor: HashConstructor,
    random_source: Optional[RandomSource] = None,
) -> bytes:
    """
    Sign with RSA-PSS (MGF1 with the same hash, salt length = digest length).

    Args:
        private_key: Signer's RSA private key
        message: Data to sign (hashed here)
        hash_constructor: e.g. hashes.SHA256
        random_source: Entropy for the salt

    Returns:
        Signature, same length as the modulus

    Raises:
        InvalidParameterError: If the key or hash is None/unsupported, or the
            key is too small for the hash
        RandomnessError: If the random source fails
    """
    _require_private(private_key)
    algorithm = resolve_hash(hash_constructor)
    hash_module = pycryptodome_hash(algorithm)
    message = to_bytes(message, "message")

    signer = pss.new(_to_pycryptodome_private(private_key), rand_func=randfunc(random_source))
    try:
        return signer.sign(hash_module.new(message))
    except ValueError as e:
        raise InvalidParameterError(f"RSA PSS signing failed: {e}") from e


def verify_pss(
    public_key: rsa.RSAPublicKey,
    message: bytes,
    signature: bytes,
    hash_constructor: HashConstructor,
) -> None:
    """
    Verify an RSA-PSS signature (any salt length).

    Raises:
        InvalidParameterError: If the key or hash is None or unsupported
        InvalidSignatureError: If the signature does not match
    """
    _require_public(public_key)
    algorithm = resolve_hash(hash_constructor)
    message = to_bytes(message, "message")
    signature = to_bytes(signature, "signature")

    try:
        public_key.verify(
            signature,
            message,
            padding.PSS(mgf=padding.MGF1(algorithm), salt_length=padding.PSS.AUTO),
            algorithm,
        )
    except UnsupportedAlgorithm as e:
        raise InvalidParameterError(f"unsupported hash for RSA PSS: {algorithm.name}") from e
    except InvalidSignature:
        raise InvalidSignatureError("RSA PSS signature verification failed") from None


def sign_pkcs1v15(
    private_key: rsa.RSAPrivateKey,
    message: bytes,
    hash_constructor: HashConstructor,
) -> bytes:
    """
    Sign with RSA PKCS#1 v1.5. Deterministic: consumes no randomness.

    Raises:
        InvalidParameterError: If the key or hash is None or unsupported
    """
    _require_private(private_key)
    algorithm = resolve_hash(hash_constructor)
    message = to_bytes(message, "message")

    try:
        return private_key.sign(message, padding.PKCS1v15(), algorithm)
    except UnsupportedAlgorithm as e:
        raise InvalidParameterError(f"unsupported hash for RSA PKCS1v15: {algorithm.name}") from e
    except ValueError as e:
        raise InvalidParameterError(f"RSA PKCS1v15 signing failed: {e}") from e


def verify_pkcs1v15(
    public_key: rsa.RSAPublicKey,
    message: bytes,
    signature: bytes,
    hash_constructor: HashConstructor,
) -> None:
    """
    Verify an RSA PKCS#1 v1.5 signature.

    Raises:
        InvalidParameterError: If the key or hash is None or unsupported
        InvalidSignatureError: If the signature does not match
    """
    _require_public(public_key)
    algorithm = resolve_hash(hash_constructor)
    message = to_bytes(message, "message")
    signature = to_bytes(signature, "signature")

    try:
        public_key.verify(signature, message, padding.PKCS1v15(), algorithm)
    except UnsupportedAlgorithm as e:
        raise InvalidParameterError(f"unsupported hash for RSA PKCS1v15: {algorithm.name}") from e
    except InvalidSignature:
        raise InvalidSignatureError("RSA PKCS1v15 signature verification failed") from None


# =============================================================================
# Validation helpers
# =============================================================================


def _require_private(private_key) -> None:
    if private_key is None:
        raise InvalidParameterError("private key cannot be None")
    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise InvalidParameterError(f"expected an RSA private key, got {type(private_key).__name__}")


def _require_public(public_key) -> None:
    if public_key is None:
        raise InvalidParameterError("public key cannot be None")
    if not isinstance(public_key, rsa.RSAPublicKey):
        raise InvalidParameterError(f"expected an RSA public key, got {type(public_key).__name__}")


# Test function for development
if __name__ == "__main__":
    print("[*] Testing RSA round trip")

    pair = generate_rsa_key_pair(2048)
    ciphertext = encrypt_oaep(pair.public_key, b"test message")
    print(f"    OAEP ciphertext: {len(ciphertext)} bytes")
    assert decrypt_oaep(pair.private_key, ciphertext) == b"test message"

    signature = sign_pss(pair.private_key, b"test message", hashes.SHA256)
    verify_pss(pair.public_key, b"test message", signature, hashes.SHA256)

    print("\n[✓] RSA round trip passed!")
