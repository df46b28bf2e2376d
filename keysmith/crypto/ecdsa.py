"""
ECDSA over the NIST prime curves.

Keys are cryptography objects. Signing draws its nonce from the caller's
random source through python-ecdsa; verification uses cryptography.

Verification returns a boolean and never raises, unlike the RSA verifiers.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)
from ecdsa import SigningKey

from keysmith.common.exceptions import (
    EncodingError,
    InvalidParameterError,
    KeysmithError,
)
from keysmith.common.utils import to_bytes
from . import pem
from .curves import (
    Curve,
    P256,
    P384,
    P521,
    curve_name,
    generate_private_key,
    get_curve,
    is_valid_curve,
)
from .entropy import RandomSource, randfunc
from .hashing import HashConstructor, digest, resolve_hash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ECDSAKeyPair:
    """
    ECDSA key pair.

    Attributes:
        private_key: EC private key (KEEP SECRET)
        public_key: Matching public key
        curve: Curve shared by both halves
    """

    private_key: Optional[ec.EllipticCurvePrivateKey]
    public_key: Optional[ec.EllipticCurvePublicKey]
    curve: Curve

    def private_key_to_pem(self) -> bytes:
        return ec_private_key_to_pem(self.private_key)

    def public_key_to_pem(self) -> bytes:
        return ec_public_key_to_pem(self.public_key)


# =============================================================================
# Key Generation
# =============================================================================


def generate_ecdsa_key(curve, random_source: Optional[RandomSource] = None) -> ECDSAKeyPair:
    """
    Generate an ECDSA key pair.

    Args:
        curve: Curve, curve name ("P-256") or cryptography curve
        random_source: Entropy for the private scalar

    Raises:
        InvalidParameterError: If the curve is None or unsupported
        RandomnessError: If the random source fails
    """
    curve = get_curve(curve)
    private_key = generate_private_key(curve, random_source)
    logger.debug("Generated ECDSA %s key pair", curve.name)
    return ECDSAKeyPair(private_key=private_key, public_key=private_key.public_key(), curve=curve)


def generate_ecdsa_p256_key(random_source: Optional[RandomSource] = None) -> ECDSAKeyPair:
    """Generate a P-256 (secp256r1) ECDSA key pair."""
    return generate_ecdsa_key(P256, random_source)


def generate_ecdsa_p384_key(random_source: Optional[RandomSource] = None) -> ECDSAKeyPair:
    """Generate a P-384 (secp384r1) ECDSA key pair."""
    return generate_ecdsa_key(P384, random_source)


def generate_ecdsa_p521_key(random_source: Optional[RandomSource] = None) -> ECDSAKeyPair:
    """Generate a P-521 (secp521r1) ECDSA key pair."""
    return generate_ecdsa_key(P521, random_source)


# =============================================================================
# Signing
# =============================================================================


def _sigencode_pair(r: int, s: int, order: int) -> Tuple[int, int]:
    return r, s


def ecdsa_sign(
    private_key: ec.EllipticCurvePrivateKey,
    message: bytes,
    hash_constructor: HashConstructor,
    random_source: Optional[RandomSource] = None,
) -> Tuple[int, int]:
    """
    Sign a message with ECDSA.

    The message is hashed with hash_constructor; a digest longer than the
    group order is truncated to its leftmost bits. The nonce k is drawn
    uniformly from the random source.

    Args:
        private_key: Signer's EC private key
        message: Data to sign
        hash_constructor: e.g. hashes.SHA256
        random_source: Entropy for the nonce

    Returns:
        Tuple (r, s)

    Raises:
        InvalidParameterError: If the key or hash is None/unsupported
        RandomnessError: If the random source fails
    """
    if private_key is None:
        raise InvalidParameterError("private key cannot be None")
    if not isinstance(private_key, ec.EllipticCurvePrivateKey):
        raise InvalidParameterError(f"expected an EC private key, got {type(private_key).__name__}")
    algorithm = resolve_hash(hash_constructor)
    curve = get_curve(private_key.curve)
    message = to_bytes(message, "message")

    signing_key = SigningKey.from_secret_exponent(
        private_key.private_numbers().private_value,
        curve=curve.ecdsa_curve,
    )
    return signing_key.sign_digest(
        digest(message, algorithm),
        entropy=randfunc(random_source),
        sigencode=_sigencode_pair,
        allow_truncate=True,
    )


def ecdsa_sign_sha256(private_key, message: bytes, random_source: Optional[RandomSource] = None) -> Tuple[int, int]:
    """ECDSA signature over SHA-256(message)."""
    return ecdsa_sign(private_key, message, hashes.SHA256, random_source)


def ecdsa_sign_sha512(private_key, message: bytes, random_source: Optional[RandomSource] = None) -> Tuple[int, int]:
    """ECDSA signature over SHA-512(message)."""
    return ecdsa_sign(private_key, message, hashes.SHA512, random_source)


def ecdsa_verify(
    public_key: ec.EllipticCurvePublicKey,
    message: bytes,
    r: int,
    s: int,
    hash_constructor: HashConstructor,
) -> bool:
    """
    Verify an ECDSA signature.

    Returns:
        True if the signature is valid. False for a mismatch and for any
        unusable input (None key, components or hash; out-of-range r or s).
        Never raises.
    """
    if public_key is None or r is None or s is None or hash_constructor is None or message is None:
        return False
    if not isinstance(public_key, ec.EllipticCurvePublicKey):
        return False

    try:
        algorithm = resolve_hash(hash_constructor)
        message = to_bytes(message, "message")
        public_key.verify(encode_dss_signature(r, s), message, ec.ECDSA(algorithm))
        return True
    except InvalidSignature:
        return False
    except (KeysmithError, ValueError, TypeError, OverflowError):
        return False


def ecdsa_verify_sha256(public_key, message: bytes, r: int, s: int) -> bool:
    """Verify an ECDSA signature over SHA-256(message)."""
    return ecdsa_verify(public_key, message, r, s, hashes.SHA256)


def ecdsa_verify_sha512(public_key, message: bytes, r: int, s: int) -> bool:
    """Verify an ECDSA signature over SHA-512(message)."""
    return ecdsa_verify(public_key, message, r, s, hashes.SHA512)


# =============================================================================
# Signature Encoding
# =============================================================================


def signature_to_bytes(r: int, s: int) -> bytes:
    """
    DER-encode an ECDSA signature as Ecdsa-Sig-Value.

    Raises:
        InvalidParameterError: If r or s is None or negative
    """
    if r is None or s is None:
        raise InvalidParameterError("signature components cannot be None")
    try:
        return encode_dss_signature(r, s)
    except (ValueError, TypeError, OverflowError) as e:
        raise InvalidParameterError(f"invalid signature components: {e}") from e


def signature_from_bytes(data: bytes) -> Tuple[int, int]:
    """
    Decode a DER Ecdsa-Sig-Value.

    Returns:
        Tuple (r, s)

    Raises:
        EncodingError: If the data is empty or not a valid DER signature
    """
    if not data:
        raise EncodingError("signature data cannot be empty")
    try:
        return decode_dss_signature(bytes(data))
    except (ValueError, TypeError) as e:
        raise EncodingError(f"invalid DER signature: {e}") from e


# =============================================================================
# PEM Serialization (shared by ECDSA and ECDH keys)
# =============================================================================


def ec_private_key_to_pem(private_key: ec.EllipticCurvePrivateKey) -> bytes:
    """
    Serialize an EC private key to SEC1 "EC PRIVATE KEY" PEM.

    Raises:
        InvalidParameterError: If the key is None or not an EC key
    """
    if private_key is None:
        raise InvalidParameterError("private key cannot be None")
    if not isinstance(private_key, ec.EllipticCurvePrivateKey):
        raise InvalidParameterError(f"expected an EC private key, got {type(private_key).__name__}")
    return pem.private_key_to_pem(private_key)


def ec_public_key_to_pem(public_key: ec.EllipticCurvePublicKey) -> bytes:
    """
    Serialize an EC public key to PKIX "PUBLIC KEY" PEM.

    Raises:
        InvalidParameterError: If the key is None or not an EC key
    """
    if public_key is None:
        raise InvalidParameterError("public key cannot be None")
    if not isinstance(public_key, ec.EllipticCurvePublicKey):
        raise InvalidParameterError(f"expected an EC public key, got {type(public_key).__name__}")
    return pem.public_key_to_pem(public_key)


def ec_private_key_from_pem(pem_data) -> ec.EllipticCurvePrivateKey:
    """
    Load an EC private key from SEC1 or PKCS#8 PEM.

    Raises:
        EncodingError: On empty/non-PEM data, wrong block type, malformed
            payload, or a non-EC key
    """
    return pem.load_private_key(
        pem_data, (pem.EC_PRIVATE_KEY, pem.PRIVATE_KEY), ec.EllipticCurvePrivateKey, "EC"
    )


def ec_public_key_from_pem(pem_data) -> ec.EllipticCurvePublicKey:
    """
    Load an EC public key from PKIX PEM.

    Raises:
        EncodingError: On empty/non-PEM data, wrong block type, malformed
            payload, or a non-EC key
    """
    return pem.load_public_key(pem_data, (pem.PUBLIC_KEY,), ec.EllipticCurvePublicKey, "EC")
