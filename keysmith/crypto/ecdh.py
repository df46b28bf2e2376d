"""
Elliptic-curve Diffie-Hellman Key Exchange

Implements ECDH over the NIST prime curves and derives symmetric keys from
the shared secret.

The shared secret Z is the x-coordinate of d_A * Q_B, big-endian and padded
to the curve's field size. Derived keys are:

    K = Trunc_n(H(Z))                                    if |H| >= n
    K = Trunc_n(H(Z || 0) || H(Z || 1) || ...)           otherwise

with a 32-bit big-endian counter.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from keysmith.common.exceptions import (
    CurveMismatchError,
    InvalidParameterError,
    KeyMismatchError,
    PointNotOnCurveError,
)
from keysmith.common.protocol import PublicPoint
from keysmith.common.utils import constant_time_compare, int_to_bytes
from .curves import Curve, P256, P384, P521, get_curve, generate_private_key
from .ecdsa import ec_private_key_to_pem, ec_public_key_to_pem
from .entropy import RandomSource
from .hashing import HashConstructor, digest, resolve_hash

logger = logging.getLogger(__name__)

PublicKeyLike = Union[ec.EllipticCurvePublicKey, PublicPoint]


@dataclass(frozen=True)
class ECDHKeyPair:
    """
    ECDH key pair.

    The public half is normally a cryptography key, but a PublicPoint is
    accepted so that coordinates received from a peer can be carried around
    and checked before use.
    """

    private_key: Optional[ec.EllipticCurvePrivateKey]
    public_key: Optional[PublicKeyLike]
    curve: Curve

    def private_key_to_pem(self) -> bytes:
        return ec_private_key_to_pem(self.private_key)

    def public_key_to_pem(self) -> bytes:
        public_key = self.public_key
        if isinstance(public_key, PublicPoint):
            public_key = public_key_from_coordinates(public_key.curve, public_key.x, public_key.y)
        return ec_public_key_to_pem(public_key)


# =============================================================================
# Key Generation
# =============================================================================


def generate_ecdh_key(curve, random_source: Optional[RandomSource] = None) -> ECDHKeyPair:
    """
    Generate an ECDH key pair.

    Args:
        curve: Curve, curve name or cryptography curve
        random_source: Entropy for the private scalar

    Returns:
        ECDHKeyPair

    Raises:
        InvalidParameterError: If the curve is None or unsupported
        RandomnessError: If the random source fails
    """
    curve = get_curve(curve)
    private_key = generate_private_key(curve, random_source)
    logger.debug("Generated ECDH %s key pair", curve.name)
    return ECDHKeyPair(private_key=private_key, public_key=private_key.public_key(), curve=curve)


def generate_ecdh_p256_key(random_source: Optional[RandomSource] = None) -> ECDHKeyPair:
    """Generate a P-256 (secp256r1) ECDH key pair."""
    return generate_ecdh_key(P256, random_source)


def generate_ecdh_p384_key(random_source: Optional[RandomSource] = None) -> ECDHKeyPair:
    """Generate a P-384 (secp384r1) ECDH key pair."""
    return generate_ecdh_key(P384, random_source)


def generate_ecdh_p521_key(random_source: Optional[RandomSource] = None) -> ECDHKeyPair:
    """Generate a P-521 (secp521r1) ECDH key pair."""
    return generate_ecdh_key(P521, random_source)


# =============================================================================
# Coordinates
# =============================================================================


def public_key_to_coordinates(public_key: PublicKeyLike) -> Tuple[int, int]:
    """
    Affine (x, y) of a public key.

    Raises:
        InvalidParameterError: If the key is None or not an EC public key
    """
    point = _as_point(public_key)
    return point.x, point.y


def public_key_from_coordinates(curve, x: int, y: int) -> ec.EllipticCurvePublicKey:
    """
    Build a public key from affine coordinates.

    Args:
        curve: Curve the point belongs to
        x: Affine x coordinate
        y: Affine y coordinate

    Returns:
        cryptography EC public key

    Raises:
        InvalidParameterError: If the curve or a coordinate is None
        PointNotOnCurveError: If (x, y) is not a point of the curve
    """
    curve = get_curve(curve)
    if x is None or y is None:
        raise InvalidParameterError("point coordinates cannot be None")
    if not curve.is_on_curve(x, y):
        logger.warning("Rejected public point not on %s", curve.name)
        raise PointNotOnCurveError(f"point is not on curve {curve.name}")
    try:
        return ec.EllipticCurvePublicNumbers(x, y, curve.ec_curve()).public_key()
    except ValueError as e:
        raise PointNotOnCurveError(f"point is not on curve {curve.name}: {e}") from e


def _as_point(public_key: PublicKeyLike) -> PublicPoint:
    if public_key is None:
        raise InvalidParameterError("public key cannot be None")
    if isinstance(public_key, PublicPoint):
        return public_key
    if isinstance(public_key, ec.EllipticCurvePublicKey):
        numbers = public_key.public_numbers()
        return PublicPoint(curve=get_curve(public_key.curve).name, x=numbers.x, y=numbers.y)
    raise InvalidParameterError(f"expected an EC public key, got {type(public_key).__name__}")


def _private_curve(private_key: ec.EllipticCurvePrivateKey) -> Curve:
    if private_key is None:
        raise InvalidParameterError("private key cannot be None")
    if not isinstance(private_key, ec.EllipticCurvePrivateKey):
        raise InvalidParameterError(f"expected an EC private key, got {type(private_key).__name__}")
    return get_curve(private_key.curve)


# =============================================================================
# Shared Secret
# =============================================================================


def compute_shared(private_key: ec.EllipticCurvePrivateKey, public_key: PublicKeyLike) -> bytes:
    """
    Compute the raw ECDH shared secret.

    Args:
        private_key: Own private key
        public_key: Peer's public key or PublicPoint

    Returns:
        x-coordinate of the shared point, padded to the field size

    Raises:
        InvalidParameterError: If either key is None or of the wrong type
        CurveMismatchError: If the keys are on different curves
        PointNotOnCurveError: If the peer point is not on the curve
    """
    curve = _private_curve(private_key)
    point = _as_point(public_key)

    if point.curve != curve.name:
        logger.warning("ECDH curve mismatch: %s private key, %s public key", curve.name, point.curve)
        raise CurveMismatchError(f"curve mismatch: {curve.name} vs {point.curve}")

    if isinstance(public_key, ec.EllipticCurvePublicKey):
        peer = public_key
    else:
        peer = public_key_from_coordinates(curve, point.x, point.y)

    try:
        shared = private_key.exchange(ec.ECDH(), peer)
    except ValueError as e:
        raise PointNotOnCurveError(f"key exchange failed: {e}") from e

    logger.debug("Computed %s shared secret", curve.name)
    return shared


def _kdf(shared: bytes, output_length: int, algorithm: hashes.HashAlgorithm) -> bytes:
    first = digest(shared, algorithm)
    if len(first) >= output_length:
        return first[:output_length]

    output = b""
    counter = 0
    while len(output) < output_length:
        output += digest(shared + int_to_bytes(counter, 4), algorithm)
        counter += 1
    return output[:output_length]


def compute_shared_with_kdf(
    private_key: ec.EllipticCurvePrivateKey,
    public_key: PublicKeyLike,
    output_length: int,
    kdf: HashConstructor,
) -> bytes:
    """
    Compute an ECDH shared secret and derive a key of output_length bytes.

    Args:
        private_key: Own private key
        public_key: Peer's public key or PublicPoint
        output_length: Number of key bytes to derive (> 0)
        kdf: Hash constructor used by the KDF, e.g. hashes.SHA256

    Returns:
        output_length derived bytes

    Raises:
        InvalidParameterError: If output_length <= 0 or kdf is None (checked
            before the exchange), or the keys are invalid
        CurveMismatchError: If the keys are on different curves
        PointNotOnCurveError: If the peer point is not on the curve
    """
    if isinstance(output_length, bool) or not isinstance(output_length, int):
        raise InvalidParameterError(f"output length must be an integer, got {type(output_length).__name__}")
    if output_length <= 0:
        raise InvalidParameterError(f"output length must be positive, got {output_length}")
    if kdf is None:
        raise InvalidParameterError("KDF hash constructor cannot be None")
    algorithm = resolve_hash(kdf)

    shared = compute_shared(private_key, public_key)
    return _kdf(shared, output_length, algorithm)


def compute_shared_sha256(private_key, public_key: PublicKeyLike, output_length: int = 32) -> bytes:
    """ECDH shared secret run through the SHA-256 KDF."""
    return compute_shared_with_kdf(private_key, public_key, output_length, hashes.SHA256)


def key_exchange(private_key, peer_public_key: PublicKeyLike, output_length: int = 32) -> bytes:
    """
    Derive a symmetric key with a peer.

    Equivalent to compute_shared_sha256; 32 bytes suits AES-256.
    """
    return compute_shared_sha256(private_key, peer_public_key, output_length)


# =============================================================================
# Validation
# =============================================================================


def validate_key_pair(key_pair: ECDHKeyPair) -> None:
    """
    Check that a key pair is usable for ECDH.

    Raises:
        InvalidParameterError: If the pair or one of its halves is None
        CurveMismatchError: If the halves or the pair's curve disagree
        PointNotOnCurveError: If the public point is not on the curve
        KeyMismatchError: If the public key is not private_scalar * G
    """
    if key_pair is None:
        raise InvalidParameterError("key pair cannot be None")
    if key_pair.private_key is None:
        raise InvalidParameterError("key pair has no private key")
    if key_pair.public_key is None:
        raise InvalidParameterError("key pair has no public key")

    curve = _private_curve(key_pair.private_key)
    point = _as_point(key_pair.public_key)

    if key_pair.curve is not None and get_curve(key_pair.curve) != curve:
        raise CurveMismatchError(f"key pair curve {key_pair.curve} does not match private key curve {curve.name}")
    if point.curve != curve.name:
        raise CurveMismatchError(f"public key curve {point.curve} does not match private key curve {curve.name}")
    if not curve.is_on_curve(point.x, point.y):
        raise PointNotOnCurveError(f"public key is not on curve {curve.name}")

    expected = key_pair.private_key.public_key().public_numbers()
    if (expected.x, expected.y) != (point.x, point.y):
        raise KeyMismatchError("public key does not correspond to private key")


def shared_secret_test(key_pair_a: ECDHKeyPair, key_pair_b: ECDHKeyPair) -> bool:
    """
    Check that two parties arrive at the same shared secret.

    Returns:
        True if both directions agree; False otherwise

    Raises:
        InvalidParameterError, CurveMismatchError, PointNotOnCurveError:
            Propagated from either side's computation
    """
    if key_pair_a is None or key_pair_b is None:
        raise InvalidParameterError("key pairs cannot be None")

    secret_a = compute_shared(key_pair_a.private_key, key_pair_b.public_key)
    secret_b = compute_shared(key_pair_b.private_key, key_pair_a.public_key)

    if len(secret_a) != len(secret_b):
        return False
    return constant_time_compare(secret_a, secret_b)


# Test function for development
if __name__ == "__main__":
    print("[*] Testing ECDH Key Exchange")

    alice = generate_ecdh_p256_key()
    bob = generate_ecdh_p256_key()
    print(f"\n[1] Alice public: {public_key_to_coordinates(alice.public_key)}")
    print(f"[2] Bob public:   {public_key_to_coordinates(bob.public_key)}")

    alice_key = key_exchange(alice.private_key, bob.public_key)
    bob_key = key_exchange(bob.private_key, alice.public_key)
    print(f"\n[3] Alice's key: {alice_key.hex()}")
    print(f"    Bob's key:   {bob_key.hex()}")
    print(f"    Match: {shared_secret_test(alice, bob)}")

    try:
        compute_shared(alice.private_key, PublicPoint(curve="P-256", x=1, y=1))
    except PointNotOnCurveError as e:
        print(f"\n[4] Invalid point rejected: {e}")

    print("\n[✓] ECDH key exchange test passed!")
