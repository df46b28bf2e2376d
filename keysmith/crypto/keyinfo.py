"""
Key inspection: fingerprints and structured descriptions.
"""

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from keysmith.common.exceptions import InvalidParameterError
from keysmith.common.protocol import KeyInfo
from keysmith.common.utils import sha256_hex
from .curves import curve_name

_PRIVATE_TYPES = (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)
_PUBLIC_TYPES = (rsa.RSAPublicKey, ec.EllipticCurvePublicKey)


def _public_half(key):
    if key is None:
        raise InvalidParameterError("key cannot be None")
    if isinstance(key, _PRIVATE_TYPES):
        return key.public_key()
    if isinstance(key, _PUBLIC_TYPES):
        return key
    raise InvalidParameterError(f"unsupported key type: {type(key).__name__}")


def key_fingerprint(key) -> str:
    """
    Compute SHA-256 fingerprint of a key.

    The fingerprint covers the DER SubjectPublicKeyInfo, so a private key and
    its public key share the same fingerprint.

    Args:
        key: RSA or EC key, private or public

    Returns:
        Hex-encoded SHA-256 fingerprint

    Raises:
        InvalidParameterError: If the key is None or unsupported
    """
    spki = _public_half(key).public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return sha256_hex(spki)


def describe_key(key) -> KeyInfo:
    """
    Describe an RSA or EC key.

    Returns:
        KeyInfo with family, kind, size, curve (EC only) and fingerprint

    Raises:
        InvalidParameterError: If the key is None or unsupported
    """
    public_key = _public_half(key)
    kind = "private" if isinstance(key, _PRIVATE_TYPES) else "public"

    if isinstance(public_key, rsa.RSAPublicKey):
        return KeyInfo(
            family="RSA",
            kind=kind,
            key_size=public_key.key_size,
            fingerprint=key_fingerprint(public_key),
        )

    return KeyInfo(
        family="EC",
        kind=kind,
        key_size=public_key.curve.key_size,
        curve=curve_name(public_key.curve),
        fingerprint=key_fingerprint(public_key),
    )
