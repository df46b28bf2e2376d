"""
PEM serialization for RSA and EC keys.

Encoding emits:
- RSA private keys: PKCS#8 "PRIVATE KEY"
- EC private keys: SEC1 "EC PRIVATE KEY"
- Public keys: SubjectPublicKeyInfo "PUBLIC KEY"

Decoding checks the label of the first BEGIN line against the types the
caller accepts, then hands the PEM to cryptography.
"""

import logging
from typing import Iterable, Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from keysmith.common.exceptions import EncodingError, InvalidParameterError

logger = logging.getLogger(__name__)

PRIVATE_KEY = "PRIVATE KEY"
RSA_PRIVATE_KEY = "RSA PRIVATE KEY"
EC_PRIVATE_KEY = "EC PRIVATE KEY"
PUBLIC_KEY = "PUBLIC KEY"
RSA_PUBLIC_KEY = "RSA PUBLIC KEY"

PRIVATE_KEY_TYPES = (PRIVATE_KEY, RSA_PRIVATE_KEY, EC_PRIVATE_KEY)
PUBLIC_KEY_TYPES = (PUBLIC_KEY, RSA_PUBLIC_KEY)

_BEGIN = b"-----BEGIN "
_DASHES = b"-----"

PemData = Union[bytes, bytearray, str]


def _as_bytes(data: PemData) -> bytes:
    if data is None:
        raise EncodingError("PEM data cannot be None")
    if isinstance(data, str):
        data = data.encode('utf-8')
    if not isinstance(data, (bytes, bytearray)):
        raise EncodingError(f"PEM data must be bytes or str, got {type(data).__name__}")
    if len(data) == 0:
        raise EncodingError("PEM data cannot be empty")
    return bytes(data)


def block_type(data: PemData) -> str:
    """
    Label of the first PEM block, e.g. "PUBLIC KEY".

    Raises:
        EncodingError: If data is None, empty, or has no BEGIN line
    """
    data = _as_bytes(data)
    start = data.find(_BEGIN)
    end = data.find(_DASHES, start + len(_BEGIN)) if start >= 0 else -1
    if end < 0:
        raise EncodingError("failed to decode PEM block")
    return data[start + len(_BEGIN):end].decode('ascii', errors='replace')


def _check_type(data: PemData, allowed_types: Optional[Iterable[str]]) -> str:
    found = block_type(data)
    if allowed_types is not None:
        allowed = tuple(allowed_types)
        if found not in allowed:
            logger.warning("Rejected PEM block of type %r", found)
            raise EncodingError(
                f"invalid PEM block type: expected {' or '.join(repr(t) for t in allowed)}, got {found!r}"
            )
    return found


# =============================================================================
# Key serialization
# =============================================================================


def private_key_to_pem(private_key) -> bytes:
    """
    Serialize an RSA or EC private key to unencrypted PEM.

    Raises:
        InvalidParameterError: If the key is None or not RSA/EC
    """
    if private_key is None:
        raise InvalidParameterError("private key cannot be None")

    if isinstance(private_key, rsa.RSAPrivateKey):
        private_format = serialization.PrivateFormat.PKCS8
    elif isinstance(private_key, ec.EllipticCurvePrivateKey):
        private_format = serialization.PrivateFormat.TraditionalOpenSSL
    else:
        raise InvalidParameterError(f"unsupported private key type: {type(private_key).__name__}")

    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=private_format,
        encryption_algorithm=serialization.NoEncryption(),
    )


def public_key_to_pem(public_key) -> bytes:
    """
    Serialize an RSA or EC public key to SubjectPublicKeyInfo PEM.

    Raises:
        InvalidParameterError: If the key is None or not RSA/EC
    """
    if public_key is None:
        raise InvalidParameterError("public key cannot be None")
    if not isinstance(public_key, (rsa.RSAPublicKey, ec.EllipticCurvePublicKey)):
        raise InvalidParameterError(f"unsupported public key type: {type(public_key).__name__}")

    return public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def load_private_key(data: PemData, allowed_types: Iterable[str], key_class, family: str):
    """
    Load a private key of a given family from PEM.

    Args:
        data: PEM text
        allowed_types: Accepted block types
        key_class: Expected cryptography private key class (or tuple)
        family: Family name for error messages ("RSA", "EC")

    Raises:
        EncodingError: On any decoding problem or a key of another family
    """
    found = _check_type(data, allowed_types)
    try:
        key = serialization.load_pem_private_key(_as_bytes(data), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise EncodingError(f"failed to parse {found}: {e}") from e

    if not isinstance(key, key_class):
        raise EncodingError(f"key is not an {family} private key")
    return key


def load_public_key(data: PemData, allowed_types: Iterable[str], key_class, family: str):
    """
    Load a public key of a given family from PEM.

    Raises:
        EncodingError: On any decoding problem or a key of another family
    """
    found = _check_type(data, allowed_types)
    try:
        key = serialization.load_pem_public_key(_as_bytes(data))
    except (ValueError, UnsupportedAlgorithm) as e:
        raise EncodingError(f"failed to parse {found}: {e}") from e

    if not isinstance(key, key_class):
        raise EncodingError(f"key is not an {family} public key")
    return key


def load_any_key(data: PemData):
    """
    Load whichever RSA or EC key the first PEM block holds.

    Returns:
        A cryptography private or public key

    Raises:
        EncodingError: If the block is not a supported key
    """
    found = block_type(data)
    if found in PRIVATE_KEY_TYPES:
        return load_private_key(
            data, PRIVATE_KEY_TYPES, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey), "RSA or EC"
        )
    if found in PUBLIC_KEY_TYPES:
        return load_public_key(
            data, PUBLIC_KEY_TYPES, (rsa.RSAPublicKey, ec.EllipticCurvePublicKey), "RSA or EC"
        )
    raise EncodingError(f"PEM block {found!r} does not hold a key")
