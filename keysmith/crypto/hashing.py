"""
Hash constructor handling.

Callers pass a hash constructor: a ``cryptography`` HashAlgorithm class such
as ``hashes.SHA256`` (an instance is accepted too). Randomized RSA signing runs
on pycryptodome, so the algorithm is also mapped to its pycryptodome module.
"""

from typing import Callable, Union

from cryptography.hazmat.primitives import hashes
from Crypto.Hash import (
    MD5, SHA1, SHA224, SHA256, SHA384, SHA512,
    SHA3_224, SHA3_256, SHA3_384, SHA3_512,
)

from keysmith.common.exceptions import InvalidParameterError

HashConstructor = Union[Callable[[], hashes.HashAlgorithm], hashes.HashAlgorithm]

# cryptography algorithm name -> pycryptodome hash module
_PYCRYPTODOME_HASHES = {
    "md5": MD5,
    "sha1": SHA1,
    "sha224": SHA224,
    "sha256": SHA256,
    "sha384": SHA384,
    "sha512": SHA512,
    "sha3-224": SHA3_224,
    "sha3-256": SHA3_256,
    "sha3-384": SHA3_384,
    "sha3-512": SHA3_512,
}


def resolve_hash(hash_constructor: HashConstructor) -> hashes.HashAlgorithm:
    """
    Turn a hash constructor into a HashAlgorithm instance.

    Args:
        hash_constructor: HashAlgorithm class (e.g. hashes.SHA256) or instance

    Returns:
        HashAlgorithm instance

    Raises:
        InvalidParameterError: If the constructor is None, fails, or does not
            produce a fixed-length HashAlgorithm
    """
    if hash_constructor is None:
        raise InvalidParameterError("hash constructor cannot be None")

    if isinstance(hash_constructor, hashes.HashAlgorithm):
        algorithm = hash_constructor
    elif callable(hash_constructor):
        try:
            algorithm = hash_constructor()
        except TypeError as e:
            raise InvalidParameterError(f"hash constructor could not be called: {e}") from e
    else:
        raise InvalidParameterError(
            f"hash constructor must be a HashAlgorithm class, got {type(hash_constructor).__name__}"
        )

    if not isinstance(algorithm, hashes.HashAlgorithm):
        raise InvalidParameterError(
            f"hash constructor returned {type(algorithm).__name__}, not a HashAlgorithm"
        )
    if isinstance(algorithm, hashes.ExtendableOutputFunction):
        raise InvalidParameterError(f"extendable-output function {algorithm.name} is not supported")

    return algorithm


def digest(data: bytes, algorithm: hashes.HashAlgorithm) -> bytes:
    """Hash data with the given algorithm."""
    h = hashes.Hash(algorithm)
    h.update(data)
    return h.finalize()


def pycryptodome_hash(algorithm: hashes.HashAlgorithm):
    """
    Map a cryptography algorithm to the equivalent pycryptodome hash module.

    Raises:
        InvalidParameterError: If pycryptodome has no equivalent
    """
    try:
        return _PYCRYPTODOME_HASHES[algorithm.name]
    except KeyError:
        raise InvalidParameterError(f"hash algorithm {algorithm.name} is not supported for this operation") from None
