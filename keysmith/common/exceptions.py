"""
Exception taxonomy for keysmith.
"""


class KeysmithError(Exception):
    """Base exception for keysmith errors."""
    pass


class InvalidParameterError(KeysmithError):
    """A required argument is missing, of the wrong type, or out of range."""
    pass


class WeakParameterError(KeysmithError):
    """A key size or parameter is below the security policy floor."""
    pass


class RandomnessError(KeysmithError):
    """The random source failed or returned fewer bytes than requested."""
    pass


class EncodingError(KeysmithError):
    """PEM or DER data is malformed, of the wrong type, or the wrong key family."""
    pass


class CurveMismatchError(KeysmithError):
    """Keys that must share a curve do not."""
    pass


class PointNotOnCurveError(KeysmithError):
    """A public point does not satisfy its curve equation."""
    pass


class KeyMismatchError(KeysmithError):
    """A public key is not derived from the paired private key."""
    pass


class InvalidCiphertextError(KeysmithError):
    """Decryption failed."""
    pass


class InvalidSignatureError(KeysmithError):
    """Signature verification failed."""
    pass
