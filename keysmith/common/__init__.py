"""
Common utilities, settings and transport models for keysmith.
"""

from .exceptions import *
from .protocol import PublicPoint, KeyInfo
from .utils import to_bytes, int_to_bytes, sha256_hex, constant_time_compare

__all__ = [
    'KeysmithError',
    'InvalidParameterError',
    'WeakParameterError',
    'RandomnessError',
    'EncodingError',
    'CurveMismatchError',
    'PointNotOnCurveError',
    'KeyMismatchError',
    'InvalidCiphertextError',
    'InvalidSignatureError',
    'PublicPoint',
    'KeyInfo',
    'to_bytes',
    'sha256_hex',
    'int_to_bytes',
    'constant_time_compare',
]
