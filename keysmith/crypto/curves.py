"""
NIST prime curves supported by keysmith.

Each Curve ties together the pyca/cryptography curve (key objects, PEM,
verification, ECDH) and the python-ecdsa curve (group order, curve equation,
randomized signing).
"""

import logging
from dataclasses import dataclass
from typing import Optional, Type

from cryptography.hazmat.primitives.asymmetric import ec
from ecdsa import NIST224p, NIST256p, NIST384p, NIST521p
from ecdsa.curves import Curve as EcdsaCurve
from ecdsa.util import randrange

from keysmith.common.exceptions import InvalidParameterError
from .entropy import RandomSource, randfunc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Curve:
    """
    A named short-Weierstrass curve over a prime field.

    Attributes:
        name: Canonical name, e.g. "P-256"
        ec_curve: cryptography curve class, e.g. ec.SECP256R1
        ecdsa_curve: python-ecdsa curve, e.g. NIST256p
    """

    name: str
    ec_curve: Type[ec.EllipticCurve]
    ecdsa_curve: EcdsaCurve

    @property
    def order(self) -> int:
        """Order of the base point."""
        return self.ecdsa_curve.order

    @property
    def field_size(self) -> int:
        """Field size in bits."""
        return self.ec_curve.key_size

    @property
    def byte_length(self) -> int:
        """Length in bytes of one encoded field element."""
        return (self.field_size + 7) // 8

    def is_on_curve(self, x: int, y: int) -> bool:
        """
        Check that (x, y) is a point of this curve.

        Both coordinates must be reduced field elements and satisfy
        y^2 = x^3 + ax + b (mod p).
        """
        fp = self.ecdsa_curve.curve
        p = fp.p()
        if x is None or y is None:
            return False
        if not (0 <= x < p and 0 <= y < p):
            return False
        return (y * y - (x * x * x + fp.a() * x + fp.b())) % p == 0

    def __str__(self) -> str:
        return self.name


P224 = Curve("P-224", ec.SECP224R1, NIST224p)
P256 = Curve("P-256", ec.SECP256R1, NIST256p)
P384 = Curve("P-384", ec.SECP384R1, NIST384p)
P521 = Curve("P-521", ec.SECP521R1, NIST521p)

SUPPORTED_CURVES = (P224, P256, P384, P521)

_ALIASES = {
    "p224": P224, "secp224r1": P224,
    "p256": P256, "secp256r1": P256, "prime256v1": P256,
    "p384": P384, "secp384r1": P384,
    "p521": P521, "secp521r1": P521,
}


def _lookup(curve) -> Optional[Curve]:
    if isinstance(curve, Curve):
        return curve
    if isinstance(curve, str):
        return _ALIASES.get(curve.strip().lower().replace("-", "").replace("_", ""))
    if isinstance(curve, ec.EllipticCurve) or (
        isinstance(curve, type) and issubclass(curve, ec.EllipticCurve)
    ):
        return _ALIASES.get(curve.name)
    return None


def get_curve(curve) -> Curve:
    """
    Resolve a curve given by name, Curve, or cryptography curve.

    Args:
        curve: "P-256", "secp384r1", P521, ec.SECP256R1(), ...

    Returns:
        Matching Curve

    Raises:
        InvalidParameterError: If curve is None or not supported
    """
    if curve is None:
        raise InvalidParameterError("curve cannot be None")
    found = _lookup(curve)
    if found is None:
        raise InvalidParameterError(f"unsupported curve: {getattr(curve, 'name', curve)}")
    return found


def curve_name(curve) -> str:
    """Canonical curve name, or "Unknown"."""
    found = _lookup(curve) if curve is not None else None
    return found.name if found else "Unknown"


def is_valid_curve(curve) -> bool:
    """True if the curve is one of the supported NIST curves."""
    return curve is not None and _lookup(curve) is not None


def generate_private_key(
    curve: Curve,
    random_source: Optional[RandomSource] = None,
) -> ec.EllipticCurvePrivateKey:
    """
    Generate an EC private key whose scalar is drawn from random_source.

    The scalar is sampled uniformly from [1, n-1] by rejection.

    Raises:
        RandomnessError: If the source fails
    """
    scalar = randrange(curve.order, entropy=randfunc(random_source))
    logger.debug("Generated %s private scalar", curve.name)
    return ec.derive_private_key(scalar, curve.ec_curve())
