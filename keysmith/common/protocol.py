"""
Transport models using Pydantic.

Public points and key descriptions serialize to JSON so they can be
exchanged between peers or printed by the scripts.
"""

from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator


class PublicPoint(BaseModel):
    """
    Affine coordinates of an elliptic-curve public key.

    The curve name is canonicalised but curve membership is NOT checked here;
    ECDH operations reject off-curve points.
    """
    model_config = ConfigDict(frozen=True)

    curve: str = Field(..., description="Curve name, e.g. P-256")
    x: int = Field(..., ge=0, description="Affine x coordinate")
    y: int = Field(..., ge=0, description="Affine y coordinate")

    @field_validator("curve")
    @classmethod
    def canonical_curve(cls, v: str) -> str:
        from keysmith.crypto.curves import get_curve
        from keysmith.common.exceptions import InvalidParameterError

        try:
            return get_curve(v).name
        except InvalidParameterError as e:
            raise ValueError(str(e)) from e


class KeyInfo(BaseModel):
    """Description of an RSA or EC key."""
    family: Literal["RSA", "EC"]
    kind: Literal["private", "public"]
    key_size: int = Field(..., description="Modulus or field size in bits")
    curve: Optional[str] = None
    fingerprint: str = Field(..., description="Hex SHA-256 of the DER SubjectPublicKeyInfo")


def serialize_message(msg: BaseModel) -> str:
    """Serialize Pydantic model to JSON string."""
    return msg.model_dump_json()
