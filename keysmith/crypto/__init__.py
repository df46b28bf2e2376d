"""
Asymmetric primitives for keysmith.

This package provides:
- Injectable random sources
- PEM encoding/decoding of RSA and EC keys
- RSA key generation, OAEP/PKCS#1 v1.5 encryption, PSS/PKCS#1 v1.5 signatures
- ECDSA on P-256, P-384 and P-521
- ECDH shared secrets and key derivation
- Key fingerprints and descriptions
"""

from .entropy import RandomSource, SystemRandomSource, ReaderRandomSource
from .curves import Curve, P224, P256, P384, P521, get_curve, curve_name, is_valid_curve
from .rsa import (
    RSAKeyPair,
    generate_rsa_key_pair,
    rsa_key_size,
    rsa_private_key_to_pem,
    rsa_public_key_to_pem,
    rsa_private_key_from_pem,
    rsa_public_key_from_pem,
    max_message_length,
    encrypt_oaep,
    decrypt_oaep,
    encrypt_pkcs1v15,
    decrypt_pkcs1v15,
    sign_pss,
    verify_pss,
    sign_pkcs1v15,
    verify_pkcs1v15,
)
from .ecdsa import (
    ECDSAKeyPair,
    generate_ecdsa_key,
    generate_ecdsa_p256_key,
    generate_ecdsa_p384_key,
    generate_ecdsa_p521_key,
    ecdsa_sign,
    ecdsa_sign_sha256,
    ecdsa_sign_sha512,
    ecdsa_verify,
    ecdsa_verify_sha256,
    ecdsa_verify_sha512,
    signature_to_bytes,
    signature_from_bytes,
    ec_private_key_to_pem,
    ec_public_key_to_pem,
    ec_private_key_from_pem,
    ec_public_key_from_pem,
)
from .ecdh import (
    ECDHKeyPair,
    generate_ecdh_key,
    generate_ecdh_p256_key,
    generate_ecdh_p384_key,
    generate_ecdh_p521_key,
    compute_shared,
    compute_shared_with_kdf,
    compute_shared_sha256,
    key_exchange,
    validate_key_pair,
    shared_secret_test,
    public_key_from_coordinates,
    public_key_to_coordinates,
)
from .pem import load_any_key
from .keyinfo import key_fingerprint, describe_key

__all__ = [
    'RandomSource',
    'SystemRandomSource',
    'ReaderRandomSource',
    'Curve',
    'P224',
    'P256',
    'P384',
    'P521',
    'get_curve',
    'curve_name',
    'is_valid_curve',
    'RSAKeyPair',
    'generate_rsa_key_pair',
    'rsa_key_size',
    'rsa_private_key_to_pem',
    'rsa_public_key_to_pem',
    'rsa_private_key_from_pem',
    'rsa_public_key_from_pem',
    'max_message_length',
    'encrypt_oaep',
    'decrypt_oaep',
    'encrypt_pkcs1v15',
    'decrypt_pkcs1v15',
    'sign_pss',
    'verify_pss',
    'sign_pkcs1v15',
    'verify_pkcs1v15',
    'ECDSAKeyPair',
    'generate_ecdsa_key',
    'generate_ecdsa_p256_key',
    'generate_ecdsa_p384_key',
    'generate_ecdsa_p521_key',
    'ecdsa_sign',
    'ecdsa_sign_sha256',
    'ecdsa_sign_sha512',
    'ecdsa_verify',
    'ecdsa_verify_sha256',
    'ecdsa_verify_sha512',
    'signature_to_bytes',
    'signature_from_bytes',
    'ec_private_key_to_pem',
    'ec_public_key_to_pem',
    'ec_private_key_from_pem',
    'ec_public_key_from_pem',
    'ECDHKeyPair',
    'generate_ecdh_key',
    'generate_ecdh_p256_key',
    'generate_ecdh_p384_key',
    'generate_ecdh_p521_key',
    'compute_shared',
    'compute_shared_with_kdf',
    'compute_shared_sha256',
    'key_exchange',
    'validate_key_pair',
    'shared_secret_test',
    'public_key_from_coordinates',
    'public_key_to_coordinates',
    'load_any_key',
    'key_fingerprint',
    'describe_key',
]
