"""
keysmith

Asymmetric-key primitives built on pyca/cryptography:
- RSA key generation, OAEP/PKCS#1 v1.5 encryption, PSS/PKCS#1 v1.5 signatures
- ECDSA over the NIST prime curves
- ECDH shared secrets with on-curve validation
- PEM serialization for all key families
- Injectable entropy for every randomized operation
"""

import logging

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
