#!/usr/bin/env python3
"""
Generate Key Pairs

Creates an RSA, ECDSA or ECDH key pair and writes it as PEM files
<name>_private.pem and <name>_public.pem.

Usage:
    python scripts/gen_keys.py --family rsa --bits 3072 --name server
    python scripts/gen_keys.py --family ecdsa --curve P-384 --name signer
"""

import argparse
import logging
import os

from keysmith.common.config import get_settings
from keysmith.common.log import configure_logging
from keysmith.crypto import describe_key, generate_ecdh_key, generate_ecdsa_key, generate_rsa_key_pair

logger = logging.getLogger(__name__)

FAMILIES = ("rsa", "ecdsa", "ecdh")


def generate_keys(family: str, name: str, output_dir: str, bits: int = None, curve: str = None):
    """
    Generate a key pair and save it as PEM.

    Args:
        family: "rsa", "ecdsa" or "ecdh"
        name: File name prefix
        output_dir: Directory to save the keys
        bits: RSA modulus size (default from settings)
        curve: EC curve name (default from settings)

    Returns:
        Tuple of (private_key_path, public_key_path)
    """
    settings = get_settings()
    os.makedirs(output_dir, exist_ok=True)

    if family == "rsa":
        bits = bits or settings.rsa_key_bits
        print(f"[*] Generating RSA private key ({bits} bits)...")
        key_pair = generate_rsa_key_pair(bits)
    elif family == "ecdsa":
        curve = curve or settings.default_curve
        print(f"[*] Generating ECDSA key pair on {curve}...")
        key_pair = generate_ecdsa_key(curve)
    elif family == "ecdh":
        curve = curve or settings.default_curve
        print(f"[*] Generating ECDH key pair on {curve}...")
        key_pair = generate_ecdh_key(curve)
    else:
        raise ValueError(f"Unknown key family: {family}")

    private_path = os.path.join(output_dir, f"{name}_private.pem")
    with open(private_path, "wb") as f:
        f.write(key_pair.private_key_to_pem())
    print(f"[+] Private key saved to: {private_path}")

    public_path = os.path.join(output_dir, f"{name}_public.pem")
    with open(public_path, "wb") as f:
        f.write(key_pair.public_key_to_pem())
    print(f"[+] Public key saved to: {public_path}")

    info = describe_key(key_pair.private_key)
    logger.info("Wrote %s key pair %s", family, info.fingerprint)
    print(f"\n[✓] Key pair created successfully!")
    print(f"    Fingerprint: {info.fingerprint}")

    return private_path, public_path


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate an RSA, ECDSA or ECDH key pair"
    )
    parser.add_argument(
        "--family",
        choices=FAMILIES,
        default="rsa",
        help="Key family (default: rsa)"
    )
    parser.add_argument(
        "--bits",
        type=int,
        default=None,
        help="RSA modulus size in bits (default: KEYSMITH_RSA_KEY_BITS or 2048)"
    )
    parser.add_argument(
        "--curve",
        default=None,
        help="Curve for ECDSA/ECDH keys (default: KEYSMITH_DEFAULT_CURVE or P-256)"
    )
    parser.add_argument(
        "--name",
        default="key",
        help="File name prefix (default: key)"
    )
    parser.add_argument(
        "--output",
        default="keys",
        help="Output directory for keys (default: keys)"
    )

    args = parser.parse_args(argv)
    configure_logging()

    return generate_keys(
        family=args.family,
        name=args.name,
        output_dir=args.output,
        bits=args.bits,
        curve=args.curve,
    )


if __name__ == "__main__":
    main()
