#!/usr/bin/env python3
"""
Inspect a PEM key file and print its description as JSON.

Usage:
    python scripts/inspect_key.py keys/server_public.pem
"""

import argparse
import sys

from keysmith.common.exceptions import KeysmithError
from keysmith.common.log import configure_logging
from keysmith.common.protocol import serialize_message
from keysmith.crypto.keyinfo import describe_key
from keysmith.crypto.pem import load_any_key


def inspect_key(pem_path: str) -> str:
    """
    Load a key file and describe it.

    Args:
        pem_path: Path to a PEM private or public key

    Returns:
        KeyInfo as a JSON string
    """
    with open(pem_path, "rb") as f:
        key = load_any_key(f.read())
    return serialize_message(describe_key(key))


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Describe an RSA or EC key file")
    parser.add_argument("pem_file", help="Path to a PEM key")
    args = parser.parse_args(argv)
    configure_logging()

    try:
        print(inspect_key(args.pem_file))
    except (KeysmithError, OSError) as e:
        print(f"[✗] {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
