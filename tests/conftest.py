"""
Shared fixtures.

RSA keys are expensive to generate, so they are created once per session.
"""
import pytest

from keysmith.crypto.ecdh import generate_ecdh_key
from keysmith.crypto.ecdsa import generate_ecdsa_key
from keysmith.crypto.rsa import generate_rsa_key_pair


@pytest.fixture(scope="session")
def rsa_1024():
    """1024-bit RSA key pair (smallest accepted size)."""
    return generate_rsa_key_pair(1024)


@pytest.fixture(scope="session")
def rsa_2048():
    """2048-bit RSA key pair."""
    return generate_rsa_key_pair(2048)


@pytest.fixture(scope="session")
def other_rsa_1024():
    """A second, unrelated 1024-bit RSA key pair."""
    return generate_rsa_key_pair(1024)


@pytest.fixture(params=["P-256", "P-384", "P-521"])
def curve_name_param(request):
    return request.param


@pytest.fixture
def ecdsa_p256():
    return generate_ecdsa_key("P-256")


@pytest.fixture
def ecdh_p256_pair():
    return generate_ecdh_key("P-256"), generate_ecdh_key("P-256")
