"""
Tests for the command-line scripts.
"""
import importlib.util
import json
from pathlib import Path

import pytest

from keysmith.common.config import get_settings
from keysmith.crypto.ecdh import shared_secret_test, ECDHKeyPair
from keysmith.crypto.ecdsa import ec_private_key_from_pem, ec_public_key_from_pem
from keysmith.crypto.curves import get_curve
from keysmith.crypto.rsa import rsa_key_size, rsa_private_key_from_pem

SCRIPTS_DIR = Path(__file__).resolve().parents[3] / "scripts"


def _load_script(name):
    spec = importlib.util.spec_from_file_location(name, SCRIPTS_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="module")
def gen_keys():
    return _load_script("gen_keys")


@pytest.fixture(scope="module")
def inspect_key():
    return _load_script("inspect_key")


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    for name in ("KEYSMITH_RSA_KEY_BITS", "KEYSMITH_DEFAULT_CURVE", "KEYSMITH_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestGenKeys:
    """Tests for scripts/gen_keys.py."""

    def test_rsa(self, gen_keys, tmp_path):
        private_path, public_path = gen_keys.generate_keys("rsa", "server", str(tmp_path), bits=1024)
        assert Path(private_path).name == "server_private.pem"
        assert Path(public_path).name == "server_public.pem"
        key = rsa_private_key_from_pem(Path(private_path).read_bytes())
        assert rsa_key_size(key) == 1024

    def test_ecdsa_curve(self, gen_keys, tmp_path):
        private_path, public_path = gen_keys.generate_keys("ecdsa", "signer", str(tmp_path), curve="P-384")
        key = ec_private_key_from_pem(Path(private_path).read_bytes())
        assert key.curve.name == "secp384r1"
        assert ec_public_key_from_pem(Path(public_path).read_bytes()).public_numbers() == key.public_key().public_numbers()

    def test_main_uses_default_curve(self, gen_keys, tmp_path, monkeypatch):
        """Without --curve the curve comes from settings."""
        monkeypatch.setenv("KEYSMITH_DEFAULT_CURVE", "P-521")
        private_path, _ = gen_keys.main(["--family", "ecdh", "--name", "peer", "--output", str(tmp_path)])
        key = ec_private_key_from_pem(Path(private_path).read_bytes())
        assert key.curve.name == "secp521r1"

    def test_generated_ecdh_keys_agree(self, gen_keys, tmp_path):
        pairs = []
        for name in ("alice", "bob"):
            private_path, public_path = gen_keys.generate_keys("ecdh", name, str(tmp_path), curve="P-256")
            pairs.append(ECDHKeyPair(
                private_key=ec_private_key_from_pem(Path(private_path).read_bytes()),
                public_key=ec_public_key_from_pem(Path(public_path).read_bytes()),
                curve=get_curve("P-256"),
            ))
        assert shared_secret_test(*pairs)

    def test_unknown_family(self, gen_keys, tmp_path):
        with pytest.raises(ValueError, match="Unknown key family"):
            gen_keys.generate_keys("dsa", "x", str(tmp_path))

    def test_cli_rejects_unknown_family(self, gen_keys):
        with pytest.raises(SystemExit):
            gen_keys.main(["--family", "dsa"])


class TestInspectKey:
    """Tests for scripts/inspect_key.py."""

    def test_prints_key_info(self, gen_keys, inspect_key, tmp_path, capsys):
        _, public_path = gen_keys.generate_keys("ecdsa", "k", str(tmp_path), curve="P-256")
        capsys.readouterr()
        assert inspect_key.main([public_path]) == 0
        info = json.loads(capsys.readouterr().out)
        assert info["family"] == "EC"
        assert info["kind"] == "public"
        assert info["curve"] == "P-256"

    def test_missing_file(self, inspect_key, tmp_path):
        assert inspect_key.main([str(tmp_path / "missing.pem")]) == 1

    def test_not_a_key(self, inspect_key, tmp_path):
        path = tmp_path / "junk.pem"
        path.write_text("hello")
        assert inspect_key.main([str(path)]) == 1
