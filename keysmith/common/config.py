"""
Runtime settings for keysmith.

Values come from the environment (optionally a .env file) and are validated
with pydantic. Library calls never read settings implicitly; they drive the
scripts and logging setup.
"""

import logging
import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

MIN_RSA_KEY_BITS = 1024


class Settings(BaseModel):
    """Validated keysmith settings."""

    rsa_key_bits: int = 2048
    default_curve: str = "P-256"
    log_level: str = "INFO"

    @field_validator("rsa_key_bits")
    @classmethod
    def validate_rsa_key_bits(cls, v: int) -> int:
        if v < MIN_RSA_KEY_BITS:
            raise ValueError(f"RSA key size must be at least {MIN_RSA_KEY_BITS} bits")
        return v

    @field_validator("default_curve")
    @classmethod
    def validate_default_curve(cls, v: str) -> str:
        from keysmith.crypto.curves import get_curve
        from keysmith.common.exceptions import InvalidParameterError

        try:
            return get_curve(v).name
        except InvalidParameterError as e:
            raise ValueError(str(e)) from e

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


def load_settings() -> Settings:
    """
    Build settings from the current environment.

    Returns:
        Settings populated from KEYSMITH_* variables

    Raises:
        pydantic.ValidationError: If a variable holds an invalid value
    """
    load_dotenv()
    return Settings(
        rsa_key_bits=os.getenv('KEYSMITH_RSA_KEY_BITS', 2048),
        default_curve=os.getenv('KEYSMITH_DEFAULT_CURVE', 'P-256'),
        log_level=os.getenv('KEYSMITH_LOG_LEVEL', 'INFO'),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings for the process."""
    return load_settings()
