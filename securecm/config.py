"""
Store Settings — validated construction options for SecureConfigStore.

Settings can be read from environment variables:
    SECURECM_ENV = <environment name, default "development">
    SECURECM_CONFIG_DIR = <directory, default "./config">
    SECURECM_SECRET_KEY = <32-character secret key>
    SECURECM_FORMAT = <json | yaml | env, default "json">

Security Note:
    Never log key material. ``secret_key`` is held as a SecretStr so it is
    masked in reprs and validation errors.
"""
import os
import logging
from pathlib import Path

from pydantic import BaseModel, Field, SecretStr, field_validator

from .codecs import FORMATS
from .crypto import normalize_key

logger = logging.getLogger("securecm.config")

DEFAULT_ENV = "development"
DEFAULT_CONFIG_DIR = "./config"
DEFAULT_FORMAT = "json"


class StoreSettings(BaseModel):
    """Validated store settings."""

    env: str = Field(default=DEFAULT_ENV, min_length=1)
    config_dir: Path = Field(default=Path(DEFAULT_CONFIG_DIR))
    secret_key: SecretStr
    default_format: str = Field(default=DEFAULT_FORMAT)

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: SecretStr) -> SecretStr:
        """Ensure the secret key is exactly 32 bytes."""
        normalize_key(v.get_secret_value())
        return v

    @field_validator("default_format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate the default save format is supported."""
        if v not in FORMATS:
            raise ValueError(f"Unsupported format: {v}")
        return v

    @classmethod
    def from_env(cls) -> "StoreSettings":
        """Create StoreSettings by loading values from environment.

        Returns:
            Populated StoreSettings instance.
        """
        settings = cls(
            env=os.environ.get("SECURECM_ENV") or DEFAULT_ENV,
            config_dir=os.environ.get("SECURECM_CONFIG_DIR") or DEFAULT_CONFIG_DIR,
            secret_key=os.environ.get("SECURECM_SECRET_KEY", ""),
            default_format=os.environ.get("SECURECM_FORMAT") or DEFAULT_FORMAT,
        )
        logger.debug(
            "Loaded settings from environment: env=%s config_dir=%s",
            settings.env, settings.config_dir,
        )
        return settings
