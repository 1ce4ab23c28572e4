"""Exception hierarchy for SecureCM."""


class SecureConfigError(Exception):
    """Base class for all SecureCM errors."""


class SecretKeyError(SecureConfigError, ValueError):
    """Raised when the secret key is missing or has the wrong length."""


class UnsupportedFormatError(SecureConfigError, ValueError):
    """Raised when a configuration format is not one of json, yaml or env."""

    def __init__(self, fmt: str):
        self.format = fmt
        super().__init__(f"Unsupported format: {fmt}")


class CodecError(SecureConfigError):
    """Raised when configuration text cannot be parsed or serialized."""
