"""SecureCM — per-environment configuration with encrypted sensitive keys.

Security Note (Threat Model):
    Sensitive values are encrypted only at rest. Once loaded they live as
    plaintext in process memory, and anyone holding the 32-character secret
    key can decrypt the stored files. Key rotation is out of scope.
"""
from .version import __version__
from .store import SecureConfigStore
from .config import StoreSettings
from .crypto import Cipher, DecryptResult, generate_secret_key, is_encrypted
from .fields import Direction
from .exceptions import (
    SecureConfigError,
    SecretKeyError,
    UnsupportedFormatError,
    CodecError,
)

__all__ = [
    "__version__",
    "SecureConfigStore",
    "StoreSettings",
    "Cipher",
    "DecryptResult",
    "Direction",
    "generate_secret_key",
    "is_encrypted",
    "SecureConfigError",
    "SecretKeyError",
    "UnsupportedFormatError",
    "CodecError",
]
