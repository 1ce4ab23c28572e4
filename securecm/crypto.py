"""
SecureCM Crypto Core — AES-256-CBC encryption of single configuration values.

Wire format for an encrypted value:
    <iv-hex>:<ciphertext-hex>

The IV is 16 random bytes (32 lowercase hex chars), regenerated on every
call to ``encrypt``. Ciphertext is PKCS#7-padded AES-256-CBC output.

Security Note:
    Never log plaintext, ciphertext or key material.
    Detection of encrypted values on decrypt is a colon-presence heuristic;
    a plaintext value containing ':' is treated as ciphertext and will fail
    to decrypt. Use ``is_encrypted`` for a strict wire-format check.
"""
import os
import re
import secrets
import logging
from typing import Any, NamedTuple, Optional, Union

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import (
    Cipher as BlockCipher,
    algorithms,
    modes,
)

from .codecs import to_text
from .exceptions import SecretKeyError

logger = logging.getLogger("securecm.crypto")

IV_SIZE = 16  # AES block size
KEY_LENGTH = 32  # AES-256
SEPARATOR = ":"

_WIRE_PATTERN = re.compile(r"^[0-9a-f]{32}:(?:[0-9a-f]{32})+$")


def normalize_key(secret_key: Union[str, bytes, None]) -> bytes:
    """Validate a secret key and return its raw 32 bytes.

    A ``str`` key is UTF-8 encoded; it must be 32 characters that encode
    to exactly 32 bytes.

    Raises:
        SecretKeyError: If the key is missing, not text or bytes, or not
            exactly 32 bytes.
    """
    if not isinstance(secret_key, (str, bytes, bytearray, memoryview)) or not secret_key:
        raise SecretKeyError(
            "A 32-character secret_key is required for encryption and decryption."
        )
    key_bytes = (
        secret_key.encode("utf-8") if isinstance(secret_key, str) else bytes(secret_key)
    )
    if len(key_bytes) != KEY_LENGTH:
        raise SecretKeyError(
            "A 32-character secret_key is required for encryption and decryption, "
            f"got {len(key_bytes)} bytes."
        )
    return key_bytes


def generate_secret_key() -> str:
    """Generate a random 32-character secret key.

    This is a utility for operators bootstrapping a new environment.

    Returns:
        32 lowercase hex characters (16 random bytes).
    """
    return secrets.token_hex(KEY_LENGTH // 2)


def is_encrypted(value: Any) -> bool:
    """Strict check that ``value`` looks like a wire-format encrypted value."""
    return isinstance(value, str) and bool(_WIRE_PATTERN.match(value))


class DecryptResult(NamedTuple):
    """Outcome of a decryption attempt.

    ``ok`` is False only when the value looked encrypted but could not be
    decrypted; pass-through values are reported as ``ok``.
    """
    ok: bool
    value: Any = None
    error: Optional[str] = None


class Cipher:
    """Symmetric encryption of single string values.

    Args:
        secret_key: 32-character string or 32 raw bytes.

    Raises:
        SecretKeyError: On a missing or wrong-length key.
    """

    def __init__(self, secret_key: Union[str, bytes, None]):
        self._key = normalize_key(secret_key)

    def __repr__(self) -> str:
        return "<Cipher aes-256-cbc>"

    def _block_cipher(self, iv: bytes) -> BlockCipher:
        return BlockCipher(algorithms.AES(self._key), modes.CBC(iv))

    def encrypt(self, plaintext: Any) -> str:
        """Encrypt a value and return its wire form.

        Non-string values are encrypted as they would be written to an
        env file, so booleans become ``true``/``false``.

        Args:
            plaintext: Value to encrypt.

        Returns:
            ``<iv-hex>:<ciphertext-hex>``
        """
        plaintext = to_text(plaintext)
        iv = os.urandom(IV_SIZE)
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()
        encryptor = self._block_cipher(iv).encryptor()
        ct = encryptor.update(padded) + encryptor.finalize()
        return iv.hex() + SEPARATOR + ct.hex()

    def _decrypt_wire(self, value: str) -> str:
        iv_hex, _, ct_hex = value.partition(SEPARATOR)
        iv = bytes.fromhex(iv_hex)
        ct = bytes.fromhex(ct_hex)
        decryptor = self._block_cipher(iv).decryptor()
        padded = decryptor.update(ct) + decryptor.finalize()
        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        data = unpadder.update(padded) + unpadder.finalize()
        return data.decode("utf-8")

    def try_decrypt(self, value: Any) -> DecryptResult:
        """Decrypt a wire value, reporting failure explicitly.

        Values that are not strings, are empty, or contain no colon are
        returned unchanged as a successful result.
        """
        if not value or not isinstance(value, str) or SEPARATOR not in value:
            return DecryptResult(ok=True, value=value)
        try:
            return DecryptResult(ok=True, value=self._decrypt_wire(value))
        except ValueError as err:
            # UnicodeDecodeError is a ValueError too
            return DecryptResult(ok=False, error=type(err).__name__)

    def decrypt(self, value: Any) -> Any:
        """Decrypt a wire value.

        Args:
            value: Wire-format string, or any other value.

        Returns:
            The plaintext string; the input unchanged when it does not
            look encrypted; or None when decryption fails. A None return
            means "value unusable", not "value absent".
        """
        result = self.try_decrypt(value)
        if not result.ok:
            logger.error(
                "Decryption failed (%s). Check your secret key or the "
                "encrypted value format.",
                result.error,
            )
        return result.value
