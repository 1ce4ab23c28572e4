"""
Tests for the value Cipher.

Tests cover:
- Secret key validation
- Wire format of encrypted values
- Round trip and IV randomness
- Pass-through of values that do not look encrypted
- Failure reporting on wrong keys and corrupt values
"""
import re
import logging

import pytest

from securecm.crypto import (
    Cipher,
    DecryptResult,
    generate_secret_key,
    is_encrypted,
    normalize_key,
)
from securecm.exceptions import SecretKeyError

WIRE_RE = re.compile(r"^[0-9a-f]{32}:[0-9a-f]+$")


@pytest.fixture
def cipher(secret_key):
    return Cipher(secret_key)


# --- Test Secret Key Validation ---

class TestSecretKey:
    """Tests for key validation at construction."""

    def test_missing_key(self):
        """Test that a missing key is rejected."""
        with pytest.raises(SecretKeyError, match="32-character"):
            Cipher(None)

    def test_empty_key(self):
        """Test that an empty key is rejected."""
        with pytest.raises(SecretKeyError, match="32-character"):
            Cipher("")

    @pytest.mark.parametrize("length", [31, 33])
    def test_wrong_length_key(self, length):
        """Test that 31 and 33 character keys are rejected."""
        with pytest.raises(SecretKeyError, match="32-character"):
            Cipher("k" * length)

    def test_multibyte_key_rejected(self):
        """Test that 32 characters encoding to more than 32 bytes are rejected."""
        with pytest.raises(SecretKeyError):
            Cipher("é" * 32)

    def test_bytes_key(self):
        """Test that 32 raw bytes are accepted."""
        assert normalize_key(b"\x01" * 32) == b"\x01" * 32

    @pytest.mark.parametrize("key", [32, 3.2, ["k"] * 32, object()])
    def test_non_text_key_rejected(self, key):
        """Test keys that are neither text nor bytes are rejected."""
        with pytest.raises(SecretKeyError, match="32-character"):
            Cipher(key)

    def test_bytearray_key(self):
        """Test a 32-byte bytearray is accepted."""
        assert normalize_key(bytearray(b"\x02" * 32)) == b"\x02" * 32

    def test_key_error_is_value_error(self):
        """Test SecretKeyError can be caught as ValueError."""
        with pytest.raises(ValueError):
            Cipher("short")

    def test_generate_secret_key(self):
        """Test generated keys are valid and distinct."""
        key = generate_secret_key()
        assert len(key) == 32
        assert Cipher(key)
        assert generate_secret_key() != key


# --- Test Encryption ---

class TestEncrypt:
    """Tests for encrypt()."""

    def test_wire_format(self, cipher):
        """Test encrypted values match <iv-hex>:<ciphertext-hex>."""
        wire = cipher.encrypt("super-secret-api-key")
        assert WIRE_RE.match(wire)
        assert is_encrypted(wire)
        assert "super-secret-api-key" not in wire

    def test_iv_is_16_bytes(self, cipher):
        """Test the IV segment is 32 hex characters."""
        iv_hex, _, ct_hex = cipher.encrypt("value").partition(":")
        assert len(iv_hex) == 32
        assert len(ct_hex) % 32 == 0

    def test_round_trip(self, cipher):
        """Test decrypt(encrypt(p)) == p."""
        for plaintext in ["a", "super-secret-api-key", "x" * 16, "ünïcødé ✓", "with:colon"]:
            assert cipher.decrypt(cipher.encrypt(plaintext)) == plaintext

    def test_non_deterministic(self, cipher):
        """Test two encryptions differ but decrypt to the same plaintext."""
        first = cipher.encrypt("same")
        second = cipher.encrypt("same")
        assert first != second
        assert first.split(":")[0] != second.split(":")[0]
        assert cipher.decrypt(first) == cipher.decrypt(second) == "same"

    def test_non_string_encrypted_as_string(self, cipher):
        """Test numbers are encrypted as their string form."""
        assert cipher.decrypt(cipher.encrypt(8080)) == "8080"

    def test_booleans_encrypted_lowercase(self, cipher):
        """Test booleans are encrypted as true/false, as in env files."""
        assert cipher.decrypt(cipher.encrypt(True)) == "true"
        assert cipher.decrypt(cipher.encrypt(False)) == "false"

    def test_repeated_encrypt_grows(self, cipher):
        """Test re-encrypting ciphertext nests instead of being a no-op."""
        once = cipher.encrypt("secret")
        twice = cipher.encrypt(once)
        assert len(twice) > len(once)
        assert cipher.decrypt(twice) == once


# --- Test Decryption ---

class TestDecrypt:
    """Tests for decrypt() and try_decrypt()."""

    @pytest.mark.parametrize("value", [None, "", 42, 3.5, True, "plain-text", ["a:b"]])
    def test_pass_through(self, cipher, value):
        """Test values that are not colon-bearing strings are returned as-is."""
        assert cipher.decrypt(value) == value

    def test_wrong_key(self, cipher, other_key, caplog):
        """Test a wrong key yields None and logs a diagnostic."""
        wire = cipher.encrypt("super-secret-api-key-with-length")
        with caplog.at_level(logging.ERROR, logger="securecm.crypto"):
            assert Cipher(other_key).decrypt(wire) is None
        assert "Decryption failed" in caplog.text
        assert "super-secret" not in caplog.text

    @pytest.mark.parametrize("value", [
        "not-hex:zz",
        "abcd:00112233445566778899aabbccddeeff",
        "00112233445566778899aabbccddeeff:0011",
        "00112233445566778899aabbccddeeff:",
        "http://example.com",
    ])
    def test_corrupt_values(self, cipher, value):
        """Test malformed wire values return None instead of raising."""
        assert cipher.decrypt(value) is None

    def test_extra_colon_in_ciphertext_rejected(self, cipher):
        """Test a colon after the first one makes the ciphertext segment invalid."""
        wire = cipher.encrypt("value")
        assert cipher.decrypt(wire + ":ff") is None

    def test_try_decrypt_success(self, cipher):
        """Test try_decrypt reports success with the plaintext."""
        result = cipher.try_decrypt(cipher.encrypt("token"))
        assert result == DecryptResult(ok=True, value="token")

    def test_try_decrypt_failure(self, cipher, other_key):
        """Test try_decrypt reports failure explicitly."""
        wire = cipher.encrypt("super-secret-api-key-with-length")
        result = Cipher(other_key).try_decrypt(wire)
        assert result.ok is False
        assert result.value is None
        assert result.error

    def test_try_decrypt_pass_through(self, cipher):
        """Test pass-through values are a successful result."""
        assert cipher.try_decrypt("plain") == DecryptResult(ok=True, value="plain")


class TestIsEncrypted:
    """Tests for the strict wire-format check."""

    def test_plain_values(self):
        """Test plain values are not reported as encrypted."""
        assert not is_encrypted("plain")
        assert not is_encrypted("host:5432")
        assert not is_encrypted(None)

    def test_uppercase_rejected(self, cipher):
        """Test only lowercase hex matches."""
        assert not is_encrypted(cipher.encrypt("x").upper())
