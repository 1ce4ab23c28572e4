"""
Sensitive field processing — applies a Cipher to a declared set of keys.

Only keys present with a truthy value are transformed. A sensitive key
whose value is ``""``, ``0``, ``False`` or ``None`` is left untouched in
both directions, so such values are never protected on disk.

Repeated ENCRYPT passes are not idempotent: each pass wraps the previous
ciphertext in a new, longer wire value.
"""
import logging
from enum import Enum
from typing import Any
from collections.abc import Iterable, Mapping, MutableMapping

from .crypto import Cipher

logger = logging.getLogger("securecm.fields")


class Direction(str, Enum):
    """Which way a sensitive field is transformed."""

    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


def transform(
    mapping: MutableMapping[str, Any],
    keys: Iterable[str],
    direction: Direction,
    cipher: Cipher,
) -> MutableMapping[str, Any]:
    """Encrypt or decrypt the values of ``keys`` in place.

    Args:
        mapping: Configuration mapping, mutated in place.
        keys: Sensitive key names.
        direction: ENCRYPT or DECRYPT.
        cipher: Cipher holding the secret key.

    Returns:
        The same mapping, for chaining.
    """
    keys = tuple(keys)
    if not keys:
        return mapping
    apply = cipher.encrypt if direction is Direction.ENCRYPT else cipher.decrypt
    for key in keys:
        if mapping.get(key):
            mapping[key] = apply(mapping[key])
            logger.debug("%s: %s", direction.value, key)
    return mapping


def encrypt_fields(
    mapping: Mapping[str, Any], keys: Iterable[str], cipher: Cipher
) -> dict[str, Any]:
    """Return a copy of ``mapping`` with sensitive values encrypted."""
    return transform(dict(mapping), keys, Direction.ENCRYPT, cipher)


def decrypt_fields(
    mapping: Mapping[str, Any], keys: Iterable[str], cipher: Cipher
) -> dict[str, Any]:
    """Return a copy of ``mapping`` with sensitive values decrypted."""
    return transform(dict(mapping), keys, Direction.DECRYPT, cipher)
