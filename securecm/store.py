"""
SecureConfigStore — per-environment configuration with encrypted sensitive keys.

Provides the public API:
- ``load(sensitive_keys)`` — find ``<config_dir>/<env>.<ext>``, parse it and
  decrypt the sensitive keys
- ``save(fmt)`` — encrypt the sensitive keys and write ``<config_dir>/<env>.<fmt>``
- ``get(key, default)`` / ``set(key, value)`` — plain mapping access

Encryption only happens at the load/save boundary; ``set`` never transforms
a value. ``save`` encrypts a copy of the mapping, so the live mapping always
holds plaintext.

Concurrency:
    All operations are synchronous and unlocked. Callers sharing one
    instance across threads must serialize access themselves. Two instances
    saving the same file race with last-writer-wins.
"""
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Optional, Union
from collections.abc import Iterable, Mapping

from . import codecs
from .config import DEFAULT_CONFIG_DIR, DEFAULT_ENV, DEFAULT_FORMAT, StoreSettings
from .crypto import Cipher, DecryptResult
from .exceptions import CodecError
from .fields import Direction, encrypt_fields, transform

logger = logging.getLogger("securecm.store")


class SecureConfigStore:
    """Configuration store bound to one environment.

    Args:
        env: Environment name, used as the file stem. Defaults to
            ``"development"``.
        config_dir: Directory holding the configuration files. Defaults to
            ``"./config"``.
        secret_key: 32-character key for AES-256. Mandatory.
        default_format: Format used by ``save()`` when none is given.

    Raises:
        SecretKeyError: If ``secret_key`` is missing or not 32 characters.
    """

    # probed in this order, first existing file wins
    EXTENSIONS = tuple(codecs.EXTENSIONS)

    def __init__(
        self,
        env: Optional[str] = None,
        config_dir: Union[str, Path, None] = None,
        secret_key: Union[str, bytes, None] = None,
        default_format: str = DEFAULT_FORMAT,
    ):
        self._cipher = Cipher(secret_key)
        self.env = env or DEFAULT_ENV
        self.config_dir = Path(config_dir or DEFAULT_CONFIG_DIR)
        self.default_format = codecs.check_format(default_format)
        self._config: dict[str, Any] = {}
        self._sensitive_keys: tuple[str, ...] = ()
        self.loaded_from: Optional[Path] = None

    @classmethod
    def from_settings(cls, settings: StoreSettings) -> "SecureConfigStore":
        """Build a store from validated settings."""
        return cls(
            env=settings.env,
            config_dir=settings.config_dir,
            secret_key=settings.secret_key.get_secret_value(),
            default_format=settings.default_format,
        )

    def __repr__(self) -> str:
        return (
            f'<SecureConfigStore [env:{self.env}, dir:{self.config_dir}] '
            f'keys={list(self._config)}, sensitive={list(self._sensitive_keys)}>'
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> Mapping[str, Any]:
        """Read-only view of the current mapping."""
        return MappingProxyType(self._config)

    @property
    def sensitive_keys(self) -> tuple[str, ...]:
        return self._sensitive_keys

    @property
    def loaded(self) -> bool:
        return self.loaded_from is not None

    def path_for(self, ext: str) -> Path:
        """Return ``<config_dir>/<env>.<ext>``."""
        return self.config_dir / f"{self.env}.{ext.lstrip('.')}"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _discover(self) -> Optional[Path]:
        for ext in self.EXTENSIONS:
            path = self.path_for(ext)
            if path.is_file():
                return path
            logger.debug("No configuration at %s", path)
        return None

    def load(self, sensitive_keys: Optional[Iterable[str]] = None) -> "SecureConfigStore":
        """Load the configuration file for this environment.

        The sensitive keys replace any set given to a previous ``load``.
        If no file exists the mapping is left as it was.

        Args:
            sensitive_keys: Keys whose values are decrypted after parsing
                and encrypted on ``save``.

        Returns:
            This store, for chaining.

        Raises:
            CodecError: If the file exists but is not valid UTF-8 or cannot
                be parsed.
        """
        self._sensitive_keys = tuple(sensitive_keys or ())
        path = self._discover()
        if path is None:
            logger.warning(
                "No configuration file found for environment: %s", self.env
            )
            return self
        fmt = codecs.format_for_extension(path.suffix)
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as err:
            raise CodecError(f"Invalid {fmt} configuration in {path}: {err}") from err
        data = codecs.parse(text, fmt)
        self._config = transform(
            data, self._sensitive_keys, Direction.DECRYPT, self._cipher
        )
        self.loaded_from = path
        logger.info(
            "Configuration loaded from %s: %d key(s), %d sensitive",
            path, len(self._config), len(self._sensitive_keys),
        )
        return self

    def save(
        self,
        fmt: Optional[str] = None,
        sensitive_keys: Optional[Iterable[str]] = None,
    ) -> Path:
        """Encrypt sensitive keys and write the configuration file.

        The file is written to ``<config_dir>/<env>.<fmt>``, creating
        ``config_dir`` if needed and replacing any existing file.

        Args:
            fmt: ``json``, ``yaml`` or ``env``. Defaults to ``default_format``.
            sensitive_keys: Keys to encrypt for this save only. Defaults to
                the set stored by the last ``load``.

        Returns:
            Path of the written file.

        Raises:
            UnsupportedFormatError: Before touching the file system, if
                ``fmt`` is not supported.
            CodecError: If a value cannot be serialized.
        """
        fmt = codecs.check_format(fmt or self.default_format)
        keys = self._sensitive_keys if sensitive_keys is None else tuple(sensitive_keys)
        encrypted = encrypt_fields(self._config, keys, self._cipher)
        output = codecs.serialize(encrypted, fmt)
        path = self.path_for(fmt)
        self.config_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(output, encoding="utf-8")
        logger.info("Configuration saved to %s", path)
        return path

    # ------------------------------------------------------------------
    # Value encryption
    # ------------------------------------------------------------------

    def encrypt(self, value: Any) -> str:
        """Encrypt a single value with this store's secret key."""
        return self._cipher.encrypt(value)

    def decrypt(self, value: Any) -> Any:
        """Decrypt a single wire value; None if it cannot be decrypted."""
        return self._cipher.decrypt(value)

    def try_decrypt(self, value: Any) -> DecryptResult:
        return self._cipher.try_decrypt(value)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for ``key``, or ``default`` if missing."""
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set ``key`` to ``value``. No encryption happens here."""
        self._config[key] = value

    def keys(self) -> list[str]:
        return list(self._config)

    def __contains__(self, key: object) -> bool:
        return key in self._config
