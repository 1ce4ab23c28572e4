"""
Structured-text codecs — parse and serialize configuration mappings.

Supported formats:
    json  -> orjson, 2-space indentation, key order kept
    yaml  -> PyYAML safe loader/dumper, key order kept
    env   -> python-dotenv parser; ``KEY=value`` lines on output

The env writer does no escaping: values containing newlines or ``=``
are written as-is.
"""
import io
import logging
from typing import Any
from collections.abc import Mapping

import orjson
import yaml
from dotenv import dotenv_values

from .exceptions import CodecError, UnsupportedFormatError

logger = logging.getLogger("securecm.codecs")

FORMATS = ("json", "yaml", "env")

# probe order for discovery on load
EXTENSIONS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".env": "env",
}


def check_format(fmt: str) -> str:
    """Return ``fmt`` if supported.

    Raises:
        UnsupportedFormatError: If ``fmt`` is not json, yaml or env.
    """
    if fmt not in FORMATS:
        raise UnsupportedFormatError(fmt)
    return fmt


def format_for_extension(ext: str) -> str:
    """Map a file extension (with leading dot) to its codec format."""
    try:
        return EXTENSIONS[ext]
    except KeyError:
        raise UnsupportedFormatError(ext) from None


def to_text(value: Any) -> str:
    """Render a scalar as text the way it appears in an env file."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse(text: str, fmt: str) -> dict[str, Any]:
    """Parse configuration text into a mapping.

    A document that does not hold a mapping (e.g. an empty YAML file)
    parses to an empty dict.

    Raises:
        UnsupportedFormatError: Unknown format.
        CodecError: Malformed text.
    """
    check_format(fmt)
    try:
        if fmt == "json":
            data = orjson.loads(text) if text.strip() else {}
        elif fmt == "yaml":
            data = yaml.safe_load(text)
        else:
            data = dotenv_values(stream=io.StringIO(text), interpolate=False)
    except (orjson.JSONDecodeError, yaml.YAMLError) as err:
        raise CodecError(f"Invalid {fmt} configuration: {err}") from err
    if not isinstance(data, Mapping):
        logger.debug("%s document is not a mapping, using empty config", fmt)
        return {}
    return dict(data)


def serialize(mapping: Mapping[str, Any], fmt: str) -> str:
    """Serialize a mapping into configuration text.

    Raises:
        UnsupportedFormatError: Unknown format.
        CodecError: A value cannot be represented in ``fmt``.
    """
    check_format(fmt)
    try:
        if fmt == "json":
            return orjson.dumps(
                dict(mapping),
                option=orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS,
            ).decode("utf-8")
        if fmt == "yaml":
            return yaml.safe_dump(
                dict(mapping), sort_keys=False, allow_unicode=True
            )
    except (orjson.JSONEncodeError, yaml.YAMLError) as err:
        raise CodecError(f"Cannot serialize configuration as {fmt}: {err}") from err
    return "\n".join(
        f"{key}={to_text(value)}" for key, value in mapping.items()
    )
