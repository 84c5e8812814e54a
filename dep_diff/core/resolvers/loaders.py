"""Structured-text loaders shared by the lockfile resolvers.

The ``load_*`` functions raise :class:`LockfileParseError` naming the
lockfile format when the content does not parse, or when the top-level value
is not a mapping.  The ``try_load_*`` variants return ``None`` instead and are
used for content sniffing.
"""

import json
from typing import Any, Dict, Optional

import yaml

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from ..exceptions import LockfileParseError


def load_json(content: str, format_name: str) -> Dict[str, Any]:
    """Parse JSON content that must hold an object.

    Args:
        content: JSON text
        format_name: Lockfile format for error messages

    Returns:
        Parsed object

    Raises:
        LockfileParseError: If the content is not a JSON object
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise LockfileParseError(format_name, f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise LockfileParseError(format_name, f"expected a JSON object, got {type(data).__name__}")
    return data


def load_toml(content: str, format_name: str) -> Dict[str, Any]:
    """Parse TOML content.

    Args:
        content: TOML text
        format_name: Lockfile format for error messages

    Returns:
        Parsed table (empty content gives an empty table)

    Raises:
        LockfileParseError: If the content is not valid TOML
    """
    try:
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise LockfileParseError(format_name, f"invalid TOML: {e}") from e


def load_yaml(content: str, format_name: str) -> Dict[str, Any]:
    """Parse YAML content that must hold a mapping.

    An empty document is treated as an empty mapping.

    Args:
        content: YAML text
        format_name: Lockfile format for error messages

    Returns:
        Parsed mapping

    Raises:
        LockfileParseError: If the content is not valid YAML or not a mapping
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise LockfileParseError(format_name, f"invalid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise LockfileParseError(format_name, f"expected a YAML mapping, got {type(data).__name__}")
    return data


def try_load_json(content: str) -> Optional[Dict[str, Any]]:
    """Parse a JSON object, or return None if the content is anything else."""
    try:
        return load_json(content, "JSON")
    except LockfileParseError:
        return None


def try_load_toml(content: str) -> Optional[Dict[str, Any]]:
    """Parse a TOML table, or return None if the content is not TOML."""
    try:
        return load_toml(content, "TOML")
    except LockfileParseError:
        return None
