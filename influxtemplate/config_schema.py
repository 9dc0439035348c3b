"""Configuration schema for InfluxDB connection properties.

Defines every recognized connection option, its type, description, default,
and validation rules. Used by the properties record and the YAML loader.
"""

import re
from typing import Any


# Recognized options, keyed by their Python (snake_case) name
CONFIG_SCHEMA: dict[str, dict[str, Any]] = {
    "url": {
        "type": "str",
        "desc": "InfluxDB server URL",
        "example": "http://localhost:8086",
        "pattern": r"^https?://[\w\.\-]+(:\d+)?(/[\w\.\-/]*)?$",
        "default": "http://localhost:8086",
    },
    "username": {
        "type": "str",
        "desc": "InfluxDB username",
        "example": "admin",
        "default": "",
    },
    "password": {
        "type": "str",
        "desc": "InfluxDB password",
        "sensitive": True,
        "default": "",
    },
    "connect_timeout": {
        "type": "int",
        "desc": "Connect timeout in seconds",
        "min": 1,
        "max": 3600,
        "default": 10,
    },
    "write_timeout": {
        "type": "int",
        "desc": "Write timeout in seconds",
        "min": 1,
        "max": 3600,
        "default": 10,
    },
    "read_timeout": {
        "type": "int",
        "desc": "Read timeout in seconds",
        "min": 1,
        "max": 3600,
        "default": 30,
    },
    "gzip": {
        "type": "bool",
        "desc": "Compress requests and responses with gzip",
        "default": False,
    },
    "database": {
        "type": "str",
        "desc": "Target database name",
        "example": "metrics",
        "min_length": 1,
        "required": True,
    },
    "retention_policy": {
        "type": "str",
        "desc": "Retention policy used for writes",
        "example": "autogen",
        "min_length": 1,
        "default": "autogen",
    },
    "time_precision": {
        "type": "str",
        "desc": "Unit of integer point timestamps on write (server assumes nanoseconds if unset)",
        "example": "ms",
        "choices": ["n", "u", "ms", "s", "m", "h"],
        "default": None,
    },
}

# Option names as they appear in externalized property files
ALIASES = {
    "connectTimeout": "connect_timeout",
    "writeTimeout": "write_timeout",
    "readTimeout": "read_timeout",
    "retentionPolicy": "retention_policy",
    "timePrecision": "time_precision",
}

_TRUE_WORDS = ("true", "1", "yes", "y", "on")
_FALSE_WORDS = ("false", "0", "no", "n", "off")


def canonical_key(key: str) -> str:
    """Return the snake_case option name for ``key`` (camelCase accepted)."""
    return ALIASES.get(key, key)


def get_key_info(key: str) -> dict:
    """Get schema information for a configuration key.

    Args:
        key: Option name, camelCase or snake_case (e.g., 'retentionPolicy')

    Returns:
        Dictionary with schema info or empty dict if not found
    """
    return CONFIG_SCHEMA.get(canonical_key(key), {})


def get_defaults() -> dict[str, Any]:
    """Return the default value of every option that has one."""
    return {key: info["default"] for key, info in CONFIG_SCHEMA.items() if "default" in info}


def get_required_keys() -> set[str]:
    """Return the option names that have no usable default."""
    return {key for key, info in CONFIG_SCHEMA.items() if info.get("required")}


def _to_bool(value: Any, key_info: dict) -> bool:
    if isinstance(value, bool):
        return value
    word = str(value).strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError("use true/false, yes/no, 1/0")


def _to_int(value: Any, key_info: dict) -> int:
    if isinstance(value, bool) or isinstance(value, float):
        raise ValueError(f"not a whole number: {value!r}")
    number = int(value)
    low, high = key_info.get("min"), key_info.get("max")
    if (low is not None and number < low) or (high is not None and number > high):
        raise ValueError(f"must be between {low} and {high}")
    return number


def _to_str(value: Any, key_info: dict) -> str:
    if value is None:
        raise ValueError("must not be empty")
    text = str(value)
    if len(text) < key_info.get("min_length", 0):
        raise ValueError(f"must be at least {key_info['min_length']} characters")
    if "pattern" in key_info and not re.match(key_info["pattern"], text):
        raise ValueError(f"does not match required format, e.g. {key_info.get('example', '')}")
    if "choices" in key_info and text not in key_info["choices"]:
        raise ValueError(f"must be one of: {', '.join(key_info['choices'])}")
    return text


_CONVERTERS = {"bool": _to_bool, "int": _to_int, "str": _to_str}


def validate_value(key: str, value: Any, key_info: dict) -> tuple[bool, str, Any]:
    """Validate a configuration value against its schema definition.

    Args:
        key: Configuration key
        value: Value to validate
        key_info: Schema information for the key

    Returns:
        Tuple of (is_valid, error_message, converted_value)
    """
    value_type = key_info.get("type", "str")
    try:
        return True, "", _CONVERTERS[value_type](value, key_info)
    except (ValueError, TypeError) as e:
        return False, f"Invalid {value_type} value for {key}: {e}", None
