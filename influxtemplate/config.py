"""Configuration loader for InfluxDB connection properties.

Reads the ``influxdb`` mapping from a YAML file and merges environment
overrides on top, loading a ``.env`` file first when one is present.
"""

import logging
import os
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from .properties import InfluxDBProperties

# Environment variable -> option name. Credentials belong here, not in YAML.
ENV_OVERRIDES = {
    "INFLUXDB_URL": "url",
    "INFLUXDB_USERNAME": "username",
    "INFLUXDB_PASSWORD": "password",
    "INFLUXDB_DATABASE": "database",
    "INFLUXDB_RETENTION_POLICY": "retention_policy",
    "INFLUXDB_GZIP": "gzip",
    "INFLUXDB_TIME_PRECISION": "time_precision",
}


def _find_config_file() -> Optional[str]:
    """Return path to `config.yaml` in current directory if present, else None."""
    if os.path.isfile("config.yaml"):
        return "config.yaml"
    return None


def _find_env_file() -> Optional[str]:
    """Return path to `.env` in current or parent directory if present, else None."""
    if os.path.isfile(".env"):
        return ".env"
    if os.path.isfile("../.env"):
        return "../.env"
    return None


def _load_env_file() -> None:
    """Load environment variables from a discovered .env file (best-effort)."""
    env_file = _find_env_file()
    if env_file:
        try:
            load_dotenv(env_file)
            logging.debug(f"Loaded environment from {env_file}")
        except OSError as e:
            logging.warning(f"Failed to load {env_file}: {e}")


def _read_section(config_path: str, section: str) -> dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}")

    if not isinstance(config, dict):
        raise ValueError(f"{config_path} must contain a YAML dictionary")
    if section not in config or not isinstance(config[section], dict):
        raise ValueError(
            f"{config_path} must contain an '{section}' mapping with connection settings"
        )
    return dict(config[section])


def apply_env_overrides(options: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``options`` with INFLUXDB_* environment variables applied."""
    merged = dict(options)
    for env_name, key in ENV_OVERRIDES.items():
        if os.environ.get(env_name):
            # Drop a camelCase spelling of the same option so the override wins
            for existing in [k for k in merged if k != key and k.lower() == key.replace("_", "")]:
                del merged[existing]
            merged[key] = os.environ[env_name]
    return merged


def load_properties(
    config_path: Optional[str] = None, section: str = "influxdb"
) -> InfluxDBProperties:
    """Load connection properties from a YAML file, merging environment overrides.

    Args:
        config_path: Optional path to the YAML file. Defaults to ./config.yaml.
        section: Top-level YAML key holding the connection options.

    Returns:
        InfluxDBProperties: Validated connection properties.

    Raises:
        FileNotFoundError: If the configuration file is not found.
        ValueError: If the YAML is invalid or an option fails validation.
    """
    _load_env_file()

    if config_path is None:
        config_path = _find_config_file()

    if not config_path or not os.path.isfile(config_path):
        raise FileNotFoundError(
            f"InfluxDB configuration file not found: {config_path or 'config.yaml'}"
        )

    options = apply_env_overrides(_read_section(config_path, section))
    properties = InfluxDBProperties.from_mapping(options)
    logging.info(f"Loaded InfluxDB configuration from {config_path}")
    return properties
