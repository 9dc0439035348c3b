"""Connection properties for an InfluxDB 1.x server."""

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional
from urllib.parse import urlsplit

from .config_schema import (
    canonical_key,
    get_defaults,
    get_key_info,
    get_required_keys,
    validate_value,
)


@dataclass(frozen=True)
class InfluxDBProperties:
    """Immutable connection settings, supplied once at startup.

    Timeouts are in seconds. ``time_precision`` is the unit of integer point
    timestamps on write; the server assumes nanoseconds when it is None.
    """

    database: str
    url: str = "http://localhost:8086"
    username: str = ""
    password: str = ""
    connect_timeout: int = 10
    write_timeout: int = 10
    read_timeout: int = 30
    gzip: bool = False
    retention_policy: str = "autogen"
    time_precision: Optional[str] = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "InfluxDBProperties":
        """Build properties from a mapping of option names to raw values.

        Args:
            mapping: Options keyed by camelCase (``retentionPolicy``) or
                snake_case (``retention_policy``) names. String values are
                converted to the option's type.

        Returns:
            InfluxDBProperties: Validated properties with defaults filled in.

        Raises:
            ValueError: If an option is unknown, given twice under both spellings,
                invalid, or a required option is absent.
        """
        values = get_defaults()
        seen: dict[str, str] = {}
        for raw_key, raw_value in mapping.items():
            key = canonical_key(raw_key)
            key_info = get_key_info(key)
            if not key_info:
                raise ValueError(f"Unknown InfluxDB option: {raw_key}")
            if key in seen:
                raise ValueError(
                    f"InfluxDB option given twice: '{seen[key]}' and '{raw_key}'"
                )
            seen[key] = raw_key
            if raw_value is None and "default" in key_info:
                continue
            ok, error, converted = validate_value(key, raw_value, key_info)
            if not ok:
                raise ValueError(f"Invalid value for InfluxDB option '{raw_key}': {error}")
            values[key] = converted

        missing = sorted(get_required_keys() - values.keys())
        if missing:
            raise ValueError(f"Missing required InfluxDB option(s): {', '.join(missing)}")

        return cls(**values)

    def to_dict(self, mask_sensitive: bool = True) -> dict[str, Any]:
        """Return the properties as a plain dict, masking the password by default."""
        result = {f.name: getattr(self, f.name) for f in fields(self)}
        if mask_sensitive and result["password"]:
            result["password"] = "***"
        return result

    @property
    def host(self) -> str:
        return urlsplit(self.url).hostname or "localhost"

    @property
    def port(self) -> int:
        parsed = urlsplit(self.url)
        if parsed.port:
            return parsed.port
        return 443 if parsed.scheme == "https" else 8086

    @property
    def ssl(self) -> bool:
        return urlsplit(self.url).scheme == "https"

    @property
    def path(self) -> str:
        return urlsplit(self.url).path.strip("/")
