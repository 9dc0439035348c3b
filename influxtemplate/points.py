"""Point construction and the model converter protocol.

Points use the dict layout the ``influxdb`` client writes natively::

    {"measurement": "samples", "tags": {...}, "fields": {...}, "time": 1000}
"""

from typing import Any, Mapping, Optional, Protocol, TypeVar

Point = dict[str, Any]

T_contra = TypeVar("T_contra", contravariant=True)


class Converter(Protocol[T_contra]):
    """Maps one model instance to one insertable point."""

    def __call__(self, model: T_contra) -> Point: ...


def make_point(
    measurement: str,
    fields: Mapping[str, Any],
    tags: Optional[Mapping[str, str]] = None,
    time: Optional[Any] = None,
) -> Point:
    """Build a point dict in InfluxDB client format.

    Args:
        measurement: Measurement name.
        fields: Field values; at least one is required.
        tags: Optional tag set, omitted from the point when empty.
        time: Optional timestamp (epoch int, datetime or RFC3339 string).
            The server assigns the write time when omitted.

    Returns:
        Point: The point dict.

    Raises:
        ValueError: If measurement or fields are empty.
    """
    if not measurement:
        raise ValueError("Point measurement must not be empty")
    if not fields:
        raise ValueError(f"Point '{measurement}' must have at least one field")

    point: Point = {"measurement": measurement, "fields": dict(fields)}
    if tags:
        point["tags"] = dict(tags)
    if time is not None:
        point["time"] = time
    return point


def identity(model: Point) -> Point:
    """Converter for callers whose models already are point dicts."""
    return model
