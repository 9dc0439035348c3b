"""InfluxDB template.

Wires an InfluxDB 1.x client from externalized connection properties, caches
the connection, ensures the target database exists, and exposes model-typed
read and write operations.
"""

from .config import load_properties
from .connection import InfluxDBConnectionFactory
from .exceptions import ConfigurationMissing, IncompleteConfiguration, InfluxTemplateError
from .logging_config import configure_logging
from .points import Converter, Point, make_point
from .properties import InfluxDBProperties
from .template import InfluxDBTemplate, Pong, create_template

__all__ = [
    "configure_logging",
    "load_properties",
    "InfluxDBProperties",
    "InfluxDBConnectionFactory",
    "InfluxDBTemplate",
    "create_template",
    "Converter",
    "Point",
    "Pong",
    "make_point",
    "InfluxTemplateError",
    "ConfigurationMissing",
    "IncompleteConfiguration",
]
