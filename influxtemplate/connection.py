"""Connection factory for InfluxDB 1.x.

Builds one ``InfluxDBClient`` from connection properties on first use and
hands out that same client afterwards. Creation is not synchronized; build
the first connection during single-threaded startup.
"""

import logging
from typing import Optional

from influxdb import InfluxDBClient

from .exceptions import ConfigurationMissing
from .properties import InfluxDBProperties


class InfluxDBConnectionFactory:
    """Lazily creates and caches a single InfluxDB client."""

    def __init__(self, properties: Optional[InfluxDBProperties] = None) -> None:
        """Initialize the factory, connecting at once when properties are given.

        Args:
            properties: Connection properties. May be set later through the
                ``properties`` attribute, before the first ``get_connection()``.
        """
        self._connection: Optional[InfluxDBClient] = None
        # Clients replaced by a properties change; templates may still use them
        self._retired: list[InfluxDBClient] = []
        self._properties = properties
        if properties is not None:
            self.get_connection()

    @property
    def properties(self) -> Optional[InfluxDBProperties]:
        return self._properties

    @properties.setter
    def properties(self, properties: InfluxDBProperties) -> None:
        # The cached client always matches the current properties
        if self._connection is not None and properties != self._properties:
            logging.warning(
                "InfluxDB properties replaced after connection was created; "
                "the cached connection is retired until close()"
            )
            self._retired.append(self._connection)
            self._connection = None
        self._properties = properties

    def get_properties(self) -> Optional[InfluxDBProperties]:
        return self.properties

    def set_properties(self, properties: InfluxDBProperties) -> None:
        self.properties = properties

    def get_connection(self) -> InfluxDBClient:
        """Return the cached client, creating it on the first call.

        Returns:
            InfluxDBClient: The shared client.

        Raises:
            ConfigurationMissing: If no properties have been supplied.
        """
        if self._connection is None:
            props = self._properties
            if props is None:
                raise ConfigurationMissing("InfluxDB properties must be specified")

            # requests has no write timeout; the read side covers waiting on writes
            timeout = (props.connect_timeout, max(props.read_timeout, props.write_timeout))
            self._connection = InfluxDBClient(
                host=props.host,
                port=props.port,
                username=props.username,
                password=props.password,
                ssl=props.ssl,
                verify_ssl=props.ssl,
                path=props.path,
                timeout=timeout,
                retries=1,
                gzip=props.gzip,
            )
            logging.debug(f"Created InfluxDB connection: {props.url}")
        return self._connection

    def validate(self) -> None:
        """Check that properties were supplied.

        Raises:
            ConfigurationMissing: If no properties have been supplied.
        """
        if self._properties is None:
            raise ConfigurationMissing("InfluxDB properties must be specified")

    def close(self) -> None:
        """Close the cached client and any replaced ones; the next call reconnects."""
        for client in self._retired:
            client.close()
        self._retired.clear()
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logging.debug("InfluxDB connection closed")
