"""Typed access to an InfluxDB database.

``InfluxDBTemplate`` binds a client, its connection properties and a model
converter, and exposes database and data operations in terms of one model
type. Every operation delegates straight to the ``influxdb`` client; client
and server errors propagate unchanged.
"""

import json
import logging
import time
from collections.abc import Collection, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from influxdb import InfluxDBClient
from influxdb.exceptions import InfluxDBClientError
from influxdb.resultset import ResultSet

from .connection import InfluxDBConnectionFactory
from .exceptions import IncompleteConfiguration
from .points import Converter, Point
from .properties import InfluxDBProperties

T = TypeVar("T")

# Batched writes must be acknowledged by every replica
BATCH_CONSISTENCY = "all"

EPOCH_UNITS = ("h", "m", "s", "ms", "u", "ns")


@dataclass(frozen=True)
class Pong:
    """Result of a ping: server version and round-trip time in milliseconds."""

    version: str
    response_time: float


def _is_batch(models: Any) -> bool:
    """Return True when ``models`` is a collection of models rather than one model."""
    if isinstance(models, (str, bytes, Mapping)) or hasattr(models, "_fields"):
        return False
    return isinstance(models, (Collection, Iterator))


class InfluxDBTemplate(Generic[T]):
    """Model-typed facade over one InfluxDB client.

    Constructing a template ensures the configured database exists, so it
    needs a reachable server.
    """

    def __init__(
        self,
        factory: InfluxDBConnectionFactory,
        converter: Optional[Converter[T]] = None,
    ) -> None:
        """Bind the factory's client and properties, then ensure the database exists.

        Args:
            factory: Connection factory with properties set.
            converter: Model to point mapping. Required before any write.

        Raises:
            ConfigurationMissing: If the factory has no properties.
        """
        self._connection: InfluxDBClient = factory.get_connection()
        self._properties: InfluxDBProperties = factory.properties
        self._converter = converter
        self.create_database(self._properties.database)
        logging.debug(f"Ensured InfluxDB database exists: {self._properties.database}")

    @property
    def connection(self) -> InfluxDBClient:
        return self._connection

    @property
    def properties(self) -> InfluxDBProperties:
        return self._properties

    @property
    def converter(self) -> Optional[Converter[T]]:
        return self._converter

    @converter.setter
    def converter(self, converter: Converter[T]) -> None:
        self._converter = converter

    def validate(self) -> None:
        """Check that connection, properties and converter are all bound.

        Raises:
            IncompleteConfiguration: Naming every missing piece.
        """
        missing = [
            name
            for name, value in (
                ("connection", self._connection),
                ("properties", self._properties),
                ("converter", self._converter),
            )
            if value is None
        ]
        if missing:
            raise IncompleteConfiguration(missing)

    # Database lifecycle

    def create_database(self, name: str) -> None:
        self._connection.create_database(name)

    def delete_database(self, name: str) -> None:
        self._connection.drop_database(name)

    def list_databases(self) -> list[str]:
        return [db["name"] for db in self._connection.get_list_database()]

    def database_exists(self, name: str) -> bool:
        """Return True if the server lists a database called ``name``."""
        return name in self.list_databases()

    # Writes

    def _convert(self, model: T) -> Point:
        if self._converter is None:
            raise IncompleteConfiguration(["converter"])
        return self._converter(model)

    def _precision(self, time_precision: Optional[str]) -> Optional[str]:
        return time_precision or self._properties.time_precision

    def write(
        self, models: Union[T, Iterable[T]], time_precision: Optional[str] = None
    ) -> None:
        """Write one model, or a batch when given a list, tuple or other collection.

        Args:
            models: A single model or a collection of models.
            time_precision: Unit of integer point timestamps (n, u, ms, s, m, h).
                Defaults to the configured ``time_precision``.
        """
        if _is_batch(models):
            self.write_all(models, time_precision=time_precision)  # type: ignore[arg-type]
            return

        point = self._convert(models)  # type: ignore[arg-type]
        self._connection.write_points(
            [point],
            time_precision=self._precision(time_precision),
            database=self._properties.database,
            retention_policy=self._properties.retention_policy,
        )

    def write_all(self, models: Iterable[T], time_precision: Optional[str] = None) -> None:
        """Convert every model and write them in a single request.

        The batch is accepted or rejected by the server as a whole.

        Args:
            models: Models to write.
            time_precision: Unit of integer point timestamps; see ``write``.
        """
        if self._converter is None:
            raise IncompleteConfiguration(["converter"])
        points = [self._convert(m) for m in models]
        self._connection.write_points(
            points,
            time_precision=self._precision(time_precision),
            database=self._properties.database,
            retention_policy=self._properties.retention_policy,
            consistency=BATCH_CONSISTENCY,
        )

    # Queries

    def query(
        self, query: str, epoch: Optional[str] = None, database: Optional[str] = None
    ) -> ResultSet:
        """Run a query and return its result set.

        Args:
            query: InfluxQL statement.
            epoch: Time unit for result timestamps, one of h, m, s, ms, u, ns.
                RFC3339 strings are returned when omitted.
            database: Database to query; the configured database by default.

        Returns:
            ResultSet: The query result.
        """
        return self._connection.query(
            query, epoch=epoch, database=database or self._properties.database
        )

    def query_chunked(
        self,
        query: str,
        chunk_size: int,
        callback: Callable[[ResultSet], None],
        epoch: Optional[str] = None,
        database: Optional[str] = None,
    ) -> None:
        """Stream a query result, calling ``callback`` once per chunk.

        Chunks are read from the HTTP response as the server sends them and
        the callback runs on the calling thread.

        Args:
            query: InfluxQL statement.
            chunk_size: Maximum number of points per chunk.
            callback: Receives each chunk as a ResultSet.
            epoch: Time unit for result timestamps.
            database: Database to query; the configured database by default.

        Raises:
            InfluxDBClientError: If the server reports an error in any chunk.
        """
        params: dict[str, Any] = {
            "q": query,
            "db": database or self._properties.database,
            "chunked": "true",
            "chunk_size": chunk_size,
        }
        if epoch is not None:
            params["epoch"] = epoch

        response = self._connection.request(
            url="query",
            method="GET",
            params=params,
            stream=True,
            expected_response_code=200,
        )
        try:
            for line in response.iter_lines():
                if not line:
                    continue
                if isinstance(line, bytes):
                    line = line.decode("utf-8")
                data = json.loads(line)
                if "error" in data:
                    raise InfluxDBClientError(data["error"])
                for result in data.get("results", []):
                    callback(ResultSet(result, raise_errors=True))
        finally:
            response.close()

    # Server status

    def ping(self) -> Pong:
        start = time.perf_counter()
        version = self._connection.ping()
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        return Pong(version=version, response_time=elapsed_ms)

    def version(self) -> str:
        return self._connection.ping()


def create_template(
    properties: InfluxDBProperties, converter: Converter[T]
) -> InfluxDBTemplate[T]:
    """Wire a factory and a template, and run both checkpoints.

    Args:
        properties: Connection properties.
        converter: Model to point mapping.

    Returns:
        InfluxDBTemplate: A template ready for writes.
    """
    factory = InfluxDBConnectionFactory(properties)
    factory.validate()
    template: InfluxDBTemplate[T] = InfluxDBTemplate(factory, converter)
    template.validate()
    return template
