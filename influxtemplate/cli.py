"""Command line access to an InfluxDB server through the template.

Examples:
    influxtemplate --config config.yaml ping
    influxtemplate exists metrics
    influxtemplate query "SELECT * FROM samples LIMIT 5" --epoch ms
"""

import argparse
import json
import logging
import sys
from typing import Optional

import requests
from influxdb.exceptions import InfluxDBClientError, InfluxDBServerError
from influxdb.resultset import ResultSet

from .config import load_properties
from .connection import InfluxDBConnectionFactory
from .exceptions import InfluxTemplateError
from .logging_config import configure_logging
from .points import Point, identity
from .template import EPOCH_UNITS, InfluxDBTemplate

EXIT_OK = 0
EXIT_DELEGATED_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_NOT_FOUND = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="influxtemplate", description="Inspect and manage an InfluxDB 1.x server"
    )
    parser.add_argument(
        "--config", default=None, help="Path to YAML config (default: ./config.yaml)"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("ping", help="Check server health")
    sub.add_parser("version", help="Print server version")
    sub.add_parser("databases", help="List databases")
    for name, text in (
        ("exists", "Exit 0 if the database exists, 3 otherwise"),
        ("create", "Create a database"),
        ("drop", "Drop a database"),
    ):
        cmd = sub.add_parser(name, help=text)
        cmd.add_argument("name", help="Database name")

    query = sub.add_parser("query", help="Run an InfluxQL query and print points as JSON lines")
    query.add_argument("query", help="InfluxQL statement")
    query.add_argument("--epoch", choices=EPOCH_UNITS, default=None, help="Timestamp unit")
    query.add_argument(
        "--chunk-size", type=int, default=0, help="Stream results in chunks of N points"
    )
    query.add_argument("--database", default=None, help="Database (default: configured database)")
    return parser


def _print_points(result: ResultSet) -> None:
    for point in result.get_points():
        print(json.dumps(point, default=str))


def run_command(args: argparse.Namespace, template: InfluxDBTemplate[Point]) -> int:
    """Execute one parsed command against ``template`` and return the exit code."""
    if args.command == "ping":
        pong = template.ping()
        print(f"OK version={pong.version} response_time={pong.response_time:.1f}ms")
    elif args.command == "version":
        print(template.version())
    elif args.command == "databases":
        for name in template.list_databases():
            print(name)
    elif args.command == "exists":
        exists = template.database_exists(args.name)
        print("yes" if exists else "no")
        return EXIT_OK if exists else EXIT_NOT_FOUND
    elif args.command == "create":
        template.create_database(args.name)
        logging.info(f"Created database {args.name}")
    elif args.command == "drop":
        template.delete_database(args.name)
        logging.info(f"Dropped database {args.name}")
    elif args.command == "query":
        if args.chunk_size > 0:
            template.query_chunked(
                args.query, args.chunk_size, _print_points, epoch=args.epoch, database=args.database
            )
        else:
            _print_points(template.query(args.query, epoch=args.epoch, database=args.database))
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the ``influxtemplate`` console script."""
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.debug else logging.INFO)

    try:
        properties = load_properties(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    factory = InfluxDBConnectionFactory(properties)
    try:
        template: InfluxDBTemplate[Point] = InfluxDBTemplate(factory, identity)
        template.validate()
        return run_command(args, template)
    except InfluxTemplateError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except (InfluxDBClientError, InfluxDBServerError, requests.exceptions.RequestException) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DELEGATED_FAILURE
    finally:
        factory.close()


if __name__ == "__main__":
    sys.exit(main())
