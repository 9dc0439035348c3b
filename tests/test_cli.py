"""Unit tests for the influxtemplate command line."""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests
from influxdb.exceptions import InfluxDBClientError
from influxdb.resultset import ResultSet

from influxtemplate import cli


@pytest.fixture
def client(properties, mock_client_cls):
    """Mocked InfluxDB client reached through a patched config load."""
    with (
        patch("influxtemplate.cli.load_properties", return_value=properties),
        patch("influxtemplate.cli.configure_logging"),
    ):
        yield mock_client_cls.return_value


def test_ping(client, capsys) -> None:
    client.ping.return_value = "1.8.10"

    assert cli.main(["ping"]) == cli.EXIT_OK

    out = capsys.readouterr().out
    assert out.startswith("OK version=1.8.10")
    client.create_database.assert_called_once_with("metrics")
    client.close.assert_called_once()


def test_version(client, capsys) -> None:
    client.ping.return_value = "1.8.10"

    assert cli.main(["version"]) == cli.EXIT_OK
    assert capsys.readouterr().out.strip() == "1.8.10"


def test_databases(client, capsys) -> None:
    client.get_list_database.return_value = [{"name": "_internal"}, {"name": "metrics"}]

    assert cli.main(["databases"]) == cli.EXIT_OK
    assert capsys.readouterr().out.split() == ["_internal", "metrics"]


def test_exists(client, capsys) -> None:
    client.get_list_database.return_value = [{"name": "metrics"}]

    assert cli.main(["exists", "metrics"]) == cli.EXIT_OK
    assert cli.main(["exists", "missing"]) == cli.EXIT_NOT_FOUND
    assert capsys.readouterr().out.split() == ["yes", "no"]


def test_create_and_drop(client) -> None:
    assert cli.main(["create", "scratch"]) == cli.EXIT_OK
    assert cli.main(["drop", "scratch"]) == cli.EXIT_OK

    client.create_database.assert_any_call("scratch")
    client.drop_database.assert_called_once_with("scratch")


def test_query_prints_points(client, capsys) -> None:
    client.query.return_value = ResultSet(
        {
            "statement_id": 0,
            "series": [{"name": "samples", "columns": ["time", "value"], "values": [[1000, 3.5]]}],
        }
    )

    assert cli.main(["query", "SELECT * FROM samples", "--epoch", "ms"]) == cli.EXIT_OK

    client.query.assert_called_once_with("SELECT * FROM samples", epoch="ms", database="metrics")
    lines = capsys.readouterr().out.splitlines()
    assert [json.loads(line) for line in lines] == [{"time": 1000, "value": 3.5}]


def test_query_chunked(client, capsys) -> None:
    response = MagicMock()
    response.iter_lines.return_value = [
        json.dumps(
            {
                "results": [
                    {
                        "statement_id": 0,
                        "series": [{"name": "s", "columns": ["time", "v"], "values": [[1, 2]]}],
                    }
                ]
            }
        ).encode()
    ]
    client.request.return_value = response

    assert cli.main(["query", "SELECT * FROM s", "--chunk-size", "100"]) == cli.EXIT_OK

    assert client.request.call_args.kwargs["params"]["chunk_size"] == 100
    assert json.loads(capsys.readouterr().out) == {"time": 1, "v": 2}


def test_server_error_exit_code(client, capsys) -> None:
    client.query.side_effect = InfluxDBClientError("error parsing query", 400)

    assert cli.main(["query", "SELEC"]) == cli.EXIT_DELEGATED_FAILURE
    assert "error parsing query" in capsys.readouterr().err
    client.close.assert_called_once()


def test_connection_refused_exit_code(client, capsys) -> None:
    client.create_database.side_effect = requests.exceptions.ConnectionError("refused")

    assert cli.main(["ping"]) == cli.EXIT_DELEGATED_FAILURE
    assert "refused" in capsys.readouterr().err


def test_config_error_exit_code(capsys) -> None:
    with (
        patch("influxtemplate.cli.load_properties", side_effect=FileNotFoundError("no config")),
        patch("influxtemplate.cli.configure_logging"),
    ):
        assert cli.main(["ping"]) == cli.EXIT_CONFIG_ERROR
    assert "no config" in capsys.readouterr().err


def test_command_required() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])
