import json

import pytest
import yaml
from click.testing import CliRunner

from conftest import FakeTransport, response
from ssrp_discovery import cli
from ssrp_discovery.client import SSRPClient
from ssrp_discovery.errors import TransportReceiveError, TransportSendError


@pytest.fixture
def transports():
    return []


@pytest.fixture
def runner(monkeypatch, clock, transports):
    def fake_client(**kwargs):
        return SSRPClient(
            transport_factory=lambda config: transports.pop(0),
            clock=clock,
            **kwargs,
        )

    monkeypatch.setattr(cli, "SSRPClient", fake_client)
    monkeypatch.setattr(cli.time, "sleep", lambda seconds: None)
    return CliRunner()


def test_json_output(runner, clock, transports, express, clustered):
    transports.append(FakeTransport(clock, [response(express, clustered)]))
    result = runner.invoke(cli.main, ["--format", "json"])
    assert result.exit_code == 0
    output = json.loads(result.output)
    assert output["success"] is True
    assert output["command"] == "scan"
    assert [i["instance_name"] for i in output["data"]["instances"]] == ["SQLEXPRESS", "PROD"]


def test_yaml_output(runner, clock, transports, express):
    transports.append(FakeTransport(clock, [response(express)]))
    result = runner.invoke(cli.main, ["--format", "yaml"])
    assert result.exit_code == 0
    report = yaml.safe_load(result.output)
    assert report["instances"][0]["server_name"] == "HOST1"


def test_table_output(runner, clock, transports, express):
    transports.append(FakeTransport(clock, [response(express)]))
    result = runner.invoke(cli.main, [])
    assert result.exit_code == 0
    assert "SQLEXPRESS" in result.output
    assert "1 instance(s) found" in result.output


def test_no_instances_is_success(runner, clock, transports):
    transports.append(FakeTransport(clock))
    result = runner.invoke(cli.main, ["--format", "json"])
    assert result.exit_code == 0
    assert json.loads(result.output)["data"]["instances"] == []


def test_multiple_scans(runner, clock, transports, express, clustered):
    transports.append(FakeTransport(clock, [response(express)]))
    transports.append(FakeTransport(clock, [response(clustered)]))
    result = runner.invoke(cli.main, ["--format", "json", "--scans", "2"])
    assert result.exit_code == 0
    lines = [json.loads(line) for line in result.output.splitlines()]
    assert [line["data"]["instances"][0]["server_name"] for line in lines] == ["HOST1", "CLUSTER1"]
    assert transports == []


def test_options_reach_client(runner, clock, transports):
    transport = FakeTransport(clock)
    transports.append(transport)
    result = runner.invoke(
        cli.main,
        ["--wait-timeout", "2000", "--receive-timeout", "500", "--format", "json"],
    )
    assert result.exit_code == 0
    assert transport.receive_timeouts == [pytest.approx(0.5)] * 4


@pytest.mark.parametrize(
    "error",
    [TransportSendError("no route"), TransportReceiveError("reset")],
)
def test_transport_error_exit_code(runner, clock, transports, error):
    if isinstance(error, TransportSendError):
        transports.append(FakeTransport(clock, send_error=error))
    else:
        transports.append(FakeTransport(clock, [error]))
    result = runner.invoke(cli.main, ["--format", "json"])
    assert result.exit_code == 1
    output = json.loads(result.output)
    assert output["success"] is False
    assert output["message"].startswith("Scan failed")


def test_save_report(runner, clock, transports, express, tmp_path):
    transports.append(FakeTransport(clock, [response(express)]))
    path = tmp_path / "report.json"
    result = runner.invoke(cli.main, ["--save-report", str(path)])
    assert result.exit_code == 0
    report = json.loads(path.read_text(encoding="utf-8"))
    assert report["summary"]["instances"] == 1


def test_negative_timeout_rejected(runner):
    result = runner.invoke(cli.main, ["--wait-timeout", "-5"])
    assert result.exit_code == 2


def test_zero_receive_timeout_rejected(runner):
    result = runner.invoke(cli.main, ["--receive-timeout", "0"])
    assert result.exit_code == 2
    assert "--receive-timeout" in result.output
