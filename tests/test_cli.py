from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from nmprops import cli
from nmprops.api import Client
from nmprops.core.registry import PropertyRegistry

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_client(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr(cli, "Client", lambda: Client(registry=PropertyRegistry.load()))


def test_settings_command() -> None:
    result = runner.invoke(cli.app, ["settings", "ipv4"])
    assert result.exit_code == 0
    assert result.stdout.splitlines()[0] == "ipv4: IPv4 protocol"
    assert "  addresses (alias ip4, multi)" in result.stdout


def test_settings_command_marks_secrets() -> None:
    result = runner.invoke(cli.app, ["settings", "802-11-wireless-security"])
    assert result.exit_code == 0
    assert "  psk (secret)" in result.stdout


def test_normalize_command() -> None:
    result = runner.invoke(cli.app, ["normalize", "ipv4", "ip4", "192.168.1.5/24,10.0.0.1"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "192.168.1.5/24, 10.0.0.1/32"


def test_normalize_command_pretty() -> None:
    result = runner.invoke(cli.app, ["normalize", "802-11-wireless-security", "psk-flags", "5", "--pretty"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "5 (agent-owned, not required)"


def test_normalize_command_hides_secrets() -> None:
    result = runner.invoke(cli.app, ["normalize", "802-11-wireless-security", "psk", "hunter22"])
    assert result.stdout.strip() == "<hidden>"

    result = runner.invoke(
        cli.app, ["normalize", "802-11-wireless-security", "psk", "hunter22", "--show-secrets"]
    )
    assert result.stdout.strip() == "hunter22"


def test_normalize_command_rejects_value() -> None:
    result = runner.invoke(cli.app, ["normalize", "vlan", "id", "5000"])
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "out of range" in result.output


def test_check_command() -> None:
    result = runner.invoke(cli.app, ["check", "dcb", "priority-group-bandwidth", "13,13,13,13,12,12,12,12"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "ok"

    result = runner.invoke(cli.app, ["check", "dcb", "priority-group-bandwidth", "10,10,10,10,10,10,10,10"])
    assert result.exit_code == 1
    assert "sum-invariant-violation:" in result.output


def test_values_and_complete_commands() -> None:
    result = runner.invoke(cli.app, ["values", "ipv4", "method"])
    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["auto", "link-local", "manual", "shared", "disabled"]

    result = runner.invoke(cli.app, ["complete", "ipv4", "method", "l"])
    assert result.stdout.splitlines() == ["link-local"]


def test_describe_command() -> None:
    result = runner.invoke(cli.app, ["describe", "ipv4", "method"])
    assert result.exit_code == 0
    assert "=== [method] ===" in result.stdout
    assert "Allowed values: auto, link-local, manual, shared, disabled" in result.stdout


def test_parts_command() -> None:
    result = runner.invoke(cli.app, ["parts", "802-3-ethernet", "--slave-type", "team"])
    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert lines[0] == "Slave setting: team-slave"
    assert lines[1] == "connection (mandatory)"
    assert lines[-1] == "team-port (mandatory)"


def test_unknown_setting_is_reported() -> None:
    result = runner.invoke(cli.app, ["describe", "ipv5", "method"])
    assert result.exit_code == 1
    assert "Error: Unknown setting 'ipv5'" in result.output


def test_load_warnings_are_echoed(monkeypatch: pytest.MonkeyPatch) -> None:
    class FakeClient:
        load_warnings = ("User setting table 'vlan' overrides packaged table",)

        def list_settings(self):
            return []

    monkeypatch.setattr(cli, "Client", FakeClient)
    result = runner.invoke(cli.app, ["settings"])
    assert result.exit_code == 0
    assert "Warning: User setting table 'vlan' overrides packaged table" in result.output
