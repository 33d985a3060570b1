from __future__ import annotations

from pathlib import Path

import pytest

from nmprops.core.errors import UnknownKeyError
from nmprops.core.model import ValidPart
from nmprops.core.registry import PropertyRegistry
from nmprops.core.table_loader import load_composition


def test_ethernet_without_master() -> None:
    parts = load_composition().valid_parts("802-3-ethernet")
    assert parts[:2] == [ValidPart("connection", True), ValidPart("802-3-ethernet", True)]
    assert [part.setting for part in parts[2:]] == [
        "802-1x",
        "dcb",
        "sriov",
        "ethtool",
        "match",
        "ipv4",
        "ipv6",
        "tc",
        "proxy",
    ]
    assert not any(part.mandatory for part in parts[2:])


def test_team_port_slave_has_no_ip_parts() -> None:
    table = load_composition()
    parts = table.valid_parts("802-3-ethernet", "team")
    assert parts[-1] == ValidPart("team-port", True)
    assert "ipv4" not in [part.setting for part in parts]
    assert table.slave_setting("team") == "team-slave"


@pytest.mark.parametrize(
    ("slave_type", "slave_setting", "extra"),
    [
        ("bond", "bond-slave", []),
        ("bridge", "bridge-slave", [ValidPart("bridge-port", True)]),
        ("ovs-bridge", "ovs-slave", [ValidPart("ovs-port", False)]),
        ("ovs-port", "ovs-slave", [ValidPart("ovs-interface", False)]),
    ],
)
def test_slave_types(slave_type: str, slave_setting: str, extra: list[ValidPart]) -> None:
    table = load_composition()
    assert table.slave_setting(slave_type) == slave_setting
    assert table.valid_parts("vlan", slave_type) == [
        ValidPart("connection", True),
        ValidPart("vlan", True),
        ValidPart("802-3-ethernet", False),
        ValidPart("ethtool", False),
        *extra,
    ]


def test_pppoe_requires_ethernet() -> None:
    parts = load_composition().valid_parts("pppoe", "bond")
    assert ValidPart("802-3-ethernet", True) in parts


def test_unknown_types() -> None:
    table = load_composition()
    with pytest.raises(UnknownKeyError, match="Unknown connection type 'token-ring'"):
        table.valid_parts("token-ring")
    with pytest.raises(UnknownKeyError, match="Unknown slave type 'vrf'"):
        table.valid_parts("802-3-ethernet", "vrf")
    with pytest.raises(UnknownKeyError):
        table.slave_setting("vrf")


def test_every_part_resolves_in_registry(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    registry = PropertyRegistry.load()
    table = load_composition()

    named = {part.setting for parts in table.connection_types.values() for part in parts}
    named.update(part.setting for part in table.no_slave_parts)
    named.update(part.setting for slave in table.slave_types.values() for part in slave.parts)

    for setting in sorted(named):
        assert registry.setting(setting).name == setting
    assert set(table.connection_types) <= {info.name for info in registry.settings()}
