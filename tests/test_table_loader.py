from __future__ import annotations

from pathlib import Path

import pytest

from nmprops.codecs.composite import ListCodec
from nmprops.core.errors import TableValidationError
from nmprops.core.table_loader import load_tables


@pytest.fixture(autouse=True)
def _isolated_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))


def _write_table(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_load_packaged_tables() -> None:
    loaded = load_tables()
    assert {"connection", "ipv4", "ipv6", "vlan", "team", "dcb", "bond"} <= set(loaded.settings)
    assert loaded.enums["secret-flags"].is_flags
    assert loaded.warnings == ()

    ipv4 = loaded.settings["ipv4"]
    assert ipv4.properties["addresses"].is_multi_valued
    assert isinstance(ipv4.properties["dns"].codec, ListCodec)
    assert ipv4.properties["may-fail"].default is True


def test_integer_defaults_are_taken_as_numbers() -> None:
    loaded = load_tables()
    assert loaded.settings["wpan"].properties["short-address"].default == 0xFFFF
    assert loaded.settings["infiniband"].properties["p-key"].default == -1
    assert loaded.settings["802-3-ethernet"].properties["wake-on-lan"].default == 0x1


def test_user_table_overrides_packaged(tmp_path: Path) -> None:
    _write_table(
        tmp_path / "cfg" / "nmprops" / "settings" / "vlan.yaml",
        """
name: vlan
title: User VLAN
properties:
  id:
    type: int
    min: 0
    max: 10
""",
    )

    loaded = load_tables()
    assert loaded.settings["vlan"].title == "User VLAN"
    assert list(loaded.settings["vlan"].properties) == ["id"]
    assert any("overrides" in warning for warning in loaded.warnings)


def test_user_table_from_data_dir_adds_setting(tmp_path: Path) -> None:
    _write_table(
        tmp_path / "data" / "nmprops" / "settings" / "loopback.yml",
        """
name: loopback
title: Loopback
properties:
  mtu:
    type: int
    default: 65536
    min: 0
    max: 4294967295
""",
    )

    loaded = load_tables()
    assert loaded.settings["loopback"].properties["mtu"].default == 65536
    assert loaded.warnings == ()


def test_yes_no_stay_strings(tmp_path: Path) -> None:
    _write_table(
        tmp_path / "cfg" / "nmprops" / "settings" / "extra.yaml",
        """
name: extra
title: Extra
properties:
  enabled:
    type: bool
    default: yes
  answer:
    type: string
    values: [yes, no, on, off]
""",
    )

    loaded = load_tables()
    assert loaded.settings["extra"].properties["enabled"].default is True
    assert loaded.settings["extra"].properties["answer"].values == ("yes", "no", "on", "off")


def test_duplicate_yaml_keys_rejected(tmp_path: Path) -> None:
    _write_table(
        tmp_path / "cfg" / "nmprops" / "settings" / "dup.yaml",
        """
name: dup
title: Duplicate
properties:
  a:
    type: bool
  a:
    type: int
""",
    )

    with pytest.raises(TableValidationError, match="Duplicate key 'a'"):
        load_tables()


def test_schema_violation_rejected(tmp_path: Path) -> None:
    _write_table(
        tmp_path / "cfg" / "nmprops" / "settings" / "bad.yaml",
        """
name: bad
title: Bad
properties:
  a:
    type: float
""",
    )

    with pytest.raises(TableValidationError, match="Schema validation failed"):
        load_tables()


def test_unknown_hook_rejected(tmp_path: Path) -> None:
    _write_table(
        tmp_path / "cfg" / "nmprops" / "settings" / "hook.yaml",
        """
name: hook
title: Hook
properties:
  servers:
    type: string-list
    item: carrier-pigeon
""",
    )

    with pytest.raises(TableValidationError, match="unknown item parser 'carrier-pigeon'"):
        load_tables()


def test_unknown_enum_type_rejected(tmp_path: Path) -> None:
    _write_table(
        tmp_path / "cfg" / "nmprops" / "settings" / "enum.yaml",
        """
name: enum
title: Enum
properties:
  flags:
    type: enum
    enum: colours
""",
    )

    with pytest.raises(TableValidationError, match="unknown enum type 'colours'"):
        load_tables()


def test_invalid_default_rejected(tmp_path: Path) -> None:
    _write_table(
        tmp_path / "cfg" / "nmprops" / "settings" / "range.yaml",
        """
name: range
title: Range
properties:
  prio:
    type: int
    min: 0
    max: 7
    default: 9
""",
    )

    with pytest.raises(TableValidationError, match="out of range"):
        load_tables()


def test_enabled_by_must_name_flags_property(tmp_path: Path) -> None:
    _write_table(
        tmp_path / "cfg" / "nmprops" / "settings" / "gated.yaml",
        """
name: gated
title: Gated
properties:
  switch:
    type: bool
  value:
    type: int
    enabled_by: switch
""",
    )

    with pytest.raises(TableValidationError, match="enabled_by 'switch'"):
        load_tables()


def test_unknown_setter_rejected(tmp_path: Path) -> None:
    _write_table(
        tmp_path / "cfg" / "nmprops" / "settings" / "keys.yaml",
        """
name: keys
title: Keys
properties:
  key:
    type: string
    setter: rotate-keys
""",
    )

    with pytest.raises(TableValidationError, match="unknown setter 'rotate-keys'"):
        load_tables()


def test_setter_needs_its_sibling_properties(tmp_path: Path) -> None:
    _write_table(
        tmp_path / "cfg" / "nmprops" / "settings" / "wep.yaml",
        """
name: wep
title: WEP
properties:
  wep-key0:
    type: string
    setter: wep-key
  wep-tx-keyidx:
    type: int
""",
    )

    with pytest.raises(TableValidationError, match="needs property 'wep-key-type'"):
        load_tables()


def test_setting_without_properties_loads(tmp_path: Path) -> None:
    _write_table(
        tmp_path / "cfg" / "nmprops" / "settings" / "empty.yaml",
        """
name: empty
title: Empty
properties: {}
""",
    )

    assert load_tables().settings["empty"].properties == {}
