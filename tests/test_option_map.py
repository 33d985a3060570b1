from __future__ import annotations

import pytest

from nmprops.codecs import hooks
from nmprops.codecs.composite import OptionMapCodec
from nmprops.core.errors import InvalidSyntaxError, UnknownOptionError
from nmprops.core.model import RenderMode
from nmprops.parsers.option_map import parse_option_map


def _bond_codec() -> OptionMapCodec:
    return OptionMapCodec(
        valid_keys=hooks.BOND_OPTIONS,
        value_validator=hooks.VALUE_VALIDATORS["bond-option"],
        value_renderer=hooks.VALUE_RENDERERS["bond-option"],
    )


def test_pairs_are_stripped() -> None:
    assert parse_option_map(" a = 1 , b=2") == {"a": "1", "b": "2"}


def test_missing_equals() -> None:
    with pytest.raises(InvalidSyntaxError, match="'b' is not valid; use <option>=<value>"):
        parse_option_map("a=1,b")


def test_bond_mode_number_stored_as_name() -> None:
    codec = _bond_codec()
    options = codec.parse("mode=1,miimon=100")
    assert options == {"mode": "active-backup", "miimon": "100"}
    assert codec.render(options, RenderMode.PARSABLE) == "mode=active-backup,miimon=100"


def test_bond_key_prefix_and_unknown_key() -> None:
    codec = _bond_codec()
    assert codec.parse("miim=100") == {"miimon": "100"}
    with pytest.raises(UnknownOptionError, match="not among"):
        codec.parse("nonsense=1")


def test_bond_arp_ip_target_spaces() -> None:
    codec = _bond_codec()
    options = codec.parse("arp_ip_target=10.0.0.1 10.0.0.2")
    assert options == {"arp_ip_target": "10.0.0.1,10.0.0.2"}
    assert codec.render(options, RenderMode.PARSABLE) == "arp_ip_target=10.0.0.1 10.0.0.2"


def test_bad_bond_mode() -> None:
    with pytest.raises(UnknownOptionError, match="not a valid bond mode"):
        _bond_codec().parse("mode=7")


def test_add_merges_and_remove_by_name() -> None:
    codec = _bond_codec()
    options = codec.parse("mode=balance-rr")
    codec.add(options, "miimon=100,updelay=5")
    assert list(options) == ["mode", "miimon", "updelay"]
    codec.remove(options, "miimon")
    codec.remove(options, "downdelay")
    assert options == {"mode": "balance-rr", "updelay": "5"}


def test_add_keeps_pairs_before_the_failure() -> None:
    codec = _bond_codec()
    options: dict[str, str] = {}
    with pytest.raises(InvalidSyntaxError):
        codec.add(options, "miimon=100,updelay")
    assert options == {"miimon": "100"}


def test_vpn_style_rendering_and_non_empty_values() -> None:
    codec = OptionMapCodec(
        value_validator=hooks.VALUE_VALIDATORS["non-empty"],
        separator=" = ",
        joiner=", ",
    )
    data = codec.parse("gateway = vpn.example.com, user=alice")
    text = codec.render(data, RenderMode.PARSABLE)
    assert text == "gateway = vpn.example.com, user = alice"
    assert codec.parse(text) == data
    with pytest.raises(InvalidSyntaxError, match="'gateway' cannot be empty"):
        codec.parse("gateway=")


def test_s390_value_length() -> None:
    codec = OptionMapCodec(
        valid_keys=hooks.S390_OPTIONS,
        value_validator=hooks.VALUE_VALIDATORS["s390-option"],
    )
    assert codec.parse("portno=0") == {"portno": "0"}
    with pytest.raises(InvalidSyntaxError, match="1 - 199 characters"):
        codec.parse("portno=" + "x" * 200)


@pytest.mark.parametrize("text", ["=foo", "a=1, = 2"])
def test_empty_key_rejected(text: str) -> None:
    codec = OptionMapCodec(value_validator=hooks.VALUE_VALIDATORS["non-empty"], separator=" = ", joiner=", ")
    with pytest.raises(InvalidSyntaxError, match="the option name is empty"):
        codec.parse(text)
    items: dict[str, str] = {}
    with pytest.raises(InvalidSyntaxError):
        codec.add(items, text)
