from __future__ import annotations

import pytest

from nmprops.codecs import hooks
from nmprops.codecs.composite import string_list_codec
from nmprops.core.errors import InvalidSyntaxError, UnknownOptionError
from nmprops.core.model import RenderMode
from nmprops.core.multivalue import IndexedMultiValue


def _int_list() -> IndexedMultiValue[int]:
    def parse(token: str) -> int:
        if not token.isdigit():
            raise InvalidSyntaxError(f"'{token}' is not a number")
        return int(token)

    return IndexedMultiValue(parse_item=parse, render_item=lambda item, mode: str(item))


def test_add_appends_in_order() -> None:
    multi = _int_list()
    items = multi.parse("5, 6")
    multi.add(items, "7,8")
    assert items == [5, 6, 7, 8]
    assert multi.render(items, RenderMode.PARSABLE) == "5, 6, 7, 8"


def test_add_keeps_elements_before_failure() -> None:
    multi = _int_list()
    items: list[int] = []
    with pytest.raises(InvalidSyntaxError):
        multi.add(items, "1,x,3")
    assert items == [1]


def test_index_wins_over_equal_value() -> None:
    multi = _int_list()
    items = [5, 0, 1]
    multi.remove(items, "1")
    assert items == [5, 1]


def test_out_of_range_index_falls_back_to_value() -> None:
    multi = _int_list()
    items = [5, 9]
    multi.remove(items, "9")
    assert items == [5]


def test_removing_absent_value_twice_is_a_no_op() -> None:
    multi = _int_list()
    items = [5, 6]
    multi.remove(items, "42")
    multi.remove(items, "42")
    assert items == [5, 6]


def test_removal_parse_failure_is_an_error() -> None:
    with pytest.raises(InvalidSyntaxError):
        _int_list().remove([1], "x")


def test_dedupe_skips_existing_elements() -> None:
    codec = string_list_codec(item_parser=hooks.ITEM_PARSERS["dns-option"], dedupe=True)
    options = codec.parse("rotate ndots:2 rotate")
    codec.add(options, "rotate,debug")
    assert options == ["rotate", "ndots:2", "debug"]
    assert codec.render(options, RenderMode.PARSABLE) == "rotate,ndots:2,debug"


def test_dns_option_validation() -> None:
    codec = string_list_codec(item_parser=hooks.ITEM_PARSERS["dns-option"])
    with pytest.raises(UnknownOptionError):
        codec.parse("bogus")
    with pytest.raises(InvalidSyntaxError, match="requires ':<number>'"):
        codec.parse("ndots")


def test_string_list_with_legal_values_accepts_prefixes() -> None:
    codec = string_list_codec(values=("wpa", "rsn"))
    assert codec.parse("WPA, r") == ["wpa", "rsn"]
    assert codec.values() == ("wpa", "rsn")
    with pytest.raises(UnknownOptionError):
        codec.parse("wep")


def test_escaped_space_splitter_round_trip() -> None:
    codec = string_list_codec(
        splitter=hooks.SPLITTERS["escaped-spaces"],
        item_parser=hooks.ITEM_PARSERS["interface-match"],
        item_renderer=hooks.ITEM_RENDERERS["escaped-spaces"],
        joiner=" ",
    )
    names = codec.parse(r"eth0 my\ nic !wlan*")
    assert names == ["eth0", "my nic", "!wlan*"]
    text = codec.render(names, RenderMode.PARSABLE)
    assert text == r"eth0 my\ nic !wlan*"
    assert codec.parse(text) == names


def test_permissions_and_secondaries() -> None:
    permissions = string_list_codec(item_parser=hooks.ITEM_PARSERS["permission"])
    assert permissions.parse("alice,user:bob") == ["user:alice", "user:bob"]

    secondaries = string_list_codec(item_parser=hooks.ITEM_PARSERS["uuid"])
    with pytest.raises(InvalidSyntaxError, match="is not a valid UUID"):
        secondaries.parse("not-a-uuid")
