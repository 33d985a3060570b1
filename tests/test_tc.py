from __future__ import annotations

import pytest

from nmprops.codecs import hooks
from nmprops.codecs.composite import string_list_codec
from nmprops.core.errors import InvalidSyntaxError, OutOfRangeError
from nmprops.core.model import RenderMode
from nmprops.parsers.tc import parse_handle, parse_qdisc, parse_tfilter


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("1:", "1:"),
        ("ffff:", "ffff:"),
        ("1:0", "1:"),
        ("0x10:A", "10:a"),
    ],
)
def test_handles(text: str, expected: str) -> None:
    assert parse_handle(text) == expected


def test_handle_errors() -> None:
    with pytest.raises(InvalidSyntaxError, match="invalid handle: '12'"):
        parse_handle("12")
    with pytest.raises(InvalidSyntaxError):
        parse_handle("x:")
    with pytest.raises(OutOfRangeError):
        parse_handle("10000:")


def test_qdisc_canonical_form() -> None:
    assert parse_qdisc("root   sfq") == "root sfq"
    assert parse_qdisc("handle 1234: parent FF:A fq_codel") == "parent ff:a handle 1234: fq_codel"
    assert parse_qdisc("root handle 1: tbf rate 1000 burst 5000") == "root handle 1: tbf rate 1000 burst 5000"


@pytest.mark.parametrize(
    ("text", "reason"),
    [
        ("sfq", "parent not specified"),
        ("root", "kind is missing"),
        ("root parent 1: sfq", "parent given more than once"),
        ("root handle", "'handle' requires a handle"),
        ("root handle 1: handle 2: sfq", "handle given more than once"),
    ],
)
def test_qdisc_errors_carry_syntax_help(text: str, reason: str) -> None:
    with pytest.raises(InvalidSyntaxError) as excinfo:
        parse_qdisc(text)
    message = str(excinfo.value)
    assert reason in message
    assert message.endswith("The valid syntax is: '[root | parent <handle>] [handle <handle>] <qdisc>'")


def test_tfilter() -> None:
    assert parse_tfilter("parent ffff: matchall action simple sdata Input") == (
        "parent ffff: matchall action simple sdata Input"
    )
    with pytest.raises(InvalidSyntaxError, match="<tfilter>'$"):
        parse_tfilter("matchall")


def test_qdisc_list_splits_on_commas() -> None:
    codec = string_list_codec(item_parser=hooks.ITEM_PARSERS["tc-qdisc"], separators=",", joiner=", ")
    value = codec.parse("root sfq, parent 1: handle 2: fq_codel")
    assert value == ["root sfq", "parent 1: handle 2: fq_codel"]
    assert codec.render(value, RenderMode.PARSABLE) == "root sfq, parent 1: handle 2: fq_codel"

    codec.remove(value, "root sfq")
    assert value == ["parent 1: handle 2: fq_codel"]
