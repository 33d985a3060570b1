from __future__ import annotations

import re

import pytest

from nmprops.codecs.hwaddr import INFINIBAND_ALEN, WPAN_ALEN, BytesCodec, MacCodec
from nmprops.core.errors import InvalidSyntaxError
from nmprops.core.model import RenderMode


def test_mac_normalized_to_upper_case_colons() -> None:
    codec = MacCodec()
    assert codec.parse("00:11:22:aa:bb:cc") == "00:11:22:AA:BB:CC"
    assert codec.parse("00-11-22-aa-bb-cc") == "00:11:22:AA:BB:CC"


def test_mac_wrong_length() -> None:
    with pytest.raises(InvalidSyntaxError, match="'00:11:22' is not a valid Ethernet MAC"):
        MacCodec().parse("00:11:22")


def test_wpan_and_infiniband_lengths() -> None:
    wpan = ":".join(["0a"] * WPAN_ALEN)
    assert MacCodec(length=WPAN_ALEN).parse(wpan) == wpan.upper()
    infiniband = ":".join(["80"] * INFINIBAND_ALEN)
    assert MacCodec(length=INFINIBAND_ALEN).parse(infiniband) == infiniband
    with pytest.raises(InvalidSyntaxError):
        MacCodec(length=INFINIBAND_ALEN).parse("00:11:22:33:44:55")


def test_cloned_mac_tokens() -> None:
    codec = MacCodec(cloned=True)
    assert codec.parse("Random") == "random"
    assert codec.values() == ("preserve", "permanent", "random", "stable")
    assert MacCodec().values() is None
    with pytest.raises(InvalidSyntaxError):
        MacCodec().parse("random")


def test_bytes_contiguous_hex() -> None:
    codec = BytesCodec()
    assert codec.parse("0a1B:2c") == bytes.fromhex("0a1b2c")
    assert codec.render(bytes.fromhex("0a1b2c"), RenderMode.PARSABLE) == "0A1B2C"
    with pytest.raises(InvalidSyntaxError, match="'AA b' is not a valid hex-string"):
        codec.parse("AA b")


def test_bytes_legacy_spaced_form() -> None:
    codec = BytesCodec(legacy=True)
    assert codec.parse("AA b 0xCc D") == bytes([0xAA, 0x0B, 0xCC, 0x0D])
    with pytest.raises(InvalidSyntaxError, match="'zz' is not a valid hex character"):
        codec.parse("AA zz")


def test_bytes_default_is_empty() -> None:
    codec = BytesCodec()
    assert codec.is_default(None)
    assert codec.render(None, RenderMode.PARSABLE) == ""


@pytest.mark.parametrize(
    ("length", "kind"),
    [(WPAN_ALEN, "IEEE 802.15.4 (WPAN) MAC"), (INFINIBAND_ALEN, "InfiniBand MAC")],
)
def test_mac_error_names_the_address_kind(length: int, kind: str) -> None:
    with pytest.raises(InvalidSyntaxError, match=rf"'00:11' is not a valid {re.escape(kind)}"):
        MacCodec(length=length).parse("00:11")
