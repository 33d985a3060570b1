"""Hardware address, SSID and byte blob codecs."""

from __future__ import annotations

import re

from nmprops.codecs.base import BaseCodec
from nmprops.core.errors import InvalidSyntaxError
from nmprops.core.model import RenderMode
from nmprops.parsers.tokens import parse_int

ETH_ALEN = 6
WPAN_ALEN = 8
INFINIBAND_ALEN = 20
SSID_MAX_LEN = 32

CLONED_MAC_TOKENS = ("preserve", "permanent", "random", "stable")
_HWADDR_KINDS = {
    ETH_ALEN: "Ethernet MAC",
    WPAN_ALEN: "IEEE 802.15.4 (WPAN) MAC",
    INFINIBAND_ALEN: "InfiniBand MAC",
}

_HEX_DIGITS_RE = re.compile(r"^[0-9a-fA-F]+$")
_HWADDR_BYTE_RE = re.compile(r"^[0-9a-fA-F]{1,2}$")


def parse_hwaddr(text: str, length: int) -> bytes | None:
    """Parse `XX:XX:...` (or `-` separated, or contiguous) into `length` bytes."""
    stripped = text.strip()
    if ":" in stripped or "-" in stripped:
        parts = re.split(r"[:-]", stripped)
        if len(parts) != length or not all(_HWADDR_BYTE_RE.match(part) for part in parts):
            return None
        return bytes(int(part, 16) for part in parts)
    if len(stripped) != 2 * length or not _HEX_DIGITS_RE.match(stripped):
        return None
    return bytes.fromhex(stripped)


def format_hwaddr(raw: bytes) -> str:
    return ":".join(f"{byte:02X}" for byte in raw)


def normalize_mac(text: str, length: int = ETH_ALEN) -> str:
    raw = parse_hwaddr(text, length)
    if raw is None:
        kind = _HWADDR_KINDS.get(length, f"{length}-byte hardware address")
        raise InvalidSyntaxError(f"'{text.strip()}' is not a valid {kind}")
    return format_hwaddr(raw)


class MacCodec(BaseCodec):
    def __init__(self, *, length: int = ETH_ALEN, cloned: bool = False) -> None:
        self.length = length
        self.cloned = cloned

    def parse(self, text: str) -> str:
        stripped = text.strip()
        if self.cloned and stripped.lower() in CLONED_MAC_TOKENS:
            return stripped.lower()
        return normalize_mac(stripped, self.length)

    def values(self) -> tuple[str, ...] | None:
        return CLONED_MAC_TOKENS if self.cloned else None


def hexstr_to_bytes(text: str) -> bytes | None:
    """Contiguous hex with optional `:` byte separators."""
    digits = text.replace(":", "")
    if digits[:2] in ("0x", "0X"):
        digits = digits[2:]
    if not digits or len(digits) % 2 or not _HEX_DIGITS_RE.match(digits):
        return None
    return bytes.fromhex(digits)


class BytesCodec(BaseCodec):
    """Byte blob parsed from contiguous hex, or the legacy `AA b 0xCc D` form when enabled."""

    def __init__(self, *, legacy: bool = False) -> None:
        self.legacy = legacy

    def parse(self, text: str) -> bytes:
        stripped = text.strip()
        raw = hexstr_to_bytes(stripped)
        if raw is not None:
            return raw
        if not self.legacy:
            raise InvalidSyntaxError(f"'{stripped}' is not a valid hex-string")

        values = bytearray()
        for token in stripped.split():
            byte = parse_int(token, base=16, minimum=0, maximum=255)
            if byte is None:
                raise InvalidSyntaxError(f"'{token}' is not a valid hex character")
            values.append(byte)
        if not values:
            raise InvalidSyntaxError(f"'{stripped}' is not a valid hex-string")
        return bytes(values)

    def render(self, value: bytes | None, mode: RenderMode) -> str:
        return value.hex().upper() if value else ""

    def is_default(self, value: bytes | None) -> bool:
        return not value


class SsidCodec(BaseCodec):
    """Wi-Fi SSID given as text and stored as its UTF-8 bytes."""

    def parse(self, text: str) -> bytes:
        raw = text.encode("utf-8")
        if len(raw) > SSID_MAX_LEN:
            raise InvalidSyntaxError(f"'{text}' is not valid; an SSID is at most {SSID_MAX_LEN} bytes")
        return raw

    def render(self, value: bytes | None, mode: RenderMode) -> str:
        return value.decode("utf-8", errors="replace") if value else ""

    def is_default(self, value: bytes | None) -> bool:
        return not value
