"""Address-with-prefix parsing and rendering."""

from __future__ import annotations

import ipaddress

from nmprops.core.errors import InvalidSyntaxError, OutOfRangeError
from nmprops.core.model import IPAddress
from nmprops.parsers.tokens import parse_int


def max_prefix(family: int) -> int:
    return 32 if family == 4 else 128


def canonical_address(family: int, text: str) -> str | None:
    """Return the canonical text form of an address of `family`, or `None` if invalid."""
    # Zone indices ("fe80::1%eth0") are not part of a stored address.
    if "%" in text:
        return None
    try:
        parsed = ipaddress.ip_address(text)
    except ValueError:
        return None
    if parsed.version != family:
        return None
    return str(parsed)


def parse_prefix(text: str, family: int) -> int:
    limit = max_prefix(family)
    prefix = parse_int(text, minimum=1, maximum=limit)
    if prefix is None:
        raise OutOfRangeError(f"invalid prefix '{text}'; <1-{limit}> allowed")
    return prefix


def parse_ip(text: str, family: int) -> str:
    address = canonical_address(family, text.strip())
    if address is None:
        version = "IPv4" if family == 4 else "IPv6"
        raise InvalidSyntaxError(f"invalid IP address: Invalid {version} address '{text.strip()}'")
    return address


def parse_ip_address(text: str, family: int) -> IPAddress:
    """Parse `IP[/PREFIX]`; the prefix defaults to the host prefix of the family."""
    stripped = text.strip()
    prefix = max_prefix(family)
    address_text, slash, prefix_text = stripped.partition("/")
    if slash:
        prefix = parse_prefix(prefix_text, family)
    return IPAddress(family=family, address=parse_ip(address_text, family), prefix=prefix)


def render_ip_address(address: IPAddress) -> str:
    return f"{address.address}/{address.prefix}"
