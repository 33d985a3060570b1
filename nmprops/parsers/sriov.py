"""SR-IOV virtual function parsing: `INDEX [attribute=value]...`."""

from __future__ import annotations

from collections.abc import Callable

from nmprops.codecs.hwaddr import normalize_mac
from nmprops.core.errors import InvalidSyntaxError, OutOfRangeError, PropertyError, UnknownKeyError
from nmprops.parsers.tokens import MAXUINT32, parse_int

SYNTAX_HELP = "The valid syntax is: vf [attribute=value]... [,vf [attribute=value]...]"
VLAN_PROTOCOLS = ("q", "ad")
_TRUE = ("true", "yes", "on", "1")
_FALSE = ("false", "no", "off", "0")


def _parse_bool(value: str) -> str:
    lowered = value.lower()
    if lowered in _TRUE:
        return "true"
    if lowered in _FALSE:
        return "false"
    raise InvalidSyntaxError(f"'{value}' is not a valid boolean")


def _parse_rate(value: str) -> str:
    number = parse_int(value, minimum=0, maximum=MAXUINT32)
    if number is None:
        raise OutOfRangeError(f"'{value}' is not a valid rate [0, {MAXUINT32}]")
    return str(number)


def _parse_vlan(text: str) -> str:
    parts = text.split(".")
    if len(parts) > 3:
        raise InvalidSyntaxError(f"'{text}' is not a valid VLAN; use ID[.QOS[.PROTOCOL]]")
    vlan_id = parse_int(parts[0], minimum=0, maximum=4095)
    if vlan_id is None:
        raise OutOfRangeError(f"invalid VLAN id '{parts[0]}'")
    qos = 0
    if len(parts) > 1:
        parsed = parse_int(parts[1], minimum=0, maximum=MAXUINT32)
        if parsed is None:
            raise OutOfRangeError(f"invalid VLAN QoS '{parts[1]}'")
        qos = parsed
    protocol = parts[2] if len(parts) > 2 else "q"
    if protocol not in VLAN_PROTOCOLS:
        raise InvalidSyntaxError(f"invalid VLAN protocol '{protocol}'; use one of [{', '.join(VLAN_PROTOCOLS)}]")
    if protocol != "q":
        return f"{vlan_id}.{qos}.{protocol}"
    if qos:
        return f"{vlan_id}.{qos}"
    return str(vlan_id)


def _parse_vlans(value: str) -> str:
    vlans = [_parse_vlan(item) for item in value.split(";") if item]
    if not vlans:
        raise InvalidSyntaxError("no VLANs given")
    return ";".join(vlans)


ATTRIBUTES: dict[str, Callable[[str], str]] = {
    "mac": normalize_mac,
    "spoof-check": _parse_bool,
    "trust": _parse_bool,
    "min-tx-rate": _parse_rate,
    "max-tx-rate": _parse_rate,
    "vlans": _parse_vlans,
}


def _parse_vf(text: str) -> str:
    tokens = text.split()
    if not tokens:
        raise InvalidSyntaxError("VF index missing")
    index = parse_int(tokens[0], minimum=0, maximum=MAXUINT32)
    if index is None:
        raise InvalidSyntaxError(f"invalid VF index '{tokens[0]}'")

    attributes: dict[str, str] = {}
    for token in tokens[1:]:
        key, separator, value = token.partition("=")
        if not separator or not key or not value:
            raise InvalidSyntaxError(f"'{token}' is not valid; attributes are given as 'attribute=value'")
        if key not in ATTRIBUTES:
            raise UnknownKeyError(f"unknown attribute '{key}'")
        if key in attributes:
            raise InvalidSyntaxError(f"attribute '{key}' given more than once")
        attributes[key] = ATTRIBUTES[key](value)
    return " ".join([str(index), *(f"{key}={attributes[key]}" for key in sorted(attributes))])


def parse_sriov_vf(text: str) -> str:
    """Parse one VF into canonical text: the index, then attributes sorted by name."""
    try:
        return _parse_vf(text)
    except PropertyError as exc:
        raise type(exc)(f"{exc}. {SYNTAX_HELP}") from None
