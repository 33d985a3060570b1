"""Route-with-attributes parsing and rendering."""

from __future__ import annotations

from typing import Any

from nmprops.core.errors import InvalidSyntaxError, OrderingViolationError, OutOfRangeError, UnknownKeyError
from nmprops.core.model import IPRoute, RenderMode
from nmprops.parsers.address import canonical_address, max_prefix, parse_prefix
from nmprops.parsers.tokens import MAXUINT32, parse_int, split_set

ROUTE_SYNTAX = "The valid syntax is: 'ip[/prefix] [next-hop] [metric] [attribute=val]... [,ip[/prefix] ...]'"

_ROUTE_TYPES = ("unicast", "local", "blackhole", "unreachable", "prohibit")
_TRUE_WORDS = ("true", "yes", "on", "1")
_FALSE_WORDS = ("false", "no", "off", "0")

# name -> (value type, valid for IPv4, valid for IPv6)
ROUTE_ATTRIBUTES: dict[str, tuple[str, bool, bool]] = {
    "cwnd": ("uint32", True, True),
    "from": ("ip-prefix", False, True),
    "initcwnd": ("uint32", True, True),
    "initrwnd": ("uint32", True, True),
    "lock-cwnd": ("bool", True, True),
    "lock-initcwnd": ("bool", True, True),
    "lock-initrwnd": ("bool", True, True),
    "lock-mtu": ("bool", True, True),
    "lock-window": ("bool", True, True),
    "mtu": ("uint32", True, True),
    "onlink": ("bool", True, True),
    "scope": ("byte", True, False),
    "src": ("ip", True, True),
    "table": ("uint32", True, True),
    "tos": ("byte", True, False),
    "type": ("route-type", True, True),
    "window": ("uint32", True, True),
}


def _parse_attribute_value(name: str, kind: str, value: str, family: int) -> Any:
    if kind in ("uint32", "byte"):
        limit = MAXUINT32 if kind == "uint32" else 255
        number = parse_int(value, minimum=0, maximum=limit)
        if number is None:
            raise OutOfRangeError(f"invalid {kind} value '{value}' for attribute '{name}'")
        return number
    if kind == "bool":
        lowered = value.lower()
        if lowered in _TRUE_WORDS:
            return True
        if lowered in _FALSE_WORDS:
            return False
        raise InvalidSyntaxError(f"invalid boolean value '{value}' for attribute '{name}'")
    if kind == "ip":
        address = canonical_address(family, value)
        if address is None:
            raise InvalidSyntaxError(f"{name}: invalid address '{value}'")
        return address
    if kind == "ip-prefix":
        address_text, slash, prefix_text = value.partition("/")
        address = canonical_address(family, address_text)
        if address is None:
            raise InvalidSyntaxError(f"{name}: invalid address '{value}'")
        if slash:
            return f"{address}/{parse_prefix(prefix_text, family)}"
        return address
    if value not in _ROUTE_TYPES:
        raise InvalidSyntaxError(f"{name}: '{value}' is not a valid route type")
    return value


def parse_route_attributes(token: str, family: int) -> dict[str, Any]:
    """Parse one `key=value` route attribute token, validated against the attribute table."""
    attributes: dict[str, Any] = {}
    for pair in split_set(token, " "):
        name, _, value = pair.partition("=")
        spec = ROUTE_ATTRIBUTES.get(name)
        if spec is None:
            raise UnknownKeyError(f"unknown attribute '{name}'")
        kind, for_ipv4, for_ipv6 = spec
        if not (for_ipv4 if family == 4 else for_ipv6):
            version = "IPv4" if family == 4 else "IPv6"
            raise InvalidSyntaxError(f"{name}: attribute is not valid for a {version} route")
        attributes[name] = _parse_attribute_value(name, kind, value, family)
    return attributes


def parse_ip_route(text: str, family: int) -> IPRoute:
    tokens = split_set(text.strip(), " \t")
    if not tokens:
        raise InvalidSyntaxError(f"'{text}' is not valid. {ROUTE_SYNTAX}")

    dest_text, slash, prefix_text = tokens[0].partition("/")
    prefix = parse_prefix(prefix_text, family) if slash else max_prefix(family)

    next_hop: str | None = None
    metric = -1
    attributes: dict[str, Any] | None = None
    for token in tokens[1:]:
        address = canonical_address(family, token)
        if address is not None:
            if metric != -1 or attributes is not None:
                raise OrderingViolationError(f"the next hop ('{token}') must be first")
            next_hop = address
            continue
        number = parse_int(token, minimum=0, maximum=MAXUINT32)
        if number is not None:
            if attributes is not None:
                raise OrderingViolationError(f"the metric ('{token}') must be before attributes")
            metric = number
            continue
        if "=" in token:
            try:
                parsed = parse_route_attributes(token, family)
            except (InvalidSyntaxError, OutOfRangeError, UnknownKeyError) as exc:
                raise type(exc)(f"invalid option '{token}': {exc}") from exc
            attributes = {**(attributes or {}), **parsed}
            continue
        raise InvalidSyntaxError(ROUTE_SYNTAX)

    dest = canonical_address(family, dest_text)
    if dest is None:
        raise InvalidSyntaxError(f"invalid route: Invalid destination '{dest_text}'. {ROUTE_SYNTAX}")
    return IPRoute(
        family=family,
        dest=dest,
        prefix=prefix,
        next_hop=next_hop,
        metric=metric,
        attributes=attributes or {},
    )


def format_route_attributes(attributes: dict[str, Any]) -> str:
    parts = []
    for name in sorted(attributes):
        value = attributes[name]
        if isinstance(value, bool):
            value = "true" if value else "false"
        parts.append(f"{name}={value}")
    return " ".join(parts)


def render_ip_route(route: IPRoute, mode: RenderMode) -> str:
    attributes = format_route_attributes(route.attributes)
    if mode == RenderMode.PRETTY:
        text = f"{{ ip = {route.dest}/{route.prefix}"
        if route.next_hop:
            text += f", nh = {route.next_hop}"
        if route.metric != -1:
            text += f", mt = {route.metric}"
        if attributes:
            text += f" {attributes}"
        return text + " }"

    text = f"{route.dest}/{route.prefix}"
    if route.next_hop:
        text += f" {route.next_hop}"
    if route.metric != -1:
        text += f" {route.metric}"
    if attributes:
        text += f" {attributes}"
    return text
