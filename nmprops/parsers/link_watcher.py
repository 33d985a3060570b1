"""Team link-watcher dictionary parsing and rendering.

A watcher is a space separated list of `key=value` pairs. The `name` key picks
the variant, which in turn decides which other keys are legal and mandatory.
"""

from __future__ import annotations

from nmprops.core.errors import InvalidSyntaxError, OutOfRangeError, UnknownKeyError, UnknownOptionError
from nmprops.core.model import LinkWatcher
from nmprops.parsers.tokens import MAXINT32, parse_int, split_set

ETHTOOL = "ethtool"
NSNA_PING = "nsna_ping"
ARP_PING = "arp_ping"

_FLAG_KEYS = ("validate-active", "validate-inactive", "send-always")
_INT_KEYS = ("delay-up", "delay-down", "init-wait", "interval", "missed-max")

# variant -> (optional keys, mandatory keys besides name)
VARIANTS: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    ETHTOOL: (("delay-up", "delay-down"), ()),
    NSNA_PING: (("init-wait", "interval", "missed-max"), ("target-host",)),
    ARP_PING: (
        ("init-wait", "interval", "missed-max", "vlanid", "source-host", *_FLAG_KEYS),
        ("target-host", "source-host"),
    ),
}
KNOWN_KEYS = frozenset({"name", "target-host", "source-host", "vlanid", *_INT_KEYS, *_FLAG_KEYS})


def _invalid(pair: str, reason: str) -> str:
    return f"'{pair}' is not valid: {reason}"


def _split_pairs(text: str) -> list[tuple[str, str, str]]:
    pairs: list[tuple[str, str, str]] = []
    for pair in split_set(text.strip(), " \t"):
        if "=" not in pair or pair.count("=") > 1:
            raise InvalidSyntaxError(_invalid(pair, "properties should be specified as 'key=value'"))
        key, _, value = pair.partition("=")
        if not key or not value:
            raise InvalidSyntaxError(_invalid(pair, "missing key value"))
        if key not in KNOWN_KEYS:
            raise UnknownKeyError(_invalid(pair, "unknown key"))
        pairs.append((pair, key, value))
    return pairs


_HOST_FORBIDDEN = frozenset("/\\=\"'")


def _check_host(key: str, host: str) -> str:
    if any(ch in _HOST_FORBIDDEN or ch.isspace() for ch in host):
        raise InvalidSyntaxError(f"{key} '{host}' contains invalid characters")
    return host


def parse_link_watcher(text: str) -> LinkWatcher:
    pairs = _split_pairs(text)
    if not pairs:
        raise InvalidSyntaxError(f"'{text}' is not valid")

    values: dict[str, str] = {}
    for pair, key, value in pairs:
        if key in _INT_KEYS and parse_int(value, minimum=0, maximum=MAXINT32) is None:
            raise OutOfRangeError(_invalid(pair, f"value is not a valid number [0, {MAXINT32}]"))
        if key == "vlanid" and parse_int(value, minimum=-1, maximum=4094) is None:
            raise OutOfRangeError(_invalid(pair, "value is not a valid number [-1, 4094]"))
        values[key] = value

    name = values.pop("name", None)
    if name is None:
        raise InvalidSyntaxError("link watcher name missing")
    if name not in VARIANTS:
        raise UnknownOptionError(f"unknown link watcher name: '{name}'")

    optional, mandatory = VARIANTS[name]
    for pair, key, _ in pairs:
        if key != "name" and key not in optional and key not in mandatory:
            raise UnknownKeyError(_invalid(pair, f"unknown key for {name} link watcher"))
    for key in mandatory:
        if key not in values:
            raise InvalidSyntaxError(f"Missing {key} in {name} link watcher")

    if name == ETHTOOL:
        return LinkWatcher(
            name=name,
            delay_up=int(values.get("delay-up", 0)),
            delay_down=int(values.get("delay-down", 0)),
        )
    return LinkWatcher(
        name=name,
        init_wait=int(values.get("init-wait", 0)),
        interval=int(values.get("interval", 0)),
        missed_max=int(values.get("missed-max", 3)),
        target_host=_check_host("target-host", values["target-host"]),
        source_host=_check_host("source-host", values["source-host"]) if "source-host" in values else None,
        vlanid=int(values.get("vlanid", -1)),
        # Only the literal "true" sets a flag; any other value leaves it alone.
        validate_active=values.get("validate-active") == "true",
        validate_inactive=values.get("validate-inactive") == "true",
        send_always=values.get("send-always") == "true",
    )


def render_link_watcher(watcher: LinkWatcher) -> str:
    parts = [f"name={watcher.name}"]
    if watcher.name == ETHTOOL:
        if watcher.delay_up:
            parts.append(f"delay-up={watcher.delay_up}")
        if watcher.delay_down:
            parts.append(f"delay-down={watcher.delay_down}")
        return " ".join(parts)

    if watcher.init_wait:
        parts.append(f"init-wait={watcher.init_wait}")
    if watcher.interval:
        parts.append(f"interval={watcher.interval}")
    # Always written: an absent missed-max parses back as 3.
    parts.append(f"missed-max={watcher.missed_max}")
    parts.append(f"target-host={watcher.target_host}")
    if watcher.name == NSNA_PING:
        return " ".join(parts)

    if watcher.vlanid != -1:
        parts.append(f"vlanid={watcher.vlanid}")
    parts.append(f"source-host={watcher.source_host}")
    if watcher.validate_active:
        parts.append("validate-active=true")
    if watcher.validate_inactive:
        parts.append("validate-inactive=true")
    if watcher.send_always:
        parts.append("send-always=true")
    return " ".join(parts)
