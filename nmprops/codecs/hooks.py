"""Named validators and normalizers that descriptor tables refer to by name."""

from __future__ import annotations

import json
import re
import uuid
from collections.abc import Callable
from typing import Any

from nmprops.codecs.hwaddr import normalize_mac
from nmprops.codecs.security import assign_private_key, assign_wep_key, assign_wep_key_type, normalize_wep_key
from nmprops.core.errors import InvalidSyntaxError, OutOfRangeError, UnknownOptionError
from nmprops.parsers.address import parse_ip
from nmprops.parsers.sriov import parse_sriov_vf
from nmprops.parsers.tc import parse_qdisc, parse_tfilter
from nmprops.parsers.tokens import parse_int

BOND_MODES = (
    "balance-rr",
    "active-backup",
    "balance-xor",
    "broadcast",
    "802.3ad",
    "balance-tlb",
    "balance-alb",
)
BOND_OPTIONS = (
    "mode",
    "miimon",
    "downdelay",
    "updelay",
    "arp_interval",
    "arp_ip_target",
    "arp_validate",
    "primary",
    "primary_reselect",
    "fail_over_mac",
    "use_carrier",
    "ad_select",
    "xmit_hash_policy",
    "resend_igmp",
    "lacp_rate",
    "active_slave",
    "ad_actor_sys_prio",
    "ad_actor_system",
    "ad_user_port_key",
    "all_slaves_active",
    "arp_all_targets",
    "min_links",
    "num_grat_arp",
    "num_unsol_na",
    "packets_per_slave",
    "tlb_dynamic_lb",
    "lp_interval",
)
S390_OPTIONS = (
    "portno",
    "layer2",
    "portname",
    "protocol",
    "priority_queueing",
    "buffer_count",
    "isolation",
    "total",
    "inter",
    "inter_jumbo",
    "route4",
    "route6",
    "fake_broadcast",
    "broadcast_mode",
    "canonical_macaddr",
    "checksumming",
    "sniffer",
    "large_send",
    "ipato_enable",
    "ipato_invert4",
    "ipato_add4",
    "ipato_invert6",
    "ipato_add6",
    "vipa_add4",
    "vipa_add6",
    "rxip_add4",
    "rxip_add6",
    "lancmd_timeout",
    "ctcprot",
)
DNS_OPTIONS = (
    "attempts",
    "debug",
    "edns0",
    "inet6",
    "ip6-bytestring",
    "ip6-dotint",
    "ndots",
    "no-check-names",
    "no-ip6-dotint",
    "no-reload",
    "no-tld-query",
    "rotate",
    "single-request",
    "single-request-reopen",
    "timeout",
    "trust-ad",
    "use-vc",
)
_DNS_NUMERIC_OPTIONS = frozenset({"ndots", "timeout", "attempts"})
_DOMAIN_RE = re.compile(r"^[A-Za-z0-9_.-]+$")
_IFNAME_MAX = 15
PERM_USER_PREFIX = "user:"
_SIM_OPERATOR_ID_LENGTHS = (5, 6)
WIFI_CHANNELS_BG = tuple(range(1, 15))
WIFI_CHANNELS_A = (
    7, 8, 9, 11, 12, 16, 34, 36, 38, 40, 42, 44, 46, 48, 52, 56, 60, 64, 100, 104, 108, 112,
    116, 120, 124, 128, 132, 136, 140, 149, 152, 153, 157, 160, 161, 165, 183, 184, 185, 187,
    188, 192, 196,
)


# String normalizers: (text) -> text, applied before the legal-value check.

def _normalize_ip_method(text: str) -> str:
    if text.strip().lower() == "static":
        return "manual"
    return text


def _normalize_sim_operator_id(text: str) -> str:
    if len(text) not in _SIM_OPERATOR_ID_LENGTHS or not text.isascii() or not text.isdigit():
        raise InvalidSyntaxError("SIM operator ID must be a 5 or 6 number MCCMNC code")
    return text


NORMALIZERS: dict[str, Callable[[str], str]] = {
    "ip-method": _normalize_ip_method,
    "sim-operator-id": _normalize_sim_operator_id,
    "wep-key": normalize_wep_key,
}


# List item parsers: (token) -> stored element.

def _parse_inaddr(token: str, family: int) -> str:
    try:
        return parse_ip(token, family)
    except InvalidSyntaxError:
        raise InvalidSyntaxError(f"invalid IPv{family} address '{token}'") from None


def _parse_dns_option(token: str) -> str:
    name, colon, number = token.partition(":")
    if name not in DNS_OPTIONS:
        raise UnknownOptionError(f"'{token}' is not a valid DNS option; use one of [{', '.join(DNS_OPTIONS)}]")
    if name in _DNS_NUMERIC_OPTIONS:
        if not colon or parse_int(number, minimum=0) is None:
            raise InvalidSyntaxError(f"'{token}' is not a valid DNS option; '{name}' requires ':<number>'")
    elif colon:
        raise InvalidSyntaxError(f"'{token}' is not a valid DNS option; '{name}' takes no value")
    return token


def _parse_domain(token: str) -> str:
    if not _DOMAIN_RE.match(token):
        raise InvalidSyntaxError(f"'{token}' is not valid")
    return token


def _parse_uuid(token: str) -> str:
    try:
        return str(uuid.UUID(token))
    except ValueError:
        raise InvalidSyntaxError(f"the value '{token}' is not a valid UUID") from None


def _parse_permission(token: str) -> str:
    user = token[len(PERM_USER_PREFIX):] if token.startswith(PERM_USER_PREFIX) else token
    if not user or ":" in user:
        raise InvalidSyntaxError(f"'{token}' is not valid")
    return f"{PERM_USER_PREFIX}{user}"


def _parse_interface_name(token: str) -> str:
    if len(token) > _IFNAME_MAX or token in (".", "..") or any(ch in token for ch in "/:") or any(
        ch.isspace() for ch in token
    ):
        raise InvalidSyntaxError(f"'{token}' is not a valid interface name")
    return token


def _parse_interface_match(token: str) -> str:
    if not token.lstrip("!~"):
        raise InvalidSyntaxError(f"'{token}' is not a valid interface name")
    return token


ITEM_PARSERS: dict[str, Callable[[str], Any]] = {
    "ipv4-address": lambda token: _parse_inaddr(token, 4),
    "ipv6-address": lambda token: _parse_inaddr(token, 6),
    "mac": normalize_mac,
    "uuid": _parse_uuid,
    "dns-option": _parse_dns_option,
    "domain": _parse_domain,
    "permission": _parse_permission,
    "interface-name": _parse_interface_name,
    "interface-match": _parse_interface_match,
    "tc-qdisc": parse_qdisc,
    "tc-tfilter": parse_tfilter,
    "sriov-vf": parse_sriov_vf,
}


def split_escaped_spaces(text: str) -> list[str]:
    """Split on unescaped spaces/tabs and unescape `\\ ` sequences."""
    tokens = re.split(r"(?<!\\)[ \t]+", text.strip())
    return [token.replace("\\ ", " ").replace("\\\t", "\t") for token in tokens if token]


def escape_spaces(item: str, mode: Any = None) -> str:
    return item.replace(" ", "\\ ").replace("\t", "\\\t")


SPLITTERS: dict[str, Callable[[str], list[str]]] = {
    "escaped-spaces": split_escaped_spaces,
}

# Renderers paired with a splitter so Parsable output splits back the same way.
ITEM_RENDERERS: dict[str, Callable[..., str]] = {
    "escaped-spaces": escape_spaces,
}


# Option map value validators: (key, value) -> stored value.

def _validate_bond_mode(value: str) -> str:
    number = parse_int(value, minimum=0, maximum=len(BOND_MODES) - 1)
    if number is not None:
        return BOND_MODES[number]
    if value in BOND_MODES:
        return value
    raise UnknownOptionError(
        f"'{value}' is not a valid bond mode; use one of [{', '.join(BOND_MODES)}] or 0-{len(BOND_MODES) - 1}"
    )


def _validate_bond_option(key: str, value: str) -> str:
    if key == "mode":
        return _validate_bond_mode(value)
    if key == "arp_ip_target":
        return value.replace(" ", ",")
    return value


def _validate_non_empty(key: str, value: str) -> str:
    if not value:
        raise InvalidSyntaxError(f"'{key}' cannot be empty")
    return value


def _validate_s390_option(key: str, value: str) -> str:
    if not value or len(value) >= 200:
        raise InvalidSyntaxError(f"'{key}' string value should consist of 1 - 199 characters")
    return value


VALUE_VALIDATORS: dict[str, Callable[[str, str], str]] = {
    "bond-option": _validate_bond_option,
    "non-empty": _validate_non_empty,
    "s390-option": _validate_s390_option,
}


def _render_bond_option(key: str, value: str) -> str:
    if key == "arp_ip_target":
        return value.replace(",", " ")
    return value


VALUE_RENDERERS: dict[str, Callable[[str, str], str]] = {
    "bond-option": _render_bond_option,
}

OPTION_KEYS: dict[str, tuple[str, ...]] = {
    "bond": BOND_OPTIONS,
    "s390": S390_OPTIONS,
}


# File-backed text kinds: codec parameters plus a (text) -> bool content check.

def _is_pac_script(text: str) -> bool:
    return "FindProxyForURL" in text


def _is_json_object(text: str) -> bool:
    try:
        return isinstance(json.loads(text), dict)
    except ValueError:
        return False


FILE_TEXT_KINDS: dict[str, dict[str, Any]] = {
    "pac-script": {
        "what": "pac-script",
        "inline_prefix": "js://",
        "check": _is_pac_script,
        "invalid": "PAC Script",
        "invalid_inline": "Not a valid PAC Script",
    },
    "team-config": {
        "what": "team config",
        "inline_prefix": "json://",
        "check": _is_json_object,
        "invalid": "team configuration",
        "invalid_inline": "team configuration must be a JSON object",
    },
}


# Integer checks: (value) -> None, raising for values the bounds alone allow.

def _check_wifi_channel(value: int) -> None:
    if value not in WIFI_CHANNELS_A and value not in WIFI_CHANNELS_BG:
        raise OutOfRangeError(f"'{value}' is not a valid channel")


INT_CHECKS: dict[str, Callable[[int], None]] = {
    "wifi-channel": _check_wifi_channel,
}


# Setters: (descriptor, group, text) -> None, storing the value and updating siblings.
SETTERS: dict[str, Callable[..., None]] = {
    "wep-key": assign_wep_key,
    "wep-key-type": assign_wep_key_type,
    "private-key": assign_private_key,
}

# Properties a setter writes besides its own; `{name}` is the property being set.
SETTER_SIBLINGS: dict[str, tuple[str, ...]] = {
    "wep-key": ("wep-key-type", "wep-tx-keyidx"),
    "wep-key-type": ("wep-key0", "wep-key1", "wep-key2", "wep-key3"),
    "private-key": ("{name}-password",),
}
