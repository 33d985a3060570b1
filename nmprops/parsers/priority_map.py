"""VLAN priority-mapping lists (`FROM:TO,FROM:TO,...`)."""

from __future__ import annotations

from nmprops.core.errors import InvalidSyntaxError
from nmprops.core.model import PriorityMapping
from nmprops.parsers.tokens import MAXUINT32, parse_int

MAX_8021P_PRIO = 7
MAX_SKB_PRIO = MAXUINT32

INGRESS = "ingress"
EGRESS = "egress"
WILDCARD = "*"


def _limits(direction: str) -> tuple[int, int]:
    if direction == INGRESS:
        return MAX_8021P_PRIO, MAX_SKB_PRIO
    return MAX_SKB_PRIO, MAX_8021P_PRIO


def parse_priority_mapping(text: str, direction: str, *, allow_wildcard: bool = False) -> PriorityMapping:
    """Parse one `FROM:TO` pair; `*` as TO is accepted only with `allow_wildcard`."""
    source_text, colon, target_text = text.strip().partition(":")
    source_max, target_max = _limits(direction)
    source = parse_int(source_text, minimum=0, maximum=source_max) if colon else None
    if source is not None:
        if allow_wildcard and target_text.strip() == WILDCARD:
            return PriorityMapping(source=source, target=None)
        target = parse_int(target_text, minimum=0, maximum=target_max)
        if target is not None:
            return PriorityMapping(source=source, target=target)
    raise InvalidSyntaxError(f"invalid priority map '{text}'")


def parse_priority_map(text: str, direction: str, *, allow_wildcard: bool = False) -> list[PriorityMapping]:
    return [
        parse_priority_mapping(pair, direction, allow_wildcard=allow_wildcard)
        for pair in text.split(",")
    ]


def render_priority_mapping(mapping: PriorityMapping) -> str:
    target = WILDCARD if mapping.target is None else mapping.target
    return f"{mapping.source}:{target}"


def mapping_matches(stored: PriorityMapping, wanted: PriorityMapping) -> bool:
    if stored.source != wanted.source:
        return False
    return wanted.target is None or stored.target == wanted.target
