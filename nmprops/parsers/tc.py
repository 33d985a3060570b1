"""Traffic-control queueing discipline and filter parsing.

Both share the prefix `[root | parent <handle>] [handle <handle>] <kind>`;
anything after the kind is passed through as the kind's own parameters.
Elements are stored in canonical text form.
"""

from __future__ import annotations

from nmprops.core.errors import InvalidSyntaxError, OutOfRangeError, PropertyError
from nmprops.parsers.tokens import parse_int

ROOT = "root"
_MAX_HANDLE_PART = 0xFFFF


def syntax_help(what: str) -> str:
    return f"The valid syntax is: '[root | parent <handle>] [handle <handle>] <{what}>'"


def parse_handle(text: str) -> str:
    """Parse a `MAJOR:[MINOR]` handle (hex) into its canonical lowercase form."""
    major, colon, minor = text.partition(":")
    if not colon:
        raise InvalidSyntaxError(f"invalid handle: '{text}'")
    major_value = parse_int(major, base=16)
    minor_value = parse_int(minor, base=16) if minor else 0
    if major_value is None or minor_value is None:
        raise InvalidSyntaxError(f"invalid handle: '{text}'")
    if major_value > _MAX_HANDLE_PART or minor_value > _MAX_HANDLE_PART:
        raise OutOfRangeError(f"invalid handle: '{text}'")
    if minor_value:
        return f"{major_value:x}:{minor_value:x}"
    return f"{major_value:x}:"


def _parse_tc_object(text: str) -> str:
    tokens = text.split()
    parent: str | None = None
    handle: str | None = None
    position = 0
    while position < len(tokens):
        token = tokens[position]
        if token == ROOT:
            if parent is not None:
                raise InvalidSyntaxError("parent given more than once")
            parent = ROOT
            position += 1
            continue
        if token not in ("parent", "handle"):
            break
        if position + 1 >= len(tokens):
            raise InvalidSyntaxError(f"'{token}' requires a handle")
        value = parse_handle(tokens[position + 1])
        if token == "parent":
            if parent is not None:
                raise InvalidSyntaxError("parent given more than once")
            parent = f"parent {value}"
        else:
            if handle is not None:
                raise InvalidSyntaxError("handle given more than once")
            handle = value
        position += 2

    if parent is None:
        raise InvalidSyntaxError("parent not specified")
    if position >= len(tokens):
        raise InvalidSyntaxError("kind is missing")

    parts = [parent]
    if handle is not None:
        parts.append(f"handle {handle}")
    parts.extend(tokens[position:])
    return " ".join(parts)


def _with_help(text: str, what: str) -> str:
    try:
        return _parse_tc_object(text)
    except PropertyError as exc:
        raise type(exc)(f"{exc}. {syntax_help(what)}") from None


def parse_qdisc(text: str) -> str:
    return _with_help(text, "qdisc")


def parse_tfilter(text: str) -> str:
    return _with_help(text, "tfilter")
