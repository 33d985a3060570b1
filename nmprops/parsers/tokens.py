"""Shared tokenizing and number helpers for the composite parsers."""

from __future__ import annotations

import re

from nmprops.core.errors import InvalidSyntaxError, UnknownOptionError

_DEC_RE = re.compile(r"^[+-]?[0-9]+$")
_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")

MAXUINT32 = 0xFFFFFFFF
MAXINT32 = 0x7FFFFFFF


def split_set(text: str, separators: str) -> list[str]:
    """Split on any character of `separators`, dropping empty tokens."""
    if not separators:
        return [text] if text else []
    pattern = "[" + re.escape(separators) + "]"
    return [token for token in re.split(pattern, text) if token]


def parse_int(text: str, *, base: int = 10, minimum: int | None = None, maximum: int | None = None) -> int | None:
    """Parse an integer the way the CLI accepts them; `None` when invalid or out of range.

    `base=0` accepts both decimal and `0x`-prefixed hexadecimal.
    """
    token = text.strip()
    if base == 16:
        if token[:2] in ("0x", "0X"):
            token = token[2:]
        if not token or not re.fullmatch(r"[0-9a-fA-F]+", token):
            return None
        value = int(token, 16)
    elif base == 0 and _HEX_RE.match(token):
        value = int(token, 16)
    elif _DEC_RE.match(token):
        value = int(token, 10)
    else:
        return None
    if minimum is not None and value < minimum:
        return None
    if maximum is not None and value > maximum:
        return None
    return value


def is_number(text: str) -> bool:
    return parse_int(text, base=0) is not None


def resolve_choice(text: str, choices: tuple[str, ...] | list[str]) -> str:
    """Match `text` against `choices` case-insensitively, allowing a unique prefix."""
    wanted = text.strip().lower()
    if not wanted:
        raise InvalidSyntaxError(f"'{text}' not among [{', '.join(choices)}]")
    prefixed = []
    for choice in choices:
        if choice.lower() == wanted:
            return choice
        if choice.lower().startswith(wanted):
            prefixed.append(choice)
    if len(prefixed) == 1:
        return prefixed[0]
    if prefixed:
        raise InvalidSyntaxError(f"'{text}' is ambiguous ({', '.join(prefixed)})")
    raise UnknownOptionError(f"'{text}' not among [{', '.join(choices)}]")
