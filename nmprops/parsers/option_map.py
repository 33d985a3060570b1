"""Generic `key=value` option maps (bonding options, VPN data, S/390 options)."""

from __future__ import annotations

from collections.abc import Callable

from nmprops.core.errors import InvalidSyntaxError
from nmprops.parsers.tokens import resolve_choice

KeyValidator = Callable[[str], str]
ValueValidator = Callable[[str, str], str]


def split_option(pair: str) -> tuple[str, str]:
    left, eq, right = pair.strip().partition("=")
    if not eq:
        raise InvalidSyntaxError(f"'{pair}' is not valid; use <option>=<value>")
    key = left.strip()
    if not key:
        raise InvalidSyntaxError(f"'{pair.strip()}' is not valid; the option name is empty")
    return key, right.strip()


def key_in(valid_keys: tuple[str, ...]) -> KeyValidator:
    def _validate(key: str) -> str:
        return resolve_choice(key, valid_keys)

    return _validate


def parse_option(
    pair: str,
    *,
    key_validator: KeyValidator | None = None,
    value_validator: ValueValidator | None = None,
) -> tuple[str, str]:
    key, value = split_option(pair)
    if key_validator is not None:
        key = key_validator(key)
    if value_validator is not None:
        value = value_validator(key, value)
    return key, value


def parse_option_map(
    text: str,
    *,
    key_validator: KeyValidator | None = None,
    value_validator: ValueValidator | None = None,
) -> dict[str, str]:
    options: dict[str, str] = {}
    for pair in text.split(","):
        key, value = parse_option(pair, key_validator=key_validator, value_validator=value_validator)
        options[key] = value
    return options


def render_option_map(options: dict[str, str], *, separator: str = "=", joiner: str = ",") -> str:
    return joiner.join(f"{key}{separator}{value}" for key, value in options.items())
