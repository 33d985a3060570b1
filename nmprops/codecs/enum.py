"""Enumeration and bit-flag codecs with numeric, text, or hybrid rendering."""

from __future__ import annotations

from nmprops.codecs.base import BaseCodec
from nmprops.core.errors import UnknownOptionError
from nmprops.core.model import EnumType, EnumValue, RenderMode
from nmprops.parsers.tokens import parse_int, split_set

NUMERIC = "numeric"
TEXT = "text"
HYBRID = "hybrid"


class EnumCodec(BaseCodec):
    """Codec for enum and flags types declared in the enum table.

    Parsable output defaults to the number (hex for flags), Pretty output to
    `N (text)`. Either can be switched to the symbolic form per property.
    """

    def __init__(
        self,
        enum_type: EnumType,
        *,
        parsable: str = NUMERIC,
        pretty: str = HYBRID,
        hex_numbers: bool | None = None,
        default: int = 0,
    ) -> None:
        self.enum_type = enum_type
        self.parsable = parsable
        self.pretty = pretty
        if hex_numbers is None:
            hex_numbers = enum_type.is_flags if enum_type.hex_numbers is None else enum_type.hex_numbers
        self.hex_numbers = hex_numbers
        self._default = default
        self._by_value: dict[int, EnumValue] = {}
        for entry in enum_type.values:
            self._by_value.setdefault(entry.value, entry)
        self._by_nick = {entry.nick.lower(): entry.value for entry in enum_type.values}
        self._by_nick.update({alias.lower(): value for alias, value in enum_type.aliases.items()})
        self._all_bits = 0
        for entry in enum_type.values:
            self._all_bits |= max(entry.value, 0)

    def default(self) -> int:
        return self._default

    def _nicks(self) -> tuple[str, ...]:
        if self.enum_type.is_flags:
            return tuple(entry.nick for entry in self.enum_type.values if entry.value != 0)
        return tuple(entry.nick for entry in self.enum_type.values)

    def _numeric(self, value: int) -> str:
        if self.hex_numbers:
            return f"0x{value:x}"
        return str(value)

    def _text(self, value: int, *, pretty: bool) -> str:
        def name(entry: EnumValue) -> str:
            return entry.label if pretty and entry.label else entry.nick

        if not self.enum_type.is_flags:
            entry = self._by_value.get(value)
            return name(entry) if entry else self._numeric(value)

        if value == 0:
            entry = self._by_value.get(0)
            return name(entry) if entry else "0x0"

        names: list[str] = []
        remaining = value
        for entry in self.enum_type.values:
            if entry.value and remaining & entry.value == entry.value:
                names.append(name(entry))
                remaining &= ~entry.value
        if remaining:
            if not names and pretty:
                return "unknown"
            names.append(f"0x{remaining:x}")
        return (", " if pretty else ",").join(names)

    def render(self, value: int, mode: RenderMode) -> str:
        if mode == RenderMode.PARSABLE:
            if self.parsable == TEXT:
                return self._text(value, pretty=False)
            return self._numeric(value)

        if self.pretty == NUMERIC:
            return self._numeric(value)
        text = self._text(value, pretty=True)
        if self.pretty == TEXT:
            return text
        numeric = self._numeric(value)
        if text == numeric:
            return text
        return f"{numeric} ({text})"

    def _parse_token(self, token: str) -> int | None:
        value = self._by_nick.get(token.lower())
        if value is not None:
            return value
        return parse_int(token, base=0)

    def parse(self, text: str) -> int:
        stripped = text.strip()
        if not self.enum_type.is_flags:
            value = self._parse_token(stripped)
            if value is None or value not in self._by_value:
                raise UnknownOptionError(
                    f"invalid option '{stripped}', use one of [{','.join(self._nicks())}]"
                )
            return value

        value = 0
        for token in split_set(stripped, " \t,|"):
            bits = self._parse_token(token)
            if bits is None or bits < 0 or bits & ~self._all_bits:
                raise UnknownOptionError(
                    f"invalid option '{token}', use a combination of [{','.join(self._nicks())}]"
                )
            value |= bits
        return value

    def values(self) -> tuple[str, ...]:
        return self._nicks()
