"""Boolean and integer codecs."""

from __future__ import annotations

from collections.abc import Callable

from nmprops.codecs.base import BaseCodec
from nmprops.core.errors import InvalidSyntaxError, OutOfRangeError
from nmprops.core.model import RenderMode
from nmprops.parsers.tokens import MAXINT32, parse_int

# Order matters: completion without text offers the last pair only.
BOOL_WORDS = ("true", "false", "on", "off", "1", "0", "yes", "no")
_TRUE_WORDS = frozenset(BOOL_WORDS[0::2])
_FALSE_WORDS = frozenset(BOOL_WORDS[1::2])


class BoolCodec(BaseCodec):
    def __init__(self, *, default: bool = False) -> None:
        self._default = default

    def default(self) -> bool:
        return self._default

    def parse(self, text: str) -> bool:
        lowered = text.strip().lower()
        if lowered in _TRUE_WORDS:
            return True
        if lowered in _FALSE_WORDS:
            return False
        raise InvalidSyntaxError(f"'{text}' is not valid; use [{', '.join(BOOL_WORDS)}]")

    def render(self, value: bool, mode: RenderMode) -> str:
        return "yes" if value else "no"

    def values(self) -> tuple[str, ...]:
        return BOOL_WORDS

    def complete(self, text: str) -> tuple[str, ...]:
        if not text:
            return BOOL_WORDS[6:]
        return BOOL_WORDS


class IntCodec(BaseCodec):
    """Integer with bounds, optional hex rendering and named aliases.

    Aliases are matched before numbers when parsing. Pretty output appends
    ` (alias)` to aliased values; with `alias_render="always"` the alias alone is
    rendered in both modes. A `check` hook may reject further values within the
    bounds.
    """

    def __init__(
        self,
        *,
        minimum: int = -MAXINT32 - 1,
        maximum: int = MAXINT32,
        base: int = 10,
        width: int = 0,
        aliases: dict[int, str] | None = None,
        alias_render: str = "pretty",
        check: Callable[[int], None] | None = None,
        default: int = 0,
    ) -> None:
        self.minimum = minimum
        self.maximum = maximum
        self.base = base
        self.width = width
        self.aliases = dict(aliases or {})
        self.alias_render = alias_render
        self.check = check
        self._default = default
        self._by_nick = {nick.lower(): value for value, nick in self.aliases.items()}

    def default(self) -> int:
        return self._default

    def parse(self, text: str) -> int:
        stripped = text.strip()
        if stripped.lower() in self._by_nick:
            return self._by_nick[stripped.lower()]

        value = parse_int(stripped, base=16 if self.base == 16 else 0)
        if value is None:
            raise InvalidSyntaxError(f"'{stripped}' is not a valid number")
        if not self.minimum <= value <= self.maximum:
            raise OutOfRangeError(f"'{stripped}' is out of range [{self.minimum}, {self.maximum}]")
        if self.check is not None:
            self.check(value)
        return value

    def _numeric(self, value: int) -> str:
        if self.base == 16 and value >= 0:
            return f"0x{value:0{self.width}x}"
        return str(value)

    def render(self, value: int, mode: RenderMode) -> str:
        nick = self.aliases.get(value)
        if nick is not None and self.alias_render == "always":
            return nick
        text = self._numeric(value)
        if nick is not None and mode == RenderMode.PRETTY:
            return f"{text} ({nick})"
        return text

    def values(self) -> tuple[str, ...] | None:
        if not self.aliases:
            return None
        return tuple(self.aliases.values())
