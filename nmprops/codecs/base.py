"""Codec interfaces."""

from __future__ import annotations

from typing import Any, Protocol

from nmprops.core.model import RenderMode


class Codec(Protocol):
    is_multi_valued: bool

    def default(self) -> Any:
        """Return the value a property holds after a reset."""

    def parse(self, text: str) -> Any:
        """Parse non-empty user text into a validated value or raise a `PropertyError`."""

    def render(self, value: Any, mode: RenderMode) -> str:
        """Render `value`; Parsable output must parse back to the same value."""

    def is_default(self, value: Any) -> bool:
        """Return True when `value` is equivalent to the default for display purposes."""

    def values(self) -> tuple[str, ...] | None:
        """Return the legal values, if the codec has a closed set."""

    def complete(self, text: str) -> tuple[str, ...] | None:
        """Return completion candidates for `text`, or None to fall back to `values()`."""


class MultiValueCodec(Codec, Protocol):
    def add(self, items: Any, text: str) -> None:
        """Add the elements in `text` to `items` in place."""

    def remove(self, items: Any, text: str) -> None:
        """Remove one element selected by index or value from `items` in place."""


class BaseCodec:
    is_multi_valued = False

    def default(self) -> Any:
        return None

    def render(self, value: Any, mode: RenderMode) -> str:
        return "" if value is None else str(value)

    def is_default(self, value: Any) -> bool:
        return value == self.default()

    def values(self) -> tuple[str, ...] | None:
        return None

    def complete(self, text: str) -> tuple[str, ...] | None:
        return None
