"""Indexed multi-valued property support shared by all list-like codecs."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from nmprops.core.model import RenderMode
from nmprops.parsers.tokens import parse_int, split_set

T = TypeVar("T")


def _equal(stored: object, wanted: object) -> bool:
    return stored == wanted


@dataclass(frozen=True)
class IndexedMultiValue(Generic[T]):
    """Add/remove/render strategy for an ordered sequence of parsed elements.

    Elements are split on any of `separators`, parsed one at a time with
    `parse_item`, and rendered back with `render_item`. Removal accepts either a
    0-based index or a value parsed with `parse_removal` (defaults to
    `parse_item`) and compared with `matches`. With `dedupe`, elements that are
    already present are skipped when adding.
    """

    parse_item: Callable[[str], T]
    render_item: Callable[[T, RenderMode], str]
    separators: str = ","
    splitter: Callable[[str], list[str]] | None = None
    parse_removal: Callable[[str], T] | None = None
    matches: Callable[[T, T], bool] = _equal
    dedupe: bool = False
    joiner: str = ", "
    pretty_joiner: str | None = None

    def split(self, text: str) -> list[str]:
        if self.splitter is not None:
            return self.splitter(text)
        return [token.strip() for token in split_set(text, self.separators) if token.strip()]

    def parse(self, text: str) -> list[T]:
        items: list[T] = []
        self.add(items, text)
        return items

    def add(self, items: list[T], text: str) -> None:
        """Append each element of `text` to `items` in order.

        Stops at the first invalid element; elements appended before it stay.
        """
        for token in self.split(text):
            item = self.parse_item(token)
            if self.dedupe and item in items:
                continue
            items.append(item)

    def remove(self, items: list[T], text: str) -> None:
        index = parse_int(text, minimum=0)
        if index is not None and index < len(items):
            del items[index]
            return

        parse = self.parse_removal or self.parse_item
        wanted = parse(text.strip())
        for position, item in enumerate(items):
            if self.matches(item, wanted):
                del items[position]
                return

    def render(self, items: list[T], mode: RenderMode) -> str:
        joiner = self.joiner
        if mode == RenderMode.PRETTY and self.pretty_joiner is not None:
            joiner = self.pretty_joiner
        return joiner.join(self.render_item(item, mode) for item in items)
