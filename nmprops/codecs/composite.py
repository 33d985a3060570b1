"""Codecs for structured values built on the composite parsers."""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import Any

from nmprops.codecs.base import BaseCodec
from nmprops.core.model import IPAddress, IPRoute, LinkWatcher, PriorityMapping, RenderMode
from nmprops.core.multivalue import IndexedMultiValue
from nmprops.parsers.address import parse_ip, parse_ip_address, render_ip_address
from nmprops.parsers.dcb_array import DCB_ARRAY_LEN, parse_dcb_array, render_dcb_array
from nmprops.parsers.link_watcher import parse_link_watcher, render_link_watcher
from nmprops.parsers.option_map import (
    KeyValidator,
    ValueValidator,
    key_in,
    parse_option,
    parse_option_map,
    render_option_map,
    split_option,
)
from nmprops.parsers.priority_map import (
    mapping_matches,
    parse_priority_mapping,
    render_priority_mapping,
)
from nmprops.parsers.route import parse_ip_route, render_ip_route
from nmprops.parsers.tokens import resolve_choice


class ListCodec(BaseCodec):
    """Multi-valued codec delegating element handling to an `IndexedMultiValue`."""

    is_multi_valued = True

    def __init__(self, multi: IndexedMultiValue[Any], *, values: tuple[str, ...] = ()) -> None:
        self.multi = multi
        self._values = values

    def default(self) -> list[Any]:
        return []

    def parse(self, text: str) -> list[Any]:
        return self.multi.parse(text)

    def render(self, value: list[Any], mode: RenderMode) -> str:
        return self.multi.render(value, mode)

    def is_default(self, value: list[Any]) -> bool:
        return not value

    def add(self, items: list[Any], text: str) -> None:
        self.multi.add(items, text)

    def remove(self, items: list[Any], text: str) -> None:
        self.multi.remove(items, text)

    def values(self) -> tuple[str, ...] | None:
        return self._values or None


def _render_plain(item: Any, mode: RenderMode) -> str:
    return str(item)


def ip_address_list_codec(family: int) -> ListCodec:
    def render(address: IPAddress, mode: RenderMode) -> str:
        return render_ip_address(address)

    return ListCodec(
        IndexedMultiValue(parse_item=partial(parse_ip_address, family=family), render_item=render)
    )


def ip_route_list_codec(family: int) -> ListCodec:
    def matches(stored: IPRoute, wanted: IPRoute) -> bool:
        # Attributes are not part of a route's identity when removing by value.
        return (stored.dest, stored.prefix, stored.next_hop, stored.metric) == (
            wanted.dest,
            wanted.prefix,
            wanted.next_hop,
            wanted.metric,
        )

    return ListCodec(
        IndexedMultiValue(
            parse_item=partial(parse_ip_route, family=family),
            render_item=render_ip_route,
            matches=matches,
            pretty_joiner="; ",
        )
    )


def link_watcher_list_codec() -> ListCodec:
    def render(watcher: LinkWatcher, mode: RenderMode) -> str:
        return render_link_watcher(watcher)

    return ListCodec(IndexedMultiValue(parse_item=parse_link_watcher, render_item=render))


def priority_map_codec(direction: str) -> ListCodec:
    def render(mapping: PriorityMapping, mode: RenderMode) -> str:
        return render_priority_mapping(mapping)

    return ListCodec(
        IndexedMultiValue(
            parse_item=partial(parse_priority_mapping, direction=direction),
            parse_removal=partial(parse_priority_mapping, direction=direction, allow_wildcard=True),
            render_item=render,
            matches=mapping_matches,
            joiner=",",
        )
    )


def string_list_codec(
    *,
    separators: str = " \t,",
    values: tuple[str, ...] = (),
    item_parser: Callable[[str], Any] | None = None,
    item_renderer: Callable[[Any, RenderMode], str] | None = None,
    splitter: Callable[[str], list[str]] | None = None,
    dedupe: bool = False,
    joiner: str = ",",
) -> ListCodec:
    parse_item = item_parser or str
    if values:
        parse_item = partial(resolve_choice, choices=values)
    return ListCodec(
        IndexedMultiValue(
            parse_item=parse_item,
            render_item=item_renderer or _render_plain,
            separators=separators,
            splitter=splitter,
            dedupe=dedupe,
            joiner=joiner,
        ),
        values=values,
    )


class IPAddressCodec(BaseCodec):
    """A single bare address without prefix (e.g. a gateway)."""

    def __init__(self, family: int) -> None:
        self.family = family

    def parse(self, text: str) -> str:
        return parse_ip(text, self.family)


class DcbArrayCodec(BaseCodec):
    def __init__(self, *, maximum: int, other: int = 0, percent: bool = False) -> None:
        self.maximum = maximum
        self.other = other
        self.percent = percent

    def default(self) -> tuple[int, ...]:
        return (0,) * DCB_ARRAY_LEN

    def parse(self, text: str) -> tuple[int, ...]:
        return parse_dcb_array(text, maximum=self.maximum, other=self.other, percent=self.percent)

    def render(self, value: tuple[int, ...], mode: RenderMode) -> str:
        return render_dcb_array(value)


class OptionMapCodec(BaseCodec):
    """`key=value` option map; elements are added per pair and removed by key."""

    is_multi_valued = True

    def __init__(
        self,
        *,
        valid_keys: tuple[str, ...] = (),
        value_validator: ValueValidator | None = None,
        value_renderer: Callable[[str, str], str] | None = None,
        separator: str = "=",
        joiner: str = ",",
    ) -> None:
        self.valid_keys = valid_keys
        self.key_validator: KeyValidator | None = key_in(valid_keys) if valid_keys else None
        self.value_validator = value_validator
        self.value_renderer = value_renderer
        self.separator = separator
        self.joiner = joiner

    def default(self) -> dict[str, str]:
        return {}

    def parse(self, text: str) -> dict[str, str]:
        return parse_option_map(text, key_validator=self.key_validator, value_validator=self.value_validator)

    def render(self, value: dict[str, str], mode: RenderMode) -> str:
        if self.value_renderer is not None:
            value = {key: self.value_renderer(key, item) for key, item in value.items()}
        return render_option_map(value, separator=self.separator, joiner=self.joiner)

    def is_default(self, value: dict[str, str]) -> bool:
        return not value

    def add(self, items: dict[str, str], text: str) -> None:
        for pair in text.split(","):
            key, value = parse_option(pair, key_validator=self.key_validator, value_validator=self.value_validator)
            items[key] = value

    def remove(self, items: dict[str, str], text: str) -> None:
        key = text.strip()
        if "=" in key:
            key, _ = split_option(key)
        if self.key_validator is not None:
            key = self.key_validator(key)
        items.pop(key, None)

    def values(self) -> tuple[str, ...] | None:
        return self.valid_keys or None
