"""Core data models used across parsers, codecs, registry, and CLI."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from nmprops.codecs.base import Codec


class RenderMode(str, Enum):
    PARSABLE = "parsable"
    PRETTY = "pretty"


class ErrorKind(str, Enum):
    INVALID_SYNTAX = "invalid-syntax"
    OUT_OF_RANGE = "out-of-range"
    UNKNOWN_KEY = "unknown-key"
    UNKNOWN_OPTION = "unknown-option"
    ORDERING_VIOLATION = "ordering-violation"
    SUM_INVARIANT_VIOLATION = "sum-invariant-violation"
    FILE_READ = "file-read"
    UTF8 = "utf8"


@dataclass(frozen=True)
class IPAddress:
    family: int
    address: str
    prefix: int


@dataclass(frozen=True)
class IPRoute:
    family: int
    dest: str
    prefix: int
    next_hop: str | None = None
    metric: int = -1
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LinkWatcher:
    name: str
    delay_up: int = 0
    delay_down: int = 0
    init_wait: int = 0
    interval: int = 0
    missed_max: int = 3
    target_host: str | None = None
    source_host: str | None = None
    vlanid: int = -1
    validate_active: bool = False
    validate_inactive: bool = False
    send_always: bool = False


@dataclass(frozen=True)
class PriorityMapping:
    source: int
    target: int | None


@dataclass(frozen=True)
class EnumValue:
    value: int
    nick: str
    label: str | None = None


@dataclass(frozen=True)
class EnumType:
    name: str
    is_flags: bool
    values: tuple[EnumValue, ...]
    aliases: dict[str, int]
    hex_numbers: bool | None = None


@dataclass(frozen=True)
class PropertyDescriptor:
    setting: str
    name: str
    codec: Codec
    is_secret: bool = False
    is_required: bool = False
    is_cli_primary: bool = False
    cli_alias: str | None = None
    values: tuple[str, ...] = ()
    describe: str | None = None
    default: Any = None
    enabled_by: str | None = None
    # Replaces the plain parse-and-store on assignment; may update sibling properties.
    setter: Callable[..., None] | None = None

    @property
    def is_multi_valued(self) -> bool:
        return self.codec.is_multi_valued


@dataclass(frozen=True)
class SettingInfo:
    name: str
    title: str
    properties: dict[str, PropertyDescriptor]


@dataclass(frozen=True)
class Rendered:
    text: str
    is_default: bool


@dataclass(frozen=True)
class ValidationOutcome:
    ok: bool
    value: Any = None
    kind: ErrorKind | None = None
    message: str | None = None


@dataclass(frozen=True)
class ValidPart:
    setting: str
    mandatory: bool


@dataclass(frozen=True)
class SlaveParts:
    slave_setting: str
    parts: tuple[ValidPart, ...]
