"""Stable public API for tools built on top of nmprops.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from nmprops.core.composition import CompositionTable
from nmprops.core.errors import (
    FileReadError,
    InvalidSyntaxError,
    NmpropsError,
    OrderingViolationError,
    OutOfRangeError,
    PropertyError,
    PropertyNotFoundError,
    SumInvariantViolationError,
    TableLoadError,
    TableValidationError,
    UnknownKeyError,
    UnknownOptionError,
    UnsupportedOperationError,
    Utf8Error,
)
from nmprops.core.model import (
    ErrorKind,
    IPAddress,
    IPRoute,
    LinkWatcher,
    PriorityMapping,
    PropertyDescriptor,
    RenderMode,
    Rendered,
    SettingInfo,
    ValidationOutcome,
    ValidPart,
)
from nmprops.core.registry import PropertyRegistry, default_registry
from nmprops.core.setting import InMemoryProfile, InMemorySetting, SettingGroup
from nmprops.core.table_loader import load_composition

__all__ = [
    "NmpropsError",
    "PropertyError",
    "InvalidSyntaxError",
    "OutOfRangeError",
    "UnknownKeyError",
    "UnknownOptionError",
    "OrderingViolationError",
    "SumInvariantViolationError",
    "FileReadError",
    "Utf8Error",
    "PropertyNotFoundError",
    "UnsupportedOperationError",
    "TableLoadError",
    "TableValidationError",
    "ErrorKind",
    "IPAddress",
    "IPRoute",
    "LinkWatcher",
    "PriorityMapping",
    "PropertyDescriptor",
    "RenderMode",
    "Rendered",
    "SettingInfo",
    "ValidationOutcome",
    "ValidPart",
    "SettingGroup",
    "InMemorySetting",
    "InMemoryProfile",
    "Client",
]


class Client:
    """Public client for reading and writing setting properties as text.

    A `Client` wraps the descriptor registry and the composition table. Property
    operations take a `SettingGroup` and a property name (or its CLI alias); the
    group's `kind` selects the setting.
    """

    def __init__(
        self,
        *,
        registry: PropertyRegistry | None = None,
        composition: CompositionTable | None = None,
    ) -> None:
        self._registry = registry or default_registry()
        self._composition = composition or load_composition()

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._registry.load_warnings

    def list_settings(self) -> list[SettingInfo]:
        return self._registry.settings()

    def setting(self, name: str) -> SettingInfo:
        return self._registry.setting(name)

    def lookup(self, setting: str, name: str) -> PropertyDescriptor:
        return self._registry.lookup(setting, name)

    def new_setting(self, setting: str) -> InMemorySetting:
        return InMemorySetting(self._registry.setting(setting))

    def render(
        self,
        group: SettingGroup,
        name: str,
        *,
        mode: RenderMode = RenderMode.PARSABLE,
        show_secrets: bool = False,
    ) -> Rendered:
        descriptor = self.lookup(group.kind, name)
        return self._registry.render(descriptor, group, mode, show_secrets=show_secrets)

    def assign(self, group: SettingGroup, name: str, text: str, *, append: bool = False) -> None:
        descriptor = self.lookup(group.kind, name)
        self._registry.assign(descriptor, group, text, append=append)

    def remove(self, group: SettingGroup, name: str, text: str) -> None:
        descriptor = self.lookup(group.kind, name)
        self._registry.remove(descriptor, group, text)

    def values(self, setting: str, name: str) -> tuple[str, ...]:
        return self._registry.values(self.lookup(setting, name))

    def complete(self, setting: str, name: str, text: str = "") -> tuple[str, ...]:
        return self._registry.complete(self.lookup(setting, name), text)

    def describe(self, setting: str, name: str) -> str:
        return self._registry.describe(self.lookup(setting, name))

    def check(self, setting: str, name: str, text: str) -> ValidationOutcome:
        return self._registry.check(self.lookup(setting, name), text)

    def valid_parts(self, connection_type: str, slave_type: str | None = None) -> list[ValidPart]:
        return self._composition.valid_parts(connection_type, slave_type)

    def slave_setting(self, slave_type: str) -> str:
        return self._composition.slave_setting(slave_type)
