"""Setting-group interfaces and an in-memory implementation."""

from __future__ import annotations

import copy
from typing import Any, Protocol

from nmprops.core.errors import PropertyNotFoundError
from nmprops.core.model import SettingInfo


class SettingGroup(Protocol):
    kind: str

    def get(self, name: str) -> Any:
        """Return the current value of property `name`."""

    def set(self, name: str, value: Any) -> None:
        """Store `value` as the new value of property `name`."""


class InMemorySetting:
    """Dict-backed setting group seeded with the descriptor defaults."""

    def __init__(self, info: SettingInfo) -> None:
        self.kind = info.name
        self._values: dict[str, Any] = {
            name: copy.deepcopy(descriptor.default) for name, descriptor in info.properties.items()
        }

    def get(self, name: str) -> Any:
        try:
            return self._values[name]
        except KeyError:
            raise PropertyNotFoundError(f"Setting '{self.kind}' has no property '{name}'") from None

    def set(self, name: str, value: Any) -> None:
        if name not in self._values:
            raise PropertyNotFoundError(f"Setting '{self.kind}' has no property '{name}'")
        self._values[name] = value

    def as_dict(self) -> dict[str, Any]:
        return dict(self._values)


class InMemoryProfile:
    """Ordered bundle of in-memory setting groups keyed by setting kind."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.settings: dict[str, InMemorySetting] = {}

    def add(self, info: SettingInfo) -> InMemorySetting:
        setting = InMemorySetting(info)
        self.settings[info.name] = setting
        return setting

    def get(self, kind: str) -> InMemorySetting | None:
        return self.settings.get(kind)
