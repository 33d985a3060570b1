"""Descriptor registry: the entry point for rendering, assigning and removing properties."""

from __future__ import annotations

import copy
import logging
from functools import lru_cache

from nmprops.core.errors import PropertyError, PropertyNotFoundError, UnsupportedOperationError
from nmprops.core.model import PropertyDescriptor, RenderMode, Rendered, SettingInfo, ValidationOutcome
from nmprops.core.setting import SettingGroup
from nmprops.core.table_loader import load_tables

HIDDEN = "<hidden>"
# Flag bit that must be set on an `enabled_by` property for its dependents to take effect.
_ENABLE_FLAG = 0x1
LOGGER = logging.getLogger(__name__)


class PropertyRegistry:
    def __init__(self, settings: dict[str, SettingInfo], *, warnings: tuple[str, ...] = ()) -> None:
        self._settings = settings
        self.load_warnings = warnings

    @classmethod
    def load(cls) -> PropertyRegistry:
        loaded = load_tables()
        return cls(loaded.settings, warnings=loaded.warnings)

    def settings(self) -> list[SettingInfo]:
        return [self._settings[name] for name in sorted(self._settings)]

    def setting(self, name: str) -> SettingInfo:
        try:
            return self._settings[name]
        except KeyError:
            allowed = ", ".join(sorted(self._settings))
            raise PropertyNotFoundError(f"Unknown setting '{name}'. Allowed: {allowed}") from None

    def lookup(self, setting: str, name: str) -> PropertyDescriptor:
        info = self.setting(setting)
        descriptor = info.properties.get(name)
        if descriptor is not None:
            return descriptor
        for candidate in info.properties.values():
            if candidate.cli_alias == name:
                return candidate
        allowed = ", ".join(info.properties)
        raise PropertyNotFoundError(f"Unknown property '{name}' for setting '{setting}'. Allowed: {allowed}")

    def _check_group(self, descriptor: PropertyDescriptor, group: SettingGroup) -> None:
        if group.kind != descriptor.setting:
            raise UnsupportedOperationError(
                f"Property '{descriptor.setting}.{descriptor.name}' does not belong to setting '{group.kind}'"
            )

    def render(
        self,
        descriptor: PropertyDescriptor,
        group: SettingGroup,
        mode: RenderMode = RenderMode.PARSABLE,
        *,
        show_secrets: bool = False,
    ) -> Rendered:
        self._check_group(descriptor, group)
        if descriptor.is_secret and not show_secrets:
            return Rendered(text=HIDDEN, is_default=True)
        value = group.get(descriptor.name)
        return Rendered(
            text=descriptor.codec.render(value, mode),
            is_default=descriptor.codec.is_default(value),
        )

    def reset(self, descriptor: PropertyDescriptor, group: SettingGroup) -> None:
        self._check_group(descriptor, group)
        LOGGER.debug("Resetting %s.%s to its default", descriptor.setting, descriptor.name)
        group.set(descriptor.name, copy.deepcopy(descriptor.default))

    def assign(
        self,
        descriptor: PropertyDescriptor,
        group: SettingGroup,
        text: str,
        *,
        append: bool = False,
    ) -> None:
        """Set a property from user text.

        An empty string resets to the default. Replacing writes nothing when the
        text is rejected. Appending adds elements one at a time, and elements
        added before a rejected one are kept. Properties with a setter hook
        (WEP keys, private keys) store through it and may update siblings.
        """
        if text == "":
            self.reset(descriptor, group)
            return

        self._check_group(descriptor, group)
        if append:
            self._append(descriptor, group, text)
        elif descriptor.setter is not None:
            descriptor.setter(descriptor, group, text)
        else:
            group.set(descriptor.name, descriptor.codec.parse(text))
        self._warn_if_disabled(descriptor, group)

    def _append(self, descriptor: PropertyDescriptor, group: SettingGroup, text: str) -> None:
        if not descriptor.is_multi_valued:
            raise UnsupportedOperationError(
                f"Property '{descriptor.setting}.{descriptor.name}' is not multi-valued; cannot append"
            )
        items = copy.copy(group.get(descriptor.name))
        try:
            descriptor.codec.add(items, text)
        finally:
            group.set(descriptor.name, items)

    def _warn_if_disabled(self, descriptor: PropertyDescriptor, group: SettingGroup) -> None:
        if descriptor.enabled_by is None:
            return
        flags = group.get(descriptor.enabled_by)
        if not flags & _ENABLE_FLAG:
            LOGGER.warning(
                "changes will have no effect until '%s' includes 1 (enabled)",
                descriptor.enabled_by,
            )

    def remove(self, descriptor: PropertyDescriptor, group: SettingGroup, text: str) -> None:
        """Remove one element, selected by index or by value; an absent value is a no-op."""
        self._check_group(descriptor, group)
        if not descriptor.is_multi_valued:
            raise UnsupportedOperationError(
                f"Property '{descriptor.setting}.{descriptor.name}' is not multi-valued; cannot remove"
            )
        items = copy.copy(group.get(descriptor.name))
        descriptor.codec.remove(items, text)
        group.set(descriptor.name, items)

    def check(self, descriptor: PropertyDescriptor, text: str) -> ValidationOutcome:
        """Parse `text` without assigning it and report the outcome instead of raising."""
        if text == "":
            return ValidationOutcome(ok=True, value=copy.deepcopy(descriptor.default))
        try:
            value = descriptor.codec.parse(text)
        except PropertyError as exc:
            return ValidationOutcome(ok=False, kind=exc.kind, message=str(exc))
        return ValidationOutcome(ok=True, value=value)

    def values(self, descriptor: PropertyDescriptor) -> tuple[str, ...]:
        return descriptor.codec.values() or descriptor.values

    def complete(self, descriptor: PropertyDescriptor, text: str) -> tuple[str, ...]:
        candidates = descriptor.codec.complete(text)
        if candidates is None:
            candidates = self.values(descriptor)
        wanted = text.casefold()
        return tuple(candidate for candidate in candidates if candidate.casefold().startswith(wanted))

    def describe(self, descriptor: PropertyDescriptor) -> str:
        lines = [f"=== [{descriptor.name}] ==="]
        if descriptor.describe:
            lines.append(descriptor.describe)
        values = self.values(descriptor)
        if values:
            lines.append(f"Allowed values: {', '.join(values)}")
        if descriptor.is_multi_valued:
            lines.append("Multiple values may be given; '+' appends and '-' removes by value or index.")
        return "\n".join(lines)


@lru_cache(maxsize=1)
def default_registry() -> PropertyRegistry:
    return PropertyRegistry.load()
