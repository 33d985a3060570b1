"""Which setting groups a connection type (and slave type) may carry."""

from __future__ import annotations

from dataclasses import dataclass

from nmprops.core.errors import UnknownKeyError
from nmprops.core.model import SlaveParts, ValidPart


@dataclass(frozen=True)
class CompositionTable:
    connection_types: dict[str, tuple[ValidPart, ...]]
    no_slave_parts: tuple[ValidPart, ...]
    slave_types: dict[str, SlaveParts]

    def _slave(self, slave_type: str) -> SlaveParts:
        try:
            return self.slave_types[slave_type]
        except KeyError:
            allowed = ", ".join(sorted(self.slave_types))
            raise UnknownKeyError(f"Unknown slave type '{slave_type}'. Allowed: {allowed}") from None

    def valid_parts(self, connection_type: str, slave_type: str | None = None) -> list[ValidPart]:
        """Ordered parts: the type's own, then the slave parts or the non-slave extras."""
        try:
            parts = list(self.connection_types[connection_type])
        except KeyError:
            allowed = ", ".join(sorted(self.connection_types))
            raise UnknownKeyError(
                f"Unknown connection type '{connection_type}'. Allowed: {allowed}"
            ) from None

        if slave_type:
            parts.extend(self._slave(slave_type).parts)
        else:
            parts.extend(self.no_slave_parts)
        return parts

    def slave_setting(self, slave_type: str) -> str:
        return self._slave(slave_type).slave_setting
