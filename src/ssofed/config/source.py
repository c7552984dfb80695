"""Read-only configuration sources with dotted-path lookup."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ConfigSource(Protocol):
    """Key/value lookup by dotted path, e.g. ``services.sso.client_id``.

    Returns ``None`` for absent keys. Implementations must never write.
    """

    def get(self, path: str) -> Any: ...


class MappingConfigSource:
    """ConfigSource backed by a nested mapping (typically parsed YAML)."""

    def __init__(self, data: Mapping[str, Any] | None = None):
        self._data: Mapping[str, Any] = data or {}

    def get(self, path: str) -> Any:
        current: Any = self._data
        for part in path.split("."):
            if not isinstance(current, Mapping) or part not in current:
                return None
            current = current[part]
        return current

    def __repr__(self) -> str:
        return f"MappingConfigSource(keys={sorted(self._data)})"
