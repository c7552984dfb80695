"""Session accessor capability.

The host owns the browser session. The adapter only reads and writes individual
keys through this interface, and never locks or deletes anything.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

NONCE_KEY = "nonce"
CODE_VERIFIER_KEY = "sso_code_verifier"
STATE_KEY = "sso_state"


@runtime_checkable
class SessionAccessor(Protocol):
    """Key/value access scoped to the current user's browser session."""

    def get(self, key: str) -> Any: ...

    def put(self, key: str, value: Any) -> None: ...

    def has(self, key: str) -> bool: ...


class InMemorySession:
    """Dict-backed SessionAccessor for tests and command-line use."""

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._values: dict[str, Any] = dict(values or {})

    def get(self, key: str) -> Any:
        return self._values.get(key)

    def put(self, key: str, value: Any) -> None:
        self._values[key] = value

    def has(self, key: str) -> bool:
        return key in self._values
