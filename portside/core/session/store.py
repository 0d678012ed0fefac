from __future__ import annotations

from typing import Dict, Optional, Protocol


class SessionStore(Protocol):
    """Client-scoped key-value session state."""

    def get(self, key: str) -> Optional[str]:
        """Return the value stored under ``key``, or None when absent."""

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""


class MemorySession:
    """Dict-backed SessionStore.

    Holds state for a single client in process memory; the HTTP layer uses a
    cookie-backed implementation instead.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def snapshot(self) -> Dict[str, str]:
        return dict(self._values)
