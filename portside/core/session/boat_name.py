from __future__ import annotations

from typing import Optional

from .store import SessionStore

BOAT_NAME_KEY = "boatName"


class BoatNameStore:
    """
    The boat name held in a client session.

    States
    - absent until the first rename
    - rename replaces the value unconditionally (empty string included)
    - capitalize upper-cases a present value and leaves an absent one absent
    """

    __slots__ = ("_session", "_key")

    def __init__(self, session: SessionStore, *, key: str = BOAT_NAME_KEY):
        self._session = session
        self._key = key

    def read(self) -> Optional[str]:
        return self._session.get(self._key)

    def rename(self, new_name: str) -> None:
        if not isinstance(new_name, str):
            raise TypeError("boat name must be a string")
        self._session.set(self._key, new_name)

    def capitalize(self) -> None:
        current = self.read()
        if current is None:
            return
        self._session.set(self._key, current.upper())
