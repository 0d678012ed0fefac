"""Session-scoped state.

Session state is held by the client (a cookie over HTTP); the server keeps
nothing between requests.
"""

from .boat_name import BOAT_NAME_KEY, BoatNameStore
from .store import MemorySession, SessionStore

__all__ = ["BOAT_NAME_KEY", "BoatNameStore", "MemorySession", "SessionStore"]
