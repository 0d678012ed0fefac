from __future__ import annotations

from typing import Dict, Optional
from urllib.parse import quote, unquote

from starlette.requests import Request
from starlette.responses import Response


class CookieSession:
    """SessionStore backed by the client's cookies.

    Reads come from the request cookies; writes are staged on the response as
    Set-Cookie headers and are visible to later reads in the same request.
    Values are percent-encoded on the wire so any string round-trips.

    Concurrent requests from one client are last-write-wins: the client keeps
    whichever Set-Cookie it applies last.
    """

    def __init__(
        self,
        request: Request,
        response: Response,
        *,
        path: str = "/",
        secure: bool = False,
    ):
        self._request = request
        self._response = response
        self._path = path
        self._secure = secure
        self._pending: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        if key in self._pending:
            return self._pending[key]
        raw = self._request.cookies.get(key)
        if raw is None:
            return None
        return unquote(raw)

    def set(self, key: str, value: str) -> None:
        self._pending[key] = value
        self._response.set_cookie(
            key,
            quote(value, safe=""),
            path=self._path,
            secure=self._secure,
            httponly=True,
            samesite="lax",
        )
