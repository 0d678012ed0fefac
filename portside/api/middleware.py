from __future__ import annotations

import logging
import time
from typing import Callable, Optional
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

log = logging.getLogger("portside.api")


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and emit one access log record for it.

    Header:
      - X-Request-ID (client value kept only if short, else a fresh uuid4 hex)

    Security notes:
    - Cookie values and form bodies are never logged.

    """

    def __init__(self, app, *, header_name: str = "X-Request-ID", max_len: int = 128):
        super().__init__(app)
        self._header_name = header_name
        self._max_len = max_len

    async def dispatch(self, request: Request, call_next: Callable):
        rid = request.headers.get(self._header_name)
        if not rid or len(rid) > self._max_len:
            rid = uuid4().hex
        request.state.request_id = rid

        start = time.monotonic()
        response: Optional[Response] = None
        try:
            response = await call_next(request)
            response.headers[self._header_name] = rid
            return response
        finally:
            log.info(
                "api_request",
                extra={
                    "request_id": rid,
                    "actor_id": getattr(request.state, "actor_id", None),
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": getattr(response, "status_code", None),
                    "duration_ms": int((time.monotonic() - start) * 1000),
                },
            )
