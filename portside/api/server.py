from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, FastAPI, Header, Response
from fastapi.responses import JSONResponse
from starlette.requests import Request

from portside.api.auth import ApiKeyIdentityProvider, IdentityProvider
from portside.api.cookies import CookieSession
from portside.api.middleware import RequestLogMiddleware
from portside.api.models import BoatOut, ErrorOut, HealthOut, ResourceOut
from portside.core.errors import MissingFormField, PortsideError
from portside.core.resources import DOG, ResourceGate
from portside.core.security.identity import CallerIdentity
from portside.core.session import BOAT_NAME_KEY, BoatNameStore

log = logging.getLogger("portside.api")


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean environment variable.

    Security notes:
    - Env vars are treated as trusted server configuration.

    """

    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return bool(default)
    if raw in {"1", "true", "yes", "on"}:
        return True
    if raw in {"0", "false", "no", "off"}:
        return False
    return bool(default)


def _env_log_level(name: str, default: str = "INFO") -> str:
    """Read a logging level name; unknown names fall back to `default`."""

    raw = os.environ.get(name, "").strip().upper()
    if raw and isinstance(logging.getLevelName(raw), int):
        return raw
    return default


@dataclass(frozen=True, slots=True)
class ServiceConfig:
    """Configuration for the API service."""

    cookie_path: str = "/"
    cookie_secure: bool = False
    log_level: str = "INFO"

    @staticmethod
    def from_env() -> "ServiceConfig":
        """Read PORTSIDE_COOKIE_PATH, PORTSIDE_COOKIE_SECURE and PORTSIDE_LOG_LEVEL."""

        return ServiceConfig(
            cookie_path=os.environ.get("PORTSIDE_COOKIE_PATH", "").strip() or "/",
            cookie_secure=_env_bool("PORTSIDE_COOKIE_SECURE", False),
            log_level=_env_log_level("PORTSIDE_LOG_LEVEL"),
        )


def create_app(
    *,
    config: Optional[ServiceConfig] = None,
    identity_provider: Optional[IdentityProvider] = None,
) -> FastAPI:
    """Create the FastAPI app.

    `identity_provider` decides who the caller is; by default callers are
    resolved from the PORTSIDE_API_KEYS mapping.
    """

    cfg = config or ServiceConfig.from_env()
    provider = identity_provider or ApiKeyIdentityProvider.from_env()
    gate = ResourceGate(DOG)

    log.setLevel(cfg.log_level)
    logging.getLogger("portside.core").setLevel(cfg.log_level)

    app = FastAPI(title="Portside API", version="0.1")

    app.state.cfg = cfg
    app.state.identity_provider = provider
    app.state.gate = gate

    app.add_middleware(RequestLogMiddleware)

    @app.exception_handler(PortsideError)
    async def _portside_error(request: Request, exc: PortsideError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorOut(message=exc.message).model_dump(),
        )

    def get_identity(
        request: Request,
        x_portside_api_key: Optional[str] = Header(default=None),
    ) -> Optional[CallerIdentity]:
        """Resolve the caller; None when the key is missing or unknown."""

        identity = provider.resolve(x_portside_api_key)
        if identity is not None:
            # Attach actor for the access log.
            request.state.actor_id = identity.actor_id
        return identity

    def get_boat_store(request: Request, response: Response) -> BoatNameStore:
        session = CookieSession(
            request,
            response,
            path=cfg.cookie_path,
            secure=cfg.cookie_secure,
        )
        return BoatNameStore(session, key=BOAT_NAME_KEY)

    @app.get("/health", response_model=HealthOut)
    def health() -> HealthOut:
        return HealthOut(ok=True, auth_required=bool(getattr(provider, "must_auth", False)))

    @app.get("/api/dog")
    async def read_dog(request: Request) -> Response:
        """Unauthenticated read: the request context is accepted and ignored."""

        log.debug(
            "dog_read",
            extra={
                "cookie_count": len(request.cookies),
                "param_count": len(request.query_params),
            },
        )
        return Response(status_code=200)

    @app.post(
        "/api/dog",
        response_model=ResourceOut,
        responses={401: {"model": ErrorOut}},
    )
    def post_dog(identity: Optional[CallerIdentity] = Depends(get_identity)) -> ResourceOut:
        """Return the dog resource to admin callers.

        Security notes:
        - Missing or unknown API keys fail closed (401).

        """

        resource = gate.handle(identity)
        return ResourceOut(**resource.to_dict())

    @app.get("/boats", response_model=BoatOut)
    def load_boat(store: BoatNameStore = Depends(get_boat_store)) -> BoatOut:
        return BoatOut(boatName=store.read())

    @app.post(
        "/boats/rename",
        response_model=BoatOut,
        responses={422: {"model": ErrorOut}},
    )
    async def rename_boat(
        request: Request,
        store: BoatNameStore = Depends(get_boat_store),
    ) -> BoatOut:
        """Replace the session boat name with the `boatName` form field.

        The field must be present; any string, including an empty one, is stored.
        """

        form = await request.form()
        value = form.get(BOAT_NAME_KEY)
        if not isinstance(value, str):
            raise MissingFormField(BOAT_NAME_KEY)
        store.rename(value)
        return BoatOut(boatName=store.read())

    @app.post("/boats/capitalize", response_model=BoatOut)
    def capitalize_boat(store: BoatNameStore = Depends(get_boat_store)) -> BoatOut:
        store.capitalize()
        return BoatOut(boatName=store.read())

    return app


def app_from_env() -> FastAPI:
    """Factory used by Uvicorn entrypoints."""

    return create_app()


# Default ASGI app (importable as portside.api.server:app)
app = app_from_env()
