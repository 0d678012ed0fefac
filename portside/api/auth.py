from __future__ import annotations

import hmac
import os
from typing import Dict, Optional, Protocol

from portside.core.security.identity import CallerIdentity

ANONYMOUS = CallerIdentity(actor_id="anonymous")


class IdentityProvider(Protocol):
    """Resolves the caller behind a request.

    Returning None means "no identity"; callers must treat that as a caller
    without capabilities.
    """

    def resolve(self, api_key: Optional[str]) -> Optional[CallerIdentity]: ...


def _parse_api_keys(raw: str) -> Dict[str, CallerIdentity]:
    """Parse PORTSIDE_API_KEYS into an API key -> CallerIdentity mapping.

    Format (semicolon-separated entries):
      <APIKEY>:<ACTOR_ID>:<cap1,cap2,cap3>;

    Example:
      PORTSIDE_API_KEYS="k1:alice:admin;k2:bob:"

    Security notes:
    - Env var is trusted server configuration.
    - Unknown/invalid entries are ignored (fail-closed by omission).

    """

    out: Dict[str, CallerIdentity] = {}
    for entry in (raw or "").split(";"):
        entry = entry.strip()
        if not entry:
            continue
        parts = entry.split(":", 2)
        if len(parts) != 3:
            continue
        key, actor_id, caps_raw = parts[0].strip(), parts[1].strip(), parts[2].strip()
        if not key or not actor_id:
            continue
        caps = [c.strip() for c in caps_raw.split(",") if c.strip()]
        out[key] = CallerIdentity.from_names(actor_id, caps)
    return out


def load_auth_config() -> Dict[str, CallerIdentity]:
    """Load the API key mapping from the environment."""

    return _parse_api_keys(os.environ.get("PORTSIDE_API_KEYS", ""))


def requires_auth(mapping: Dict[str, CallerIdentity]) -> bool:
    """Return True if callers must present an API key.

    Policy:
    - If PORTSIDE_REQUIRE_AUTH is truthy, always require.
    - Else, require iff at least one API key is configured.

    """

    if os.environ.get("PORTSIDE_REQUIRE_AUTH", "").strip().lower() in {"1", "true", "yes"}:
        return True
    return bool(mapping)


def authenticate(
    api_key: Optional[str], mapping: Dict[str, CallerIdentity]
) -> Optional[CallerIdentity]:
    """Authenticate an API key.

    Security notes:
    - Uses constant-time comparison to reduce timing side-channels.
    - Returns None on failure.

    """

    if not api_key:
        return None

    found: Optional[CallerIdentity] = None
    # Constant-time compare: iterate all keys even after a match.
    for k, identity in mapping.items():
        if hmac.compare_digest(k.encode("utf-8"), api_key.encode("utf-8")):
            found = identity
    return found


class ApiKeyIdentityProvider:
    """Resolve callers from a server-side API key mapping.

    With no keys configured and auth not forced, every caller is the
    capability-less anonymous identity (dev mode).
    """

    def __init__(self, mapping: Dict[str, CallerIdentity], *, must_auth: bool):
        self._mapping = dict(mapping)
        self.must_auth = bool(must_auth)

    @classmethod
    def from_env(cls) -> "ApiKeyIdentityProvider":
        mapping = load_auth_config()
        return cls(mapping, must_auth=requires_auth(mapping))

    def resolve(self, api_key: Optional[str]) -> Optional[CallerIdentity]:
        if not self.must_auth:
            return ANONYMOUS
        return authenticate(api_key, self._mapping)


class StaticIdentityProvider:
    """Always resolves to the same identity (or to none)."""

    def __init__(self, identity: Optional[CallerIdentity]):
        self._identity = identity

    def resolve(self, api_key: Optional[str]) -> Optional[CallerIdentity]:
        return self._identity
