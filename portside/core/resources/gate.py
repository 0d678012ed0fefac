from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from portside.core.errors import Unauthorized
from portside.core.security.capabilities import ADMIN, Capability
from portside.core.security.identity import CallerIdentity

log = logging.getLogger("portside.core")


@dataclass(frozen=True)
class Resource:
    """Immutable named payload handed out by a ResourceGate."""

    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name}


DOG = Resource(name="dog")


class ResourceGate:
    """
    Capability gate in front of a constant resource.

    Security invariants
    - Missing identity is treated as a caller without capabilities
    - Fail closed: anything but an explicit capability match raises Unauthorized
    """

    __slots__ = ("_resource", "_required")

    def __init__(self, resource: Resource = DOG, *, required: Capability = ADMIN):
        if not isinstance(resource, Resource):
            raise TypeError("resource must be a Resource instance")
        self._resource = resource
        self._required = required

    def handle(self, identity: Optional[CallerIdentity]) -> Resource:
        """Return the resource if `identity` holds the required capability."""

        if identity is None or not identity.has(self._required):
            log.info(
                "resource_denied",
                extra={
                    "actor_id": getattr(identity, "actor_id", None),
                    "resource": self._resource.name,
                },
            )
            raise Unauthorized()

        log.info(
            "resource_granted",
            extra={"actor_id": identity.actor_id, "resource": self._resource.name},
        )
        return self._resource
