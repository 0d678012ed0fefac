from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable

from .capabilities import ADMIN, Capability


@dataclass(frozen=True)
class CallerIdentity:
    """
    Authenticated caller, built per request by an identity provider.

    Security invariants
    - Capabilities are granted server-side, never taken from the request
    - Capabilities stored as a frozenset of Capability
    """

    actor_id: str
    capabilities: FrozenSet[Capability] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.actor_id, str):
            raise TypeError("actor_id must be a string")

        aid = self.actor_id.strip()
        if not aid:
            raise ValueError("actor_id must be non-empty")

        object.__setattr__(self, "actor_id", aid)

        caps = self.capabilities
        if not isinstance(caps, frozenset):
            try:
                caps = frozenset(caps)
            except TypeError as e:
                raise TypeError("capabilities must be iterable of Capability") from e

        for c in caps:
            if not isinstance(c, Capability):
                raise TypeError("capabilities must contain only Capability instances")

        object.__setattr__(self, "capabilities", caps)

    @classmethod
    def from_names(cls, actor_id: str, capability_names: Iterable[str]) -> "CallerIdentity":
        caps = frozenset(Capability(name) for name in capability_names)
        return cls(actor_id=actor_id, capabilities=caps)

    def has(self, capability: Capability) -> bool:
        if not isinstance(capability, Capability):
            raise TypeError("capability must be a Capability instance")
        return capability in self.capabilities

    @property
    def admin(self) -> bool:
        return self.has(ADMIN)
