from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Capability:
    """
    A named permission a caller may hold, e.g. ``admin``.

    Names are compared after stripping and lower-casing, so ``" Admin "``
    and ``"admin"`` grant the same access. Instances are hashable and are
    kept in the frozenset on CallerIdentity.
    """

    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str):
            raise TypeError("Capability name must be a string")

        cleaned = self.name.strip().lower()
        if not cleaned:
            raise ValueError("Capability name must be non-empty")

        object.__setattr__(self, "name", cleaned)


# Required by the dog resource gate.
ADMIN = Capability("admin")
