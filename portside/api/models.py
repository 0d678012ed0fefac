from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class ErrorOut(BaseModel):
    """Error payload rendered for PortsideError failures."""

    message: str


class ResourceOut(BaseModel):
    """A gated resource."""

    name: str


class BoatOut(BaseModel):
    """Current boat name of the calling session (null when never set)."""

    boatName: Optional[str] = None


class HealthOut(BaseModel):
    ok: bool = True
    auth_required: bool = False
