"""Capability-gated resources."""

from .gate import DOG, Resource, ResourceGate

__all__ = ["DOG", "Resource", "ResourceGate"]
