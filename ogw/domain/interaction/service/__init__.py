"""Interaction domain services."""

from .controller import InteractionController
from .policy import build_policy_chain

__all__ = ["InteractionController", "build_policy_chain"]
