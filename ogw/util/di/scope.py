"""Custom Dishka scopes for the gateway."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """Dependency injection scopes.

    Hierarchy: APP -> UOW

    - APP: Application lifetime (singletons: stores, HTTP clients, policy chain)
    - UOW: Unit of Work (one interaction request)
    """

    APP = new_scope("APP")
    UOW = new_scope("UOW")
