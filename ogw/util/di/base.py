"""Base DI provider."""

from dishka import Provider as DishkaProvider

from ogw.util.di.scope import Scope


class Provider(DishkaProvider):
    """Dishka provider defaulting to the unit-of-work scope."""

    scope = Scope.UOW
