"""What an interaction request resolves to."""

from dataclasses import dataclass, field
from typing import Any

from ogw.domain.interaction.model.client import ClientRecord
from ogw.domain.interaction.model.session import SessionRecord


@dataclass(frozen=True)
class SetCookie:
    name: str
    value: str
    max_age: int


@dataclass(frozen=True)
class Render:
    """Show the user the affordance for `prompt`."""

    prompt: str
    template: str
    title: str
    data: dict[str, Any] = field(default_factory=dict)
    wide: bool = False
    cookies: tuple[SetCookie, ...] = ()


@dataclass(frozen=True)
class Redirect:
    """Send the browser elsewhere, typically back to the protocol layer."""

    location: str
    cookies: tuple[SetCookie, ...] = ()


InteractionOutcome = Render | Redirect


@dataclass(frozen=True)
class SessionView:
    """Read-only view of the current interaction.

    Degrades to the bare browser session (no uid, prompt, params or client)
    when the interaction is expired or unknown.
    """

    uid: str | None
    prompt_name: str | None
    params: dict[str, Any]
    session: SessionRecord | None
    client: ClientRecord | None

    @property
    def degraded(self) -> bool:
        return self.uid is None
