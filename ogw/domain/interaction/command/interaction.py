"""Interaction commands: one per prompt answer, plus show and abort."""

from dataclasses import dataclass

from ogw.domain.interaction.model.context import InteractionRequest
from ogw.domain.interaction.model.outcome import InteractionOutcome, Redirect, SessionView
from ogw.domain.interaction.service.controller import InteractionController
from ogw.domain.shared.command import Command, CommandHandler


class InteractionCommand(Command):
    """Base for commands addressed to one pending interaction."""

    uid: str
    session_id: str | None = None  # OIDC session cookie
    site_cookie: str | None = None  # Signed site-session cookie

    def request(self) -> InteractionRequest:
        return InteractionRequest(
            uid=self.uid, session_id=self.session_id, site_cookie=self.site_cookie
        )


class ShowInteraction(InteractionCommand):
    """Serve the first unsatisfied prompt, or finish."""


class GetSessionView(InteractionCommand):
    """Read-only interaction view that degrades to the session on expiry."""


class SubmitName(InteractionCommand):
    name: str


class ConfirmTos(InteractionCommand):
    """Accept the Terms of Service text displayed for this interaction."""


class ConfirmConsent(InteractionCommand):
    pass


class RecheckInteraction(InteractionCommand):
    """Re-run the chain after approval or group membership may have changed."""


class AbortInteraction(InteractionCommand):
    description: str = "End-User aborted interaction"


@dataclass
class ShowInteractionHandler(CommandHandler[ShowInteraction, InteractionOutcome]):
    controller: InteractionController

    async def run(self, cmd: ShowInteraction) -> InteractionOutcome:
        return await self.controller.resolve(cmd.request())


@dataclass
class GetSessionViewHandler(CommandHandler[GetSessionView, SessionView]):
    controller: InteractionController

    async def run(self, cmd: GetSessionView) -> SessionView:
        return await self.controller.session_view(cmd.request())


@dataclass
class SubmitNameHandler(CommandHandler[SubmitName, InteractionOutcome]):
    """Handler for SubmitName. Invalid names surface as ValidationError."""

    controller: InteractionController

    async def run(self, cmd: SubmitName) -> InteractionOutcome:
        return await self.controller.submit_name(cmd.request(), cmd.name)


@dataclass
class ConfirmTosHandler(CommandHandler[ConfirmTos, InteractionOutcome]):
    controller: InteractionController

    async def run(self, cmd: ConfirmTos) -> InteractionOutcome:
        return await self.controller.confirm_tos(cmd.request())


@dataclass
class ConfirmConsentHandler(CommandHandler[ConfirmConsent, InteractionOutcome]):
    controller: InteractionController

    async def run(self, cmd: ConfirmConsent) -> InteractionOutcome:
        return await self.controller.confirm_consent(cmd.request())


@dataclass
class RecheckInteractionHandler(CommandHandler[RecheckInteraction, InteractionOutcome]):
    controller: InteractionController

    async def run(self, cmd: RecheckInteraction) -> InteractionOutcome:
        return await self.controller.recheck(cmd.request())


@dataclass
class AbortInteractionHandler(CommandHandler[AbortInteraction, Redirect]):
    controller: InteractionController

    async def run(self, cmd: AbortInteraction) -> Redirect:
        return await self.controller.abort(cmd.request(), cmd.description)
