"""Account commands - inspect and approve accounts in the configured store."""

import asyncio
import sys
from collections.abc import Awaitable, Callable
from typing import TypeVar

import cyclopts

from ogw.application.di import create_container
from ogw.cli.console import get_console
from ogw.domain.account.model.account import Account
from ogw.domain.account.model.value import AccountId
from ogw.domain.account.service.account import AccountService
from ogw.domain.shared.error import GatewayError
from ogw.util.di.scope import Scope

app = cyclopts.App(name="account", help="Inspect and approve accounts")

T = TypeVar("T")


async def _with_service(action: Callable[[AccountService], Awaitable[T]]) -> T:
    container = create_container()
    try:
        async with container(scope=Scope.UOW) as uow:
            service = await uow.get(AccountService)
            return await action(service)
    finally:
        await container.close()


def _print_account(account: Account) -> None:
    console = get_console()
    conditions = ", ".join(
        f"{c.name}@{c.fingerprint[:12]}" if c.fingerprint else c.name
        for c in sorted(account.conditions, key=lambda c: (c.name, c.fingerprint or ""))
    )
    console.table(
        [
            {"field": "id", "value": str(account.id)},
            {"field": "name", "value": account.name or "-"},
            {"field": "email", "value": account.profile.get("email", "-")},
            {"field": "admin", "value": "yes" if account.is_admin else "no"},
            {"field": "groups", "value": ", ".join(sorted(account.groups)) or "-"},
            {"field": "conditions", "value": conditions or "-"},
        ],
        [("field", "Field"), ("value", "Value")],
        title="Account",
    )


def _parse_id(account_id: str) -> AccountId:
    try:
        return AccountId(account_id)
    except ValueError:
        get_console().error(f"Invalid account id: {account_id}")
        sys.exit(2)


@app.command
def show(account_id: str) -> None:
    """Show one account.

    Args:
        account_id: The account's object name.
    """
    console = get_console()
    parsed = _parse_id(account_id)
    try:
        account = asyncio.run(_with_service(lambda service: service.find(parsed)))
    except GatewayError as e:
        console.error(f"Lookup failed: {e.message}", hint="Check storage settings (OGW_STORAGE__*)")
        sys.exit(1)

    if account is None:
        console.error(f"Account not found: {account_id}")
        sys.exit(1)
    _print_account(account)


@app.command
def approve(account_id: str) -> None:
    """Approve an account so it passes the approval prompt.

    Args:
        account_id: The account's object name.
    """
    console = get_console()
    parsed = _parse_id(account_id)
    try:
        account = asyncio.run(_with_service(lambda service: service.approve(parsed)))
    except GatewayError as e:
        console.error(f"Approval failed: {e.message}")
        sys.exit(1)

    console.success(f"Approved {account.id}")
