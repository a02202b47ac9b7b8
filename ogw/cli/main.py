"""Main CLI application using Cyclopts."""

import cyclopts

from ogw.cli.commands import account, serve

app = cyclopts.App(
    name="ogw",
    help="OIDC Gateway - interaction engine",
)

app.command(serve.app, name="serve")
app.command(account.app, name="account")
