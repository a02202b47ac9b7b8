"""Serve command - run the interaction gateway."""

import cyclopts
import uvicorn

from ogw.cli.console import get_console
from ogw.config import Config

app = cyclopts.App(name="serve", help="Run the interaction gateway")


@app.default
def serve(host: str | None = None, port: int | None = None, reload: bool = False) -> None:
    """Run the HTTP server in the foreground.

    Args:
        host: Bind address (default: server.host from config).
        port: Bind port (default: server.port from config).
        reload: Restart on code changes (development only).
    """
    config = Config()  # type: ignore[call-arg]
    host = host or config.server.host
    port = port or config.server.port

    get_console().info(f"Serving {config.server.name} on http://{host}:{port}")
    uvicorn.run(
        "ogw.application.api.rest.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_config=None,  # configure_logging owns the root logger
    )
