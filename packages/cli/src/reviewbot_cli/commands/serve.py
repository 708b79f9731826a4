"""serve command — run the webhook server."""

from __future__ import annotations

import logging

import click
import uvicorn
from rich.logging import RichHandler


@click.command("serve")
@click.option("--host", default="0.0.0.0", show_default=True, help="Interface to bind.")
@click.option("--port", type=int, default=8000, show_default=True, help="Port to listen on.")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="info",
    show_default=True,
)
@click.pass_context
def serve_cmd(ctx, host: str, port: int, log_level: str):
    """Serve the GitHub App webhook endpoint at /api/webhook.

    \b
    Required environment variables:
      GITHUB_APP_ID           GitHub App id
      GITHUB_PRIVATE_KEY      GitHub App private key (PEM)
      GITHUB_WEBHOOK_SECRET   Secret used to sign webhook deliveries
      ANTHROPIC_API_KEY       When AI review uses the anthropic provider
    """
    from reviewbot_core.config import load_config
    from reviewbot_server.app import create_app

    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )

    config_path = ctx.obj.get("config_path") if ctx.obj else None
    try:
        app = create_app(load_config(config_path))
    except ValueError as e:
        raise click.UsageError(str(e))

    uvicorn.run(app, host=host, port=port, log_level=log_level, log_config=None)
