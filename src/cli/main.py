"""CLI entry point for the Gmail MCP server."""

import logging

import click
from dotenv import load_dotenv

from src.server.config import ServerConfig

logger = logging.getLogger(__name__)


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Gmail MCP server: serve tools over stdio and manage OAuth setup."""
    load_dotenv()
    config = ServerConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    )
    ctx.obj = config


# Import and register commands after cli is defined to avoid circular imports.
from src.cli.commands import auth_url, authorize, serve  # noqa: E402

cli.add_command(serve)
cli.add_command(auth_url)
cli.add_command(authorize)
