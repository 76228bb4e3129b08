"""CLI command implementations."""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.panel import Panel

from src.gmail.auth import build_auth_url, exchange_code
from src.gmail.errors import ConfigurationError
from src.server.app import run_server
from src.server.config import ServerConfig

logger = logging.getLogger(__name__)
console = Console(width=200)


@click.command()
@click.pass_obj
def serve(config: ServerConfig) -> None:
    """Run the Gmail MCP server on stdio."""
    logger.info(
        "Starting %s (credentials=%s, token=%s)",
        config.server_name,
        config.credentials_path,
        config.token_path,
    )
    try:
        run_server(config)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


@click.command("auth-url")
@click.pass_obj
def auth_url(config: ServerConfig) -> None:
    """Print the OAuth consent URL for this server's Gmail scopes."""
    try:
        url = build_auth_url(config.credentials_path)
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc

    console.print(
        Panel(url, title="[bold]Gmail OAuth2 Authorization[/bold]", border_style="blue")
    )
    console.print(
        "Visit the URL, approve access, then run "
        "[bold]gmail-mcp authorize <code>[/bold] with the code you receive."
    )


@click.command()
@click.argument("code")
@click.pass_obj
def authorize(config: ServerConfig, code: str) -> None:
    """Exchange an authorization CODE for tokens and save token.json."""
    try:
        exchange_code(config.credentials_path, config.token_path, code)
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc
    except Exception as exc:  # noqa: BLE001
        logger.error("Token exchange failed: %s", exc)
        raise click.ClickException(f"Token exchange failed: {exc}") from exc

    console.print(f"[green]Token saved to {config.token_path}[/green]")
