"""Server configuration, read from the environment (and .env via python-dotenv)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ServerConfig:
    """Where credentials live and how the server identifies itself."""

    credentials_path: Path = field(default_factory=lambda: Path.cwd() / "credentials.json")
    token_path: Path = field(default_factory=lambda: Path.cwd() / "token.json")
    log_level: str = "INFO"
    server_name: str = "gmail-mcp-server"
    server_version: str = "1.0.0"

    @classmethod
    def from_env(cls) -> ServerConfig:
        """Build ServerConfig from environment variables."""
        defaults = cls()
        return cls(
            credentials_path=_path_from_env("GMAIL_CREDENTIALS_PATH", defaults.credentials_path),
            token_path=_path_from_env("GMAIL_TOKEN_PATH", defaults.token_path),
            log_level=os.environ.get("GMAIL_MCP_LOG_LEVEL", defaults.log_level).upper(),
            server_name=os.environ.get("GMAIL_MCP_SERVER_NAME", defaults.server_name),
        )


def _path_from_env(name: str, default: Path) -> Path:
    value = os.environ.get(name)
    return Path(value).expanduser() if value else default
