"""OAuth2 credential loading for the Gmail API.

Two files are involved:

- ``credentials.json``: the OAuth client downloaded from Google Cloud Console
  (an "installed" or "web" client).
- ``token.json``: the authorized-user token produced by the consent flow.
  Both the google-auth layout (``token``) and the Node googleapis layout
  (``access_token``) are accepted.

Token refresh is left to google-auth; nothing here rewrites token.json except
the explicit code exchange in `exchange_code`.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build

from src.gmail.errors import ConfigurationError

logger = logging.getLogger(__name__)

SCOPES: list[str] = [
    "https://www.googleapis.com/auth/gmail.readonly",
    "https://www.googleapis.com/auth/gmail.send",
    "https://www.googleapis.com/auth/gmail.modify",
    "https://www.googleapis.com/auth/gmail.labels",
]

_DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"


@dataclass(frozen=True)
class ClientSecrets:
    """The parts of credentials.json the server needs."""

    client_id: str
    client_secret: str
    redirect_uri: str
    token_uri: str
    config: dict[str, Any]


def load_client_secrets(credentials_path: Path) -> ClientSecrets:
    """Read the OAuth client from credentials.json.

    Raises ConfigurationError if the file is missing or malformed.
    """
    if not credentials_path.exists():
        raise ConfigurationError(f"Credentials file not found: {credentials_path}")
    try:
        config = json.loads(credentials_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigurationError(f"Could not read {credentials_path}: {exc}") from exc

    section = None
    if isinstance(config, dict):
        section = config.get("installed") or config.get("web")
    if not section:
        raise ConfigurationError(
            f"{credentials_path} has no 'installed' or 'web' OAuth client section"
        )
    try:
        return ClientSecrets(
            client_id=section["client_id"],
            client_secret=section["client_secret"],
            redirect_uri=(section.get("redirect_uris") or ["http://localhost"])[0],
            token_uri=section.get("token_uri", _DEFAULT_TOKEN_URI),
            config=config,
        )
    except KeyError as exc:
        raise ConfigurationError(f"{credentials_path} is missing {exc.args[0]!r}") from exc


def load_credentials(credentials_path: Path, token_path: Path) -> Credentials:
    """Build google-auth Credentials from the client file and the saved token.

    Raises ConfigurationError("Failed to initialize Gmail API: ...") when
    either file is missing or unreadable.
    """
    try:
        secrets = load_client_secrets(credentials_path)
        if not token_path.exists():
            raise ConfigurationError(
                "Token not found. Please run authentication flow first. "
                f"Token should be at: {token_path}"
            )
        try:
            token = json.loads(token_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ConfigurationError(f"Could not read {token_path}: {exc}") from exc
    except ConfigurationError as exc:
        raise ConfigurationError(f"Failed to initialize Gmail API: {exc}") from exc

    scopes = token.get("scopes") or token.get("scope") or SCOPES
    if isinstance(scopes, str):
        scopes = scopes.split()

    return Credentials(
        token=token.get("token") or token.get("access_token"),
        refresh_token=token.get("refresh_token"),
        token_uri=token.get("token_uri") or secrets.token_uri,
        client_id=secrets.client_id,
        client_secret=secrets.client_secret,
        scopes=scopes,
    )


def build_gmail_service(credentials: Credentials) -> Any:
    """Return a googleapiclient Gmail v1 resource bound to `credentials`."""
    service = build("gmail", "v1", credentials=credentials, cache_discovery=False)
    logger.info("Gmail API service built")
    return service


# ── Consent flow ───────────────────────────────────────────────────────────────


def _create_flow(secrets: ClientSecrets) -> Flow:
    # No PKCE verifier: the URL and the code exchange happen in separate processes.
    return Flow.from_client_config(
        secrets.config,
        scopes=SCOPES,
        redirect_uri=secrets.redirect_uri,
        autogenerate_code_verifier=False,
    )


def build_auth_url(credentials_path: Path) -> str:
    """Return the consent URL for offline access to the Gmail scopes."""
    flow = _create_flow(load_client_secrets(credentials_path))
    url, _state = flow.authorization_url(access_type="offline")
    return url


def exchange_code(credentials_path: Path, token_path: Path, code: str) -> Credentials:
    """Trade an authorization code for tokens and save them to token.json."""
    flow = _create_flow(load_client_secrets(credentials_path))
    flow.fetch_token(code=code)
    credentials = flow.credentials
    token_path.parent.mkdir(parents=True, exist_ok=True)
    token_path.write_text(credentials.to_json(), encoding="utf-8")
    logger.info("Saved Gmail token to %s", token_path)
    return credentials
