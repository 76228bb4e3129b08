"""Tool dispatcher: routes each MCP tool call to its Gmail handler.

Every entry point returns text. Errors are caught at the tool boundary and
reported as ``Error executing <tool>: <message>`` so the transport never sees
an exception.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from src.gmail import formatter
from src.gmail.auth import build_auth_url, build_gmail_service, load_credentials
from src.gmail.client import GmailClient
from src.gmail.errors import GmailAPIError
from src.gmail.mime import build_message, encode_raw_message
from src.gmail.parser import parse_message
from src.server.config import ServerConfig
from src.server.tools import (
    AddLabelsArgs,
    ComposeArgs,
    MarkAsReadArgs,
    ReadEmailsArgs,
    SearchEmailsArgs,
    ThreadArgs,
    ToolName,
)

logger = logging.getLogger(__name__)

#: Builds the authenticated client the first time a Gmail tool is called.
ClientFactory = Callable[[ServerConfig], GmailClient]


def default_client_factory(config: ServerConfig) -> GmailClient:
    credentials = load_credentials(config.credentials_path, config.token_path)
    return GmailClient(build_gmail_service(credentials))


class GmailToolbox:
    """Owns the Gmail client and implements every tool in the catalog.

    The client is created lazily on the first tool call that needs it and
    reused for the life of the process. get_auth_url never needs it, so it
    works before token.json exists.
    """

    def __init__(
        self,
        config: ServerConfig,
        client_factory: ClientFactory = default_client_factory,
    ) -> None:
        self._config = config
        self._client_factory = client_factory
        self._client: GmailClient | None = None

    # ── Dispatch ───────────────────────────────────────────────────────────────

    async def call(self, name: str, arguments: dict[str, Any] | None = None) -> str:
        """Run one tool and return its text response. Never raises."""
        arguments = arguments or {}
        logger.info("Tool call: %s", name)
        try:
            tool = ToolName.parse(name)
            if tool is ToolName.GET_AUTH_URL:
                return self.get_auth_url()
            return await self._dispatch(tool, self._ensure_client(), arguments)
        except Exception as exc:  # noqa: BLE001
            logger.error("Tool %s failed: %s", name, exc)
            return f"Error executing {name}: {exc}"

    async def _dispatch(
        self, tool: ToolName, client: GmailClient, arguments: dict[str, Any]
    ) -> str:
        if tool is ToolName.READ_EMAILS:
            return await self.read_emails(client, ReadEmailsArgs.from_arguments(arguments))
        if tool is ToolName.SEARCH_EMAILS:
            return await self.search_emails(client, SearchEmailsArgs.from_arguments(arguments))
        if tool is ToolName.SEND_EMAIL:
            return await self.send_email(client, ComposeArgs.from_arguments(arguments))
        if tool is ToolName.CREATE_DRAFT:
            return await self.create_draft(client, ComposeArgs.from_arguments(arguments))
        if tool is ToolName.GET_LABELS:
            return await self.get_labels(client)
        if tool is ToolName.GET_EMAIL_THREAD:
            return await self.get_email_thread(client, ThreadArgs.from_arguments(arguments))
        if tool is ToolName.MARK_AS_READ:
            return await self.mark_as_read(client, MarkAsReadArgs.from_arguments(arguments))
        if tool is ToolName.ADD_LABELS:
            return await self.add_labels(client, AddLabelsArgs.from_arguments(arguments))
        raise AssertionError(f"unhandled tool {tool}")

    def _ensure_client(self) -> GmailClient:
        if self._client is None:
            self._client = self._client_factory(self._config)
            logger.info("Gmail client initialised")
        return self._client

    # ── Reading ────────────────────────────────────────────────────────────────

    async def read_emails(self, client: GmailClient, args: ReadEmailsArgs) -> str:
        ids = await client.list_message_ids(args.query, args.max_results)
        fmt = "full" if args.include_body else "metadata"
        emails = [
            parse_message(await client.get_message(message_id, fmt), args.include_body)
            for message_id in ids
        ]
        return formatter.format_email_list(emails, args.query, args.include_body)

    async def search_emails(self, client: GmailClient, args: SearchEmailsArgs) -> str:
        ids = await client.list_message_ids(args.query, args.max_results)
        emails = [
            parse_message(await client.get_message(message_id, "metadata"))
            for message_id in ids
        ]
        return formatter.format_search_results(emails, args.query)

    async def get_email_thread(self, client: GmailClient, args: ThreadArgs) -> str:
        messages = await client.get_thread(args.thread_id)
        emails = [parse_message(raw, include_body=True) for raw in messages]
        return formatter.format_thread(args.thread_id, emails)

    async def get_labels(self, client: GmailClient) -> str:
        return formatter.format_labels(await client.list_labels())

    # ── Writing ────────────────────────────────────────────────────────────────

    async def send_email(self, client: GmailClient, args: ComposeArgs) -> str:
        result = await client.send_message(_encode(args))
        return formatter.format_sent(args.to, args.subject, result)

    async def create_draft(self, client: GmailClient, args: ComposeArgs) -> str:
        result = await client.create_draft(_encode(args))
        return formatter.format_draft(args.to, args.subject, result)

    async def mark_as_read(self, client: GmailClient, args: MarkAsReadArgs) -> str:
        await _modify_each(args.message_ids, client.mark_read)
        return formatter.format_marked_read(len(args.message_ids))

    async def add_labels(self, client: GmailClient, args: AddLabelsArgs) -> str:
        async def _add(message_id: str) -> Any:
            return await client.modify_message(message_id, add_label_ids=args.label_ids)

        await _modify_each(args.message_ids, _add)
        return formatter.format_labels_added(len(args.message_ids))

    # ── Setup ──────────────────────────────────────────────────────────────────

    def get_auth_url(self) -> str:
        try:
            url = build_auth_url(self._config.credentials_path)
        except Exception as exc:  # noqa: BLE001
            logger.error("Could not build auth URL: %s", exc)
            return (
                f"Error getting auth URL: {exc}\n\n"
                f"Make sure you have credentials.json in: {self._config.credentials_path}"
            )
        return formatter.format_auth_url(
            url, self._config.credentials_path, self._config.token_path
        )


def _encode(args: ComposeArgs) -> str:
    message = build_message(
        args.to, args.subject, args.body, cc=args.cc, bcc=args.bcc, html=args.html
    )
    return encode_raw_message(message)


async def _modify_each(
    message_ids: list[str], modify: Callable[[str], Awaitable[Any]]
) -> None:
    """Apply `modify` to each message in order.

    Stops at the first failure; messages already modified stay modified and
    the error says how many got through.
    """
    for done, message_id in enumerate(message_ids):
        try:
            await modify(message_id)
        except GmailAPIError as exc:
            raise GmailAPIError(
                f"{exc} (message {message_id}; {done} of {len(message_ids)} "
                "message(s) updated before the failure)"
            ) from exc
