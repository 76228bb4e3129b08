"""Gmail API client: wraps the googleapiclient Gmail v1 resource behind a typed async API."""

import logging
from collections.abc import Callable
from typing import Any

from anyio import to_thread
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError
from httplib2 import HttpLib2Error

from src.gmail.errors import GmailAPIError
from src.gmail.types import LabelInfo, RawMessage

logger = logging.getLogger(__name__)

#: Gmail's alias for the authenticated mailbox.
_ME = "me"

#: Hard cap on a single messages.list page.
MAX_RESULTS_CAP = 100

_UNREAD = "UNREAD"


class GmailClient:
    """Thin async wrapper around a googleapiclient Gmail service.

    The underlying client is synchronous, so every request runs in a worker
    thread. Calls are made one at a time; nothing here fans out.
    """

    def __init__(self, service: Any) -> None:
        self._service = service

    # ── Public API ─────────────────────────────────────────────────────────────

    async def list_message_ids(self, query: str = "", max_results: int = 10) -> list[str]:
        """Return the IDs of messages matching a Gmail search query (one page)."""
        response = await self._call(
            "messages.list",
            lambda users: users.messages().list(
                userId=_ME, q=query, maxResults=min(max_results, MAX_RESULTS_CAP)
            ),
        )
        return [str(m["id"]) for m in response.get("messages") or [] if m.get("id")]

    async def get_message(self, message_id: str, fmt: str = "metadata") -> RawMessage:
        """Return a single message resource in the given format ("metadata" or "full")."""
        return await self._call(
            "messages.get",
            lambda users: users.messages().get(userId=_ME, id=message_id, format=fmt),
        )

    async def send_message(self, raw: str) -> dict[str, Any]:
        """Send an already-encoded message. Returns {id, threadId, ...}."""
        result = await self._call(
            "messages.send",
            lambda users: users.messages().send(userId=_ME, body={"raw": raw}),
        )
        logger.info("Sent message id=%s thread=%s", result.get("id"), result.get("threadId"))
        return result

    async def modify_message(
        self,
        message_id: str,
        add_label_ids: list[str] | None = None,
        remove_label_ids: list[str] | None = None,
    ) -> dict[str, Any]:
        body: dict[str, list[str]] = {}
        if add_label_ids:
            body["addLabelIds"] = list(add_label_ids)
        if remove_label_ids:
            body["removeLabelIds"] = list(remove_label_ids)
        result = await self._call(
            "messages.modify",
            lambda users: users.messages().modify(userId=_ME, id=message_id, body=body),
        )
        logger.debug("Modified labels on message %s: %s", message_id, body)
        return result

    async def mark_read(self, message_id: str) -> None:
        """Remove the UNREAD system label from a message."""
        await self.modify_message(message_id, remove_label_ids=[_UNREAD])

    async def create_draft(self, raw: str) -> dict[str, Any]:
        """Save an already-encoded message as a draft. Returns {id, message}."""
        result = await self._call(
            "drafts.create",
            lambda users: users.drafts().create(userId=_ME, body={"message": {"raw": raw}}),
        )
        logger.info("Created draft id=%s", result.get("id"))
        return result

    async def list_labels(self) -> list[LabelInfo]:
        response = await self._call("labels.list", lambda users: users.labels().list(userId=_ME))
        return [LabelInfo.from_api(label) for label in response.get("labels") or []]

    async def get_thread(self, thread_id: str) -> list[RawMessage]:
        """Return the full message resources of a thread, in thread order."""
        response = await self._call(
            "threads.get",
            lambda users: users.threads().get(userId=_ME, id=thread_id),
        )
        return list(response.get("messages") or [])

    # ── Internal helpers ───────────────────────────────────────────────────────

    async def _call(self, operation: str, build_request: Callable[[Any], Any]) -> dict[str, Any]:
        """Build and execute one API request off the event loop.

        Raises GmailAPIError carrying the provider's message if the request
        fails, including token refresh and transport failures.
        """
        logger.debug("Gmail → %s", operation)
        request = build_request(self._service.users())
        try:
            result = await to_thread.run_sync(request.execute)
        except (HttpError, GoogleAuthError, HttpLib2Error, OSError) as exc:
            raise GmailAPIError(f"Gmail API {operation} failed: {exc}") from exc
        return result or {}
