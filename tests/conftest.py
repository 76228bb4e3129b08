"""Shared pytest fixtures."""

import base64
from typing import Any

import pytest


def b64(text: str) -> str:
    """Encode text the way Gmail returns body data (URL-safe, unpadded)."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def make_raw_message(
    msg_id: str = "msg_001",
    thread_id: str = "thread_001",
    headers: list[dict[str, str]] | None = None,
    payload: dict[str, Any] | None = None,
    snippet: str = "",
    label_ids: list[str] | None = None,
) -> dict[str, Any]:
    """Build a Gmail API message resource."""
    payload = dict(payload or {})
    payload.setdefault("headers", headers or [])
    raw: dict[str, Any] = {
        "id": msg_id,
        "threadId": thread_id,
        "snippet": snippet,
        "payload": payload,
    }
    if label_ids is not None:
        raw["labelIds"] = label_ids
    return raw


@pytest.fixture
def sample_raw_message() -> dict[str, Any]:
    """A single-part plain-text message with the usual headers."""
    return make_raw_message(
        headers=[
            {"name": "From", "value": "alice@example.com"},
            {"name": "To", "value": "bob@example.com"},
            {"name": "Subject", "value": "Q2 budget review"},
            {"name": "Date", "value": "Fri, 27 Feb 2026 09:00:00 +0000"},
        ],
        payload={
            "mimeType": "text/plain",
            "body": {"data": b64("Please review the attached budget figures.")},
        },
        snippet="Please review the attached...",
        label_ids=["INBOX", "UNREAD"],
    )


@pytest.fixture
def make_message() -> Any:
    """Factory fixture wrapping make_raw_message."""
    return make_raw_message


@pytest.fixture
def encode_body() -> Any:
    """Factory fixture wrapping b64."""
    return b64
