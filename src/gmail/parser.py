"""Message parsing: turns Gmail API message resources into NormalizedEmail.

The body extractor deliberately does a shallow scan: it reads inline data on
the payload root, else the first ``text/plain`` child with inline data. It
does not walk nested multiparts, so HTML-only or deeply nested
multipart/alternative messages report BODY_UNAVAILABLE.
"""

import base64
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from src.gmail.types import (
    BODY_UNAVAILABLE,
    ExtractedBody,
    NormalizedEmail,
    PayloadNode,
    RawMessage,
)

logger = logging.getLogger(__name__)

_PLAIN_TEXT = "text/plain"


# ── Headers ────────────────────────────────────────────────────────────────────


def get_header(headers: Iterable[Mapping[str, Any]], name: str) -> str:
    """Return the value of the first header called `name` (case-insensitive).

    Returns an empty string when the header is absent.
    """
    wanted = name.lower()
    for header in headers:
        if str(header.get("name", "")).lower() == wanted:
            return str(header.get("value") or "")
    return ""


# ── Body extraction ────────────────────────────────────────────────────────────


def decode_body_data(data: str) -> str:
    """Decode a base64 body chunk as Gmail returns it.

    Gmail payloads use the URL-safe alphabet and may drop the ``=`` padding;
    standard-alphabet data is accepted too. Raises ValueError on input
    that cannot be decoded.
    """
    normalized = data.replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    return base64.b64decode(normalized).decode("utf-8", errors="replace")


def _inline_data(node: PayloadNode) -> str | None:
    body = node.get("body") or {}
    return body.get("data") or None


def try_extract_body(payload: PayloadNode | None) -> ExtractedBody:
    """Locate and decode the plain-text body of a payload tree."""
    if payload is None:
        return ExtractedBody("")

    data = _inline_data(payload)
    if data:
        return ExtractedBody(decode_body_data(data))

    for part in payload.get("parts") or []:
        part_data = _inline_data(part)
        if part.get("mimeType") == _PLAIN_TEXT and part_data:
            return ExtractedBody(decode_body_data(part_data))

    return ExtractedBody("", found=False)


def extract_body(payload: PayloadNode | None) -> str:
    """Return the decoded plain-text body, or BODY_UNAVAILABLE."""
    return try_extract_body(payload).render()


# ── Message parsing ────────────────────────────────────────────────────────────


def parse_message(raw: RawMessage, include_body: bool = False) -> NormalizedEmail:
    """Map a Gmail message resource to a NormalizedEmail.

    The body is only decoded when `include_body` is set. A body that fails
    to decode becomes BODY_UNAVAILABLE instead of failing the caller.
    """
    payload: PayloadNode | None = raw.get("payload")
    headers = (payload or {}).get("headers") or []

    body = ""
    if include_body:
        try:
            body = extract_body(payload)
        except ValueError as exc:
            logger.debug("Could not decode body of message %s: %s", raw.get("id"), exc)
            body = BODY_UNAVAILABLE

    return NormalizedEmail(
        id=str(raw.get("id") or ""),
        thread_id=str(raw.get("threadId") or ""),
        snippet=str(raw.get("snippet") or ""),
        sender=get_header(headers, "From"),
        recipient=get_header(headers, "To"),
        subject=get_header(headers, "Subject"),
        date=get_header(headers, "Date"),
        body=body,
        labels=frozenset(raw.get("labelIds") or []),
    )
