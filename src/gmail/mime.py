"""Outbound message encoding for users.messages.send and users.drafts.create."""

import base64


def build_message(
    to: str,
    subject: str,
    body: str,
    cc: str | None = None,
    bcc: str | None = None,
    html: bool = False,
) -> str:
    """Build a minimal RFC 822 message: headers, blank line, body."""
    lines = [f"To: {to}", f"Subject: {subject}"]
    if cc:
        lines.append(f"Cc: {cc}")
    if bcc:
        lines.append(f"Bcc: {bcc}")
    lines.append(f"Content-Type: text/{'html' if html else 'plain'}; charset=utf-8")
    lines.append("")
    lines.append(body)
    return "\n".join(lines)


def encode_raw_message(message: str) -> str:
    """Encode a message for the API's ``raw`` field: URL-safe base64, no padding."""
    return base64.urlsafe_b64encode(message.encode("utf-8")).decode("ascii").rstrip("=")


def decode_raw_message(raw: str) -> str:
    """Inverse of encode_raw_message."""
    padded = raw + "=" * (-len(raw) % 4)
    return base64.urlsafe_b64decode(padded).decode("utf-8")
