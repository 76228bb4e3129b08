"""Summary formatter: renders parsed emails and API results as Markdown text."""

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from src.gmail.types import LabelInfo, NormalizedEmail

#: Body prefix shown per email in read results and thread views.
BODY_PREVIEW_CHARS = 300

_ELLIPSIS = "..."


def truncate(text: str, limit: int) -> str:
    """Cut `text` to `limit` characters, appending "..." only if it was cut."""
    if len(text) > limit:
        return text[:limit] + _ELLIPSIS
    return text


# ── Message reports ────────────────────────────────────────────────────────────


def format_email_list(
    emails: Sequence[NormalizedEmail],
    query: str,
    include_body: bool,
    body_limit: int = BODY_PREVIEW_CHARS,
) -> str:
    """Render the read_emails report."""
    query_text = f' matching "{query}"' if query else ""
    summary = f"# Gmail Emails{query_text}\n\n**Found**: {len(emails)} emails\n\n"

    for i, email in enumerate(emails, start=1):
        summary += f"## {i}. {email.subject or 'No Subject'}\n"
        summary += f"**From**: {email.sender}\n"
        summary += f"**To**: {email.recipient}\n"
        summary += f"**Date**: {email.date}\n"
        summary += f"**ID**: {email.id}\n"
        summary += f"**Thread**: {email.thread_id}\n"
        summary += f"**Preview**: {email.snippet}\n"
        if include_body and email.body:
            summary += f"\n**Content**:\n{truncate(email.body, body_limit)}\n"
        summary += "\n---\n\n"
    return summary


def format_search_results(emails: Sequence[NormalizedEmail], query: str) -> str:
    """Render the search_emails report. Bodies are never shown here."""
    header = (
        f'# Gmail Search Results\n\n**Query**: "{query}"\n'
        f"**Found**: {len(emails)} emails\n\n"
    )
    sections = [
        f"## {i}. {email.subject}\n"
        f"**From**: {email.sender}\n"
        f"**Date**: {email.date}\n"
        f"**Preview**: {email.snippet}\n"
        f"**ID**: {email.id}\n"
        for i, email in enumerate(emails, start=1)
    ]
    return header + "\n".join(sections)


def format_thread(
    thread_id: str,
    emails: Sequence[NormalizedEmail],
    body_limit: int = BODY_PREVIEW_CHARS,
) -> str:
    """Render every message of a thread, oldest first as Gmail orders them."""
    summary = f"# Email Thread\n\n**Thread ID**: {thread_id}\n**Messages**: {len(emails)}\n\n"
    for i, email in enumerate(emails, start=1):
        summary += f"## Message {i}\n"
        summary += f"**From**: {email.sender}\n"
        summary += f"**To**: {email.recipient}\n"
        summary += f"**Date**: {email.date}\n"
        summary += f"**Subject**: {email.subject}\n\n"
        if email.body:
            summary += f"**Content**:\n{truncate(email.body, body_limit)}\n\n"
        summary += "---\n\n"
    return summary


def format_labels(labels: Sequence[LabelInfo]) -> str:
    lines = [
        f"- **{label.name}** ({label.id}) - Type: {label.type}, "
        f"Messages: {label.messages_total}"
        for label in labels
    ]
    return f"# Gmail Labels\n\n**Total Labels**: {len(labels)}\n\n" + "\n".join(lines)


# ── Action confirmations ───────────────────────────────────────────────────────


def format_sent(to: str, subject: str, result: dict[str, Any]) -> str:
    return (
        "✅ Email sent successfully!\n\n"
        f"**To**: {to}\n"
        f"**Subject**: {subject}\n"
        f"**Message ID**: {result.get('id', '')}\n"
        f"**Thread ID**: {result.get('threadId', '')}"
    )


def format_draft(to: str, subject: str, result: dict[str, Any]) -> str:
    return (
        "✅ Draft created successfully!\n\n"
        f"**To**: {to}\n"
        f"**Subject**: {subject}\n"
        f"**Draft ID**: {result.get('id', '')}\n"
        "**Status**: Saved to Gmail Drafts folder - ready to send when you're ready!"
    )


def format_marked_read(count: int) -> str:
    return f"✅ Marked {count} email(s) as read"


def format_labels_added(count: int) -> str:
    return f"✅ Added labels to {count} email(s)"


def format_auth_url(url: str, credentials_path: Path, token_path: Path) -> str:
    return (
        "# Gmail OAuth2 Authorization\n\n"
        f"**Step 1**: Visit this URL to authorize the app:\n\n{url}\n\n"
        "**Step 2**: After authorization, you'll get a code. Exchange it with "
        "`gmail-mcp authorize <code>` to save token.json in the project directory.\n\n"
        f"**Credentials Path**: {credentials_path}\n"
        f"**Token Path**: {token_path}"
    )
