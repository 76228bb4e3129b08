"""Tool catalog: names, JSON input schemas and typed arguments for each tool."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

import mcp.types as types

from src.gmail.client import MAX_RESULTS_CAP
from src.gmail.errors import ToolArgumentError


class ToolName(str, Enum):
    READ_EMAILS = "read_emails"
    SEND_EMAIL = "send_email"
    SEARCH_EMAILS = "search_emails"
    GET_LABELS = "get_labels"
    GET_EMAIL_THREAD = "get_email_thread"
    MARK_AS_READ = "mark_as_read"
    ADD_LABELS = "add_labels"
    CREATE_DRAFT = "create_draft"
    GET_AUTH_URL = "get_auth_url"

    @classmethod
    def parse(cls, name: str) -> ToolName:
        try:
            return cls(name)
        except ValueError:
            raise ToolArgumentError(f"Unknown tool: {name}") from None


# ── Argument coercion ──────────────────────────────────────────────────────────


def _required_str(arguments: dict[str, Any], key: str) -> str:
    value = arguments.get(key)
    if value is None:
        raise ToolArgumentError(f"Missing required argument: {key!r}")
    if not isinstance(value, str):
        raise ToolArgumentError(f"Argument {key!r} must be a string")
    return value


def _optional_str(arguments: dict[str, Any], key: str, default: str = "") -> str:
    value = arguments.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ToolArgumentError(f"Argument {key!r} must be a string")
    return value


def _optional_bool(arguments: dict[str, Any], key: str, default: bool = False) -> bool:
    value = arguments.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ToolArgumentError(f"Argument {key!r} must be a boolean")
    return value


def _max_results(arguments: dict[str, Any], default: int) -> int:
    value = arguments.get("max_results")
    if value in (None, 0):
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ToolArgumentError("Argument 'max_results' must be a number")
    return max(1, min(int(value), MAX_RESULTS_CAP))


def _string_list(arguments: dict[str, Any], key: str) -> list[str]:
    value = arguments.get(key)
    if value is None:
        raise ToolArgumentError(f"Missing required argument: {key!r}")
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ToolArgumentError(f"Argument {key!r} must be an array of strings")
    return list(value)


# ── Typed arguments ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ReadEmailsArgs:
    query: str = ""
    max_results: int = 10
    include_body: bool = False

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> ReadEmailsArgs:
        return cls(
            query=_optional_str(arguments, "query"),
            max_results=_max_results(arguments, default=10),
            include_body=_optional_bool(arguments, "include_body"),
        )


@dataclass(frozen=True)
class SearchEmailsArgs:
    query: str
    max_results: int = 25

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> SearchEmailsArgs:
        return cls(
            query=_required_str(arguments, "query"),
            max_results=_max_results(arguments, default=25),
        )


@dataclass(frozen=True)
class ComposeArgs:
    """Arguments shared by send_email and create_draft."""

    to: str
    subject: str
    body: str
    cc: str = ""
    bcc: str = ""
    html: bool = False

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> ComposeArgs:
        return cls(
            to=_required_str(arguments, "to"),
            subject=_required_str(arguments, "subject"),
            body=_required_str(arguments, "body"),
            cc=_optional_str(arguments, "cc"),
            bcc=_optional_str(arguments, "bcc"),
            html=_optional_bool(arguments, "html"),
        )


@dataclass(frozen=True)
class ThreadArgs:
    thread_id: str

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> ThreadArgs:
        return cls(thread_id=_required_str(arguments, "thread_id"))


@dataclass(frozen=True)
class MarkAsReadArgs:
    message_ids: list[str]

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> MarkAsReadArgs:
        return cls(message_ids=_string_list(arguments, "message_ids"))


@dataclass(frozen=True)
class AddLabelsArgs:
    message_ids: list[str]
    label_ids: list[str]

    @classmethod
    def from_arguments(cls, arguments: dict[str, Any]) -> AddLabelsArgs:
        return cls(
            message_ids=_string_list(arguments, "message_ids"),
            label_ids=_string_list(arguments, "label_ids"),
        )


# ── JSON schemas ───────────────────────────────────────────────────────────────

_COMPOSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "to": {"type": "string", "description": "Recipient email address"},
        "subject": {"type": "string", "description": "Email subject line"},
        "body": {"type": "string", "description": "Email body content"},
        "cc": {"type": "string", "description": "CC recipients (optional)"},
        "bcc": {"type": "string", "description": "BCC recipients (optional)"},
        "html": {
            "type": "boolean",
            "description": "Whether body is HTML format",
            "default": False,
        },
    },
    "required": ["to", "subject", "body"],
}

_EMPTY_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}}

TOOL_DEFINITIONS: list[types.Tool] = [
    types.Tool(
        name=ToolName.READ_EMAILS.value,
        description="Read emails from Gmail inbox with optional filters and limits",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": (
                        'Gmail search query (e.g., "from:someone@example.com", '
                        '"is:unread", "subject:important")'
                    ),
                    "default": "",
                },
                "max_results": {
                    "type": "number",
                    "description": "Maximum number of emails to retrieve",
                    "default": 10,
                    "maximum": MAX_RESULTS_CAP,
                },
                "include_body": {
                    "type": "boolean",
                    "description": "Whether to include email body content",
                    "default": False,
                },
            },
        },
    ),
    types.Tool(
        name=ToolName.SEND_EMAIL.value,
        description="Send an email through Gmail",
        inputSchema=_COMPOSE_SCHEMA,
    ),
    types.Tool(
        name=ToolName.SEARCH_EMAILS.value,
        description="Search emails with advanced Gmail search syntax",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": (
                        "Gmail search query (supports all Gmail operators like "
                        "from:, to:, subject:, has:attachment, etc.)"
                    ),
                },
                "max_results": {
                    "type": "number",
                    "description": "Maximum number of results to return",
                    "default": 25,
                    "maximum": MAX_RESULTS_CAP,
                },
            },
            "required": ["query"],
        },
    ),
    types.Tool(
        name=ToolName.GET_LABELS.value,
        description="Get all Gmail labels/folders",
        inputSchema=_EMPTY_SCHEMA,
    ),
    types.Tool(
        name=ToolName.GET_EMAIL_THREAD.value,
        description="Get a complete email thread/conversation by thread ID",
        inputSchema={
            "type": "object",
            "properties": {
                "thread_id": {"type": "string", "description": "Gmail thread ID"},
            },
            "required": ["thread_id"],
        },
    ),
    types.Tool(
        name=ToolName.MARK_AS_READ.value,
        description="Mark emails as read",
        inputSchema={
            "type": "object",
            "properties": {
                "message_ids": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Array of Gmail message IDs to mark as read",
                },
            },
            "required": ["message_ids"],
        },
    ),
    types.Tool(
        name=ToolName.ADD_LABELS.value,
        description="Add labels to emails",
        inputSchema={
            "type": "object",
            "properties": {
                "message_ids": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Array of Gmail message IDs",
                },
                "label_ids": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Array of label IDs to add",
                },
            },
            "required": ["message_ids", "label_ids"],
        },
    ),
    types.Tool(
        name=ToolName.CREATE_DRAFT.value,
        description="Create a draft email in Gmail (saves to drafts folder without sending)",
        inputSchema=_COMPOSE_SCHEMA,
    ),
    types.Tool(
        name=ToolName.GET_AUTH_URL.value,
        description="Get OAuth2 authorization URL for Gmail API access (for initial setup)",
        inputSchema=_EMPTY_SCHEMA,
    ),
]
