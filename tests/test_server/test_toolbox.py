"""Tests for GmailToolbox; the Gmail client is an AsyncMock throughout."""

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, call, patch

import pytest
from google.auth.exceptions import RefreshError

from src.gmail.client import GmailClient
from src.gmail.errors import ConfigurationError, GmailAPIError
from src.gmail.mime import decode_raw_message
from src.gmail.types import LabelInfo
from src.server.config import ServerConfig
from src.server.toolbox import GmailToolbox


# ── Fixtures ───────────────────────────────────────────────────────────────────


@pytest.fixture
def config(tmp_path: Path) -> ServerConfig:
    return ServerConfig(
        credentials_path=tmp_path / "credentials.json",
        token_path=tmp_path / "token.json",
    )


@pytest.fixture
def gmail() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def factory(gmail: AsyncMock) -> MagicMock:
    return MagicMock(return_value=gmail)


@pytest.fixture
def toolbox(config: ServerConfig, factory: MagicMock) -> GmailToolbox:
    return GmailToolbox(config, client_factory=factory)


# ── Dispatch & error boundary ──────────────────────────────────────────────────


class TestDispatch:
    async def test_unknown_tool_is_reported(self, toolbox: GmailToolbox) -> None:
        text = await toolbox.call("explode", {})
        assert text == "Error executing explode: Unknown tool: explode"

    async def test_client_created_once(
        self, toolbox: GmailToolbox, gmail: AsyncMock, factory: MagicMock
    ) -> None:
        gmail.list_labels.return_value = []
        await toolbox.call("get_labels")
        await toolbox.call("get_labels")
        factory.assert_called_once()

    async def test_configuration_error_is_reported(self, config: ServerConfig) -> None:
        def _fail(_config: ServerConfig) -> Any:
            raise ConfigurationError("Failed to initialize Gmail API: Token not found.")

        toolbox = GmailToolbox(config, client_factory=_fail)
        text = await toolbox.call("read_emails", {})
        assert text == (
            "Error executing read_emails: Failed to initialize Gmail API: Token not found."
        )

    async def test_provider_error_is_reported_verbatim(
        self, toolbox: GmailToolbox, gmail: AsyncMock
    ) -> None:
        gmail.get_thread.side_effect = GmailAPIError("Gmail API threads.get failed: quota")
        text = await toolbox.call("get_email_thread", {"thread_id": "t1"})
        assert text == "Error executing get_email_thread: Gmail API threads.get failed: quota"

    async def test_bad_arguments_are_reported(self, toolbox: GmailToolbox) -> None:
        text = await toolbox.call("send_email", {"to": "a@x.com"})
        assert text.startswith("Error executing send_email: Missing required argument")

    async def test_none_arguments_accepted(self, toolbox: GmailToolbox, gmail: AsyncMock) -> None:
        gmail.list_message_ids.return_value = []
        text = await toolbox.call("read_emails", None)
        assert "**Found**: 0 emails" in text


# ── Reading ────────────────────────────────────────────────────────────────────


class TestReadEmails:
    async def test_fetches_each_message_with_body(
        self,
        toolbox: GmailToolbox,
        gmail: AsyncMock,
        sample_raw_message: dict[str, Any],
    ) -> None:
        gmail.list_message_ids.return_value = ["msg_001"]
        gmail.get_message.return_value = sample_raw_message
        text = await toolbox.call(
            "read_emails", {"query": "is:unread", "max_results": 5, "include_body": True}
        )
        gmail.list_message_ids.assert_awaited_once_with("is:unread", 5)
        gmail.get_message.assert_awaited_once_with("msg_001", "full")
        assert '# Gmail Emails matching "is:unread"' in text
        assert "**Content**:\nPlease review the attached budget figures.\n" in text

    async def test_metadata_format_without_body(
        self,
        toolbox: GmailToolbox,
        gmail: AsyncMock,
        sample_raw_message: dict[str, Any],
    ) -> None:
        gmail.list_message_ids.return_value = ["msg_001", "msg_002"]
        gmail.get_message.return_value = sample_raw_message
        text = await toolbox.call("read_emails", {})
        assert gmail.get_message.await_args_list == [
            call("msg_001", "metadata"),
            call("msg_002", "metadata"),
        ]
        assert "**Found**: 2 emails" in text
        assert "**Content**" not in text


class TestSearchEmails:
    async def test_search(
        self,
        toolbox: GmailToolbox,
        gmail: AsyncMock,
        sample_raw_message: dict[str, Any],
    ) -> None:
        gmail.list_message_ids.return_value = ["msg_001"]
        gmail.get_message.return_value = sample_raw_message
        text = await toolbox.call("search_emails", {"query": "from:alice"})
        gmail.list_message_ids.assert_awaited_once_with("from:alice", 25)
        gmail.get_message.assert_awaited_once_with("msg_001", "metadata")
        assert text.startswith('# Gmail Search Results\n\n**Query**: "from:alice"')
        assert "## 1. Q2 budget review" in text


class TestGetEmailThread:
    async def test_thread_includes_bodies(
        self,
        toolbox: GmailToolbox,
        gmail: AsyncMock,
        make_message: Any,
        encode_body: Any,
    ) -> None:
        gmail.get_thread.return_value = [
            make_message(
                msg_id="m1",
                headers=[{"name": "From", "value": "alice@example.com"}],
                payload={"body": {"data": encode_body("x" * 310)}},
            ),
            make_message(
                msg_id="m2",
                headers=[{"name": "From", "value": "bob@example.com"}],
                payload={"parts": [{"mimeType": "text/html", "body": {"data": encode_body("<p/>")}}]},
            ),
        ]
        text = await toolbox.call("get_email_thread", {"thread_id": "thread_001"})
        assert "**Thread ID**: thread_001\n**Messages**: 2" in text
        assert f"**Content**:\n{'x' * 300}...\n" in text
        assert "**Content**:\nBody content not available\n" in text


class TestGetLabels:
    async def test_labels(self, toolbox: GmailToolbox, gmail: AsyncMock) -> None:
        gmail.list_labels.return_value = [LabelInfo(id="INBOX", name="INBOX", type="system")]
        text = await toolbox.call("get_labels", {})
        assert "**Total Labels**: 1" in text
        assert "- **INBOX** (INBOX) - Type: system, Messages: 0" in text


# ── Writing ────────────────────────────────────────────────────────────────────


class TestCompose:
    async def test_send_email_encodes_message(
        self, toolbox: GmailToolbox, gmail: AsyncMock
    ) -> None:
        gmail.send_message.return_value = {"id": "m9", "threadId": "t9"}
        text = await toolbox.call(
            "send_email",
            {"to": "bob@example.com", "subject": "Hi", "body": "Hello Bob", "bcc": "x@y.com"},
        )
        raw = gmail.send_message.await_args.args[0]
        assert decode_raw_message(raw) == (
            "To: bob@example.com\nSubject: Hi\nBcc: x@y.com\n"
            "Content-Type: text/plain; charset=utf-8\n\nHello Bob"
        )
        assert "✅ Email sent successfully!" in text
        assert "**Message ID**: m9" in text

    async def test_create_draft_html(self, toolbox: GmailToolbox, gmail: AsyncMock) -> None:
        gmail.create_draft.return_value = {"id": "r1"}
        text = await toolbox.call(
            "create_draft",
            {"to": "bob@example.com", "subject": "Hi", "body": "<b>x</b>", "html": True},
        )
        raw = gmail.create_draft.await_args.args[0]
        assert "Content-Type: text/html; charset=utf-8" in decode_raw_message(raw)
        assert "**Draft ID**: r1" in text
        gmail.send_message.assert_not_awaited()


class TestBatchModify:
    async def test_mark_as_read(self, toolbox: GmailToolbox, gmail: AsyncMock) -> None:
        text = await toolbox.call("mark_as_read", {"message_ids": ["id1", "id2"]})
        assert gmail.mark_read.await_args_list == [call("id1"), call("id2")]
        assert text == "✅ Marked 2 email(s) as read"

    async def test_mark_as_read_partial_failure_keeps_earlier_changes(
        self, toolbox: GmailToolbox, gmail: AsyncMock
    ) -> None:
        gmail.mark_read.side_effect = [None, GmailAPIError("Gmail API messages.modify failed: 404")]
        text = await toolbox.call("mark_as_read", {"message_ids": ["id1", "id2"]})
        assert gmail.mark_read.await_args_list == [call("id1"), call("id2")]
        assert text.startswith("Error executing mark_as_read: Gmail API messages.modify failed: 404")
        assert "message id2; 1 of 2 message(s) updated before the failure" in text

    async def test_token_refresh_failure_mid_batch_reports_progress(
        self, config: ServerConfig
    ) -> None:
        service = MagicMock()
        service.users().messages().modify().execute.side_effect = [
            {"id": "id1"},
            RefreshError("invalid_grant: Token has been expired or revoked."),
        ]
        toolbox = GmailToolbox(config, client_factory=lambda _config: GmailClient(service))
        text = await toolbox.call("add_labels", {"message_ids": ["id1", "id2"], "label_ids": ["L"]})
        assert text.startswith(
            "Error executing add_labels: Gmail API messages.modify failed: invalid_grant"
        )
        assert "message id2; 1 of 2 message(s) updated before the failure" in text

    async def test_add_labels(self, toolbox: GmailToolbox, gmail: AsyncMock) -> None:
        text = await toolbox.call(
            "add_labels", {"message_ids": ["id1", "id2"], "label_ids": ["Label_1"]}
        )
        assert gmail.modify_message.await_args_list == [
            call("id1", add_label_ids=["Label_1"]),
            call("id2", add_label_ids=["Label_1"]),
        ]
        assert text == "✅ Added labels to 2 email(s)"


# ── Setup ──────────────────────────────────────────────────────────────────────


class TestGetAuthUrl:
    async def test_does_not_need_client(
        self, toolbox: GmailToolbox, factory: MagicMock, config: ServerConfig
    ) -> None:
        with patch("src.server.toolbox.build_auth_url", return_value="https://auth.example"):
            text = await toolbox.call("get_auth_url", {})
        factory.assert_not_called()
        assert "https://auth.example" in text
        assert f"**Token Path**: {config.token_path}" in text

    async def test_missing_credentials(self, toolbox: GmailToolbox, config: ServerConfig) -> None:
        text = await toolbox.call("get_auth_url", {})
        assert text.startswith("Error getting auth URL: Credentials file not found")
        assert text.endswith(f"Make sure you have credentials.json in: {config.credentials_path}")
