"""
Tests for the Gmail integration (API service mocked).
"""

import base64
from datetime import datetime, timezone
from email import message_from_bytes
from unittest.mock import MagicMock

import httplib2
import pytest
from google.auth.exceptions import RefreshError

from conftest import gmail_message, make_http_error
from social_assistant.errors import RemoteServiceError
from social_assistant.gmail_tool import MAX_MESSAGES, GmailTool, create_message
from social_assistant.models import DraftEmail


def fake_service(messages, failures=None):
    """Gmail service mock whose list/get calls serve the given messages.

    failures maps a message id to the exception its get() request raises.
    """
    failures = failures or {}
    service = MagicMock()
    messages_api = service.users.return_value.messages.return_value
    messages_api.list.return_value.execute.return_value = {
        "messages": [{"id": m["id"]} for m in messages]
    }
    by_id = {m["id"]: m for m in messages}

    def get(userId, id, **kwargs):
        request = MagicMock()
        if id in failures:
            request.execute.side_effect = failures[id]
        else:
            request.execute.return_value = by_id[id]
        return request

    messages_api.get.side_effect = get
    return service


class TestCreateMessage:
    """Tests for building raw Gmail messages."""

    def test_headers_and_body(self):
        """Test that headers, charset and body survive encoding."""
        result = create_message("me", "ada@example.com", "Hello", "Hi Ada,\n\nCheers")

        raw = base64.urlsafe_b64decode(result["raw"])
        parsed = message_from_bytes(raw)
        assert parsed["From"] == "me"
        assert parsed["To"] == "ada@example.com"
        assert parsed["Subject"] == "Hello"
        assert parsed.get_content_type() == "text/plain"
        assert parsed.get_content_charset() == "utf-8"
        assert parsed.get_payload(decode=True).decode("utf-8") == "Hi Ada,\n\nCheers"


class TestGetRecentInteractions:
    """Tests for collecting interactions from Gmail."""

    def test_query_and_enrichment(self, contacts):
        """Test the search query and that only important contacts are kept."""
        service = fake_service([
            gmail_message("1", "Ada <ada@example.com>", "Mon, 02 Jan 2006 10:00:00 +0000"),
            gmail_message("2", "spam@example.com", "Mon, 02 Jan 2006 11:00:00 +0000"),
            gmail_message("3", "ada@example.com", "Tue, 03 Jan 2006 10:00:00 +0000"),
        ])
        tool = GmailTool(service, contacts)

        result = tool.get_recent_interactions(datetime(2005, 12, 3, tzinfo=timezone.utc))

        service.users.return_value.messages.return_value.list.assert_called_once_with(
            userId="me", q="after:2005/12/03", maxResults=MAX_MESSAGES
        )
        assert len(result) == 1
        assert result[0].participant == "ada@example.com"
        assert result[0].name == "Ada Lovelace"
        assert result[0].priority == 5
        assert result[0].count == 2

    @pytest.mark.parametrize("error", [
        make_http_error(404, "Not Found"),
        TimeoutError("timed out"),
        OSError("Connection reset by peer"),
        httplib2.ServerNotFoundError("Unable to find the server at gmail.googleapis.com"),
        RefreshError("invalid_grant"),
    ])
    def test_failed_message_fetch_is_skipped(self, contacts, error):
        """Test that a message whose fetch fails is skipped and the rest still count."""
        service = fake_service(
            [
                gmail_message("1", "ada@example.com", "Mon, 02 Jan 2006 10:00:00 +0000"),
                gmail_message("2", "ada@example.com", "Tue, 03 Jan 2006 10:00:00 +0000"),
            ],
            failures={"2": error},
        )
        tool = GmailTool(service, contacts)

        result = tool.get_recent_interactions(datetime(2006, 1, 1, tzinfo=timezone.utc))

        assert len(result) == 1
        assert result[0].count == 1

    @pytest.mark.parametrize("error", [
        make_http_error(),
        OSError("Name or service not known"),
        httplib2.ServerNotFoundError("Unable to find the server at gmail.googleapis.com"),
    ])
    def test_list_failure_raises(self, contacts, error):
        """Test that API and network failures while listing become RemoteServiceError."""
        service = MagicMock()
        service.users.return_value.messages.return_value.list.return_value.execute.side_effect = (
            error
        )
        tool = GmailTool(service, contacts)

        with pytest.raises(RemoteServiceError, match="failed to list messages"):
            tool.get_recent_interactions(datetime(2006, 1, 1, tzinfo=timezone.utc))

    def test_no_messages(self, contacts):
        """Test an empty mailbox."""
        service = MagicMock()
        service.users.return_value.messages.return_value.list.return_value.execute.return_value = {}
        tool = GmailTool(service, contacts)

        assert tool.get_recent_interactions(datetime(2006, 1, 1, tzinfo=timezone.utc)) == []

    def test_by_participant_query(self, contacts):
        """Test the from/to query used for a single participant."""
        service = fake_service([])
        tool = GmailTool(service, contacts)

        tool.get_interactions_by_participant("ada@example.com")

        query = service.users.return_value.messages.return_value.list.call_args.kwargs["q"]
        assert query.startswith("(from:ada@example.com OR to:ada@example.com) after:")


class TestSaveDraft:
    """Tests for saving Gmail drafts."""

    def test_creates_draft(self, contacts):
        """Test that the draft is created with the configured sender."""
        service = MagicMock()
        drafts_api = service.users.return_value.drafts.return_value
        drafts_api.create.return_value.execute.return_value = {"id": "draft-1"}
        tool = GmailTool(service, contacts, sender="sam@example.com")

        result = tool.save_draft(DraftEmail(subject="Hi", body="Body", to="ada@example.com"))

        assert result == {"id": "draft-1"}
        kwargs = drafts_api.create.call_args.kwargs
        assert kwargs["userId"] == "me"
        parsed = message_from_bytes(base64.urlsafe_b64decode(kwargs["body"]["message"]["raw"]))
        assert parsed["From"] == "sam@example.com"
        assert parsed["To"] == "ada@example.com"

    @pytest.mark.parametrize("error", [
        make_http_error(403, "Forbidden"),
        TimeoutError("timed out"),
        RefreshError("invalid_grant"),
    ])
    def test_create_failure_raises(self, contacts, error):
        """Test that API, network and auth failures become RemoteServiceError."""
        service = MagicMock()
        service.users.return_value.drafts.return_value.create.return_value.execute.side_effect = (
            error
        )
        tool = GmailTool(service, contacts)

        with pytest.raises(RemoteServiceError, match="failed to create draft"):
            tool.save_draft(DraftEmail(subject="Hi", body="Body", to="ada@example.com"))
