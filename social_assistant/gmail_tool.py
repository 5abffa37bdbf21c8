"""
Gmail API integration.

Reads message headers to build email interactions with important
contacts, and saves generated emails as Gmail drafts.
"""

import base64
import logging
from datetime import datetime, timedelta, timezone
from email.mime.text import MIMEText
from typing import Any, Iterable, Iterator

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from .auth import GOOGLE_API_ERRORS
from .errors import RemoteServiceError
from .interactions import aggregate_interactions, filter_and_enrich
from .models import Contact, DraftEmail, EmailInteraction

logger = logging.getLogger(__name__)

# Upper bound on messages fetched per query
MAX_MESSAGES = 500


def create_message(sender: str, to: str, subject: str, body_text: str) -> dict[str, str]:
    """
    Create a Gmail API message object.

    Args:
        sender: Value for the From header ("me" lets Gmail fill it in).
        to: Recipient email address.
        subject: Email subject line.
        body_text: Plain text body of the email.

    Returns:
        Dictionary with 'raw' key containing base64url-encoded message.
    """
    message = MIMEText(body_text, "plain", "utf-8")
    message["From"] = sender
    message["To"] = to
    message["Subject"] = subject

    raw = base64.urlsafe_b64encode(message.as_bytes()).decode("utf-8")
    return {"raw": raw}


class GmailTool:
    """Gmail reads and draft creation for the authenticated user."""

    def __init__(
        self,
        service: Any,
        contacts: list[Contact],
        sender: str = "me",
        lookback_days: int = 30,
    ):
        self.service = service
        self.contacts = contacts
        self.sender = sender
        self.lookback_days = lookback_days

    @classmethod
    def from_credentials(cls, creds: Credentials, contacts: list[Contact], **kwargs: Any) -> "GmailTool":
        """Build the Gmail v1 service from OAuth credentials."""
        service = build("gmail", "v1", credentials=creds, cache_discovery=False)
        return cls(service, contacts, **kwargs)

    def list_message_ids(self, query: str) -> list[str]:
        """List ids of messages matching a Gmail search query (at most MAX_MESSAGES)."""
        try:
            results = self.service.users().messages().list(
                userId="me", q=query, maxResults=MAX_MESSAGES
            ).execute()
        except GOOGLE_API_ERRORS as e:
            raise RemoteServiceError(f"failed to list messages: {e}") from e

        messages = results.get("messages", [])
        logger.info(f"Found {len(messages)} total messages")
        return [m["id"] for m in messages]

    def fetch_messages(self, message_ids: Iterable[str]) -> Iterator[dict[str, Any]]:
        """Yield message metadata for each id, skipping any that fail to fetch."""
        for message_id in message_ids:
            try:
                yield self.service.users().messages().get(
                    userId="me",
                    id=message_id,
                    format="metadata",
                    metadataHeaders=["From", "Date"],
                ).execute()
            except GOOGLE_API_ERRORS as e:
                logger.warning(f"Error getting message {message_id}: {e}")

    def get_recent_interactions(self, since: datetime, query: str = "") -> list[EmailInteraction]:
        """
        Aggregate interactions with important contacts since a date.

        Args:
            since: Only messages after this day are considered.
            query: Extra Gmail search terms.

        Returns:
            Interactions with important contacts, enriched with name and priority.
        """
        # Gmail's after: operator wants YYYY/MM/DD
        full_query = f"{query} after:{since.strftime('%Y/%m/%d')}".strip()
        logger.info(f"Querying emails with: {full_query}")

        message_ids = self.list_message_ids(full_query)
        interactions = aggregate_interactions(self.fetch_messages(message_ids))
        filtered = filter_and_enrich(interactions, self.contacts)

        logger.info(
            f"Found {len(interactions)} total interactions, "
            f"filtered to {len(filtered)} important contacts"
        )
        return filtered

    def get_interactions_by_participant(self, participant: str) -> list[EmailInteraction]:
        """Interactions from messages sent by or to one address over the lookback window."""
        query = f"(from:{participant} OR to:{participant})"
        since = datetime.now(timezone.utc) - timedelta(days=self.lookback_days)
        return self.get_recent_interactions(since, query)

    def save_draft(self, draft: DraftEmail) -> dict:
        """Create a Gmail draft. Returns the API response."""
        message = create_message(self.sender, draft.to, draft.subject, draft.body)
        try:
            created = self.service.users().drafts().create(
                userId="me", body={"message": message}
            ).execute()
        except GOOGLE_API_ERRORS as e:
            raise RemoteServiceError(f"failed to create draft: {e}") from e

        logger.info(f"Draft saved for {draft.to}")
        return created
