"""
Main orchestration module.

SocialAssistant sequences the calendar, Gmail and feed lookups for each
command, builds the prompt, calls the language model and, for drafts,
writes the result back to Gmail.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from google.oauth2.credentials import Credentials

from . import auth
from .calendar_tool import CalendarTool
from .config import Config
from .contacts import find_contact
from .errors import ConfigurationError, ContactNotFoundError, FeedError, ResponseParseError
from .gmail_tool import GmailTool
from .llm import LanguageModel
from .models import BlogPost, Contact, DraftEmail, EmailInteraction
from .prompts import format_catchup_prompt, format_email_draft_prompt, format_social_data_prompt
from .rss_reader import RSSReader

logger = logging.getLogger(__name__)

SUBJECT_PREFIX = "Subject: "
DRAFT_POST_LIMIT = 3
CATCHUP_POST_LIMIT = 10


def parse_email_response(response: str) -> DraftEmail:
    """
    Split model output into subject and body.

    The first line starting with "Subject: " is the subject. The body
    is everything after the first blank line that follows it.

    Raises:
        ResponseParseError: If no non-empty subject line is present.
    """
    lines = response.splitlines()

    subject_index = next(
        (i for i, line in enumerate(lines) if line.startswith(SUBJECT_PREFIX)), None
    )
    if subject_index is None:
        raise ResponseParseError("no subject found in response")

    subject = lines[subject_index][len(SUBJECT_PREFIX):].strip()
    if not subject:
        raise ResponseParseError("no subject found in response")

    body_lines: list[str] = []
    for i in range(subject_index + 1, len(lines)):
        if not lines[i].strip():
            body_lines = lines[i + 1:]
            break

    return DraftEmail(subject=subject, body="\n".join(body_lines).rstrip())


class SocialAssistant:
    """Recommend, draft and catchup flows over the user's contacts."""

    def __init__(
        self,
        config: Config,
        contacts: list[Contact],
        model: Optional[LanguageModel] = None,
        gmail: Optional[GmailTool] = None,
        calendar: Optional[CalendarTool] = None,
        rss_reader: Optional[RSSReader] = None,
    ):
        self.config = config
        self.contacts = contacts
        self._model = model
        self._gmail = gmail
        self._calendar = calendar
        self._rss_reader = rss_reader
        self._credentials: Optional[Credentials] = None

    # Collaborators are built on first use so catchup never needs Google OAuth

    def _google_credentials(self) -> Credentials:
        if self._credentials is None:
            self._credentials = auth.get_credentials(self.config)
        return self._credentials

    @property
    def model(self) -> LanguageModel:
        if self._model is None:
            self._model = LanguageModel(self.config)
        return self._model

    @property
    def gmail(self) -> GmailTool:
        if self._gmail is None:
            self._gmail = GmailTool.from_credentials(
                self._google_credentials(),
                self.contacts,
                sender=self.config.sender_email,
                lookback_days=self.config.lookback_days,
            )
        return self._gmail

    @property
    def calendar(self) -> CalendarTool:
        if self._calendar is None:
            self._calendar = CalendarTool.from_credentials(self._google_credentials())
        return self._calendar

    @property
    def rss_reader(self) -> RSSReader:
        if self._rss_reader is None:
            self._rss_reader = RSSReader()
        return self._rss_reader

    def _window_start(self) -> datetime:
        return datetime.now(timezone.utc) - timedelta(days=self.config.lookback_days)

    def _require_contact(self, email: str) -> Contact:
        contact = find_contact(self.contacts, email)
        if contact is None:
            raise ContactNotFoundError(email)
        return contact

    def get_social_recommendations(self) -> str:
        """Ask the model whom to reach out to, based on the last 30 days."""
        since = self._window_start()

        events = self.calendar.get_recent_events(since)
        interactions = self.gmail.get_recent_interactions(since)

        prompt = format_social_data_prompt(events, interactions, days=self.config.lookback_days)
        return self.model.chat(prompt)

    def draft_email(self, to: str) -> str:
        """
        Draft a personal email to an important contact and save it in Gmail.

        Args:
            to: Contact email address (exact match).

        Returns:
            Confirmation text including the generated email.
        """
        contact = self._require_contact(to)

        interactions = self.gmail.get_interactions_by_participant(contact.email)
        interaction: Optional[EmailInteraction] = next(
            (i for i in interactions if i.participant == to), None
        )

        recent_posts: list[BlogPost] = []
        if contact.rss_feed:
            try:
                recent_posts = self.rss_reader.get_recent_posts(contact.rss_feed, DRAFT_POST_LIMIT)
            except FeedError as e:
                logger.warning(f"Failed to fetch RSS feed for {contact.email}: {e}")

        prompt = format_email_draft_prompt(contact, interaction, recent_posts)
        response = self.model.chat(prompt)

        try:
            draft = parse_email_response(response)
        except ResponseParseError as e:
            raise ResponseParseError(f"failed to parse email response: {e}") from e

        draft.to = to
        self.gmail.save_draft(draft)

        return f"Draft saved to Gmail:\n\n{response}"

    def catchup_with_blog(self, email: str) -> str:
        """Summarize a contact's blog posts from the last 30 days."""
        contact = self._require_contact(email)
        if not contact.rss_feed:
            raise ConfigurationError(f"no RSS feed configured for {contact.name}")

        posts = self.rss_reader.get_recent_posts(contact.rss_feed, CATCHUP_POST_LIMIT)

        cutoff = self._window_start()
        recent_posts = [post for post in posts if post.published > cutoff]

        if not recent_posts:
            return f"No posts from {contact.name} in the last {self.config.lookback_days} days."

        prompt = format_catchup_prompt(contact, recent_posts)
        return self.model.chat(prompt)
