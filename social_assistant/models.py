"""
Data models for contacts, email interactions, calendar events and blog posts.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

# Timestamp used when a date header or event time cannot be parsed
ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class Contact:
    """An important contact from the static contacts file."""
    email: str
    name: str
    priority: int
    rss_feed: Optional[str] = None
    writing_sample: Optional[str] = None

    def validate(self) -> None:
        """Raise ValueError if the contact breaks any field rule."""
        if not self.email.strip():
            raise ValueError("email is required")
        if "@" not in self.email:
            raise ValueError(f"invalid email format: {self.email}")
        if not self.name.strip():
            raise ValueError(f"name is required for {self.email}")
        if not 1 <= self.priority <= 5:
            raise ValueError(f"priority must be between 1-5 for {self.email}")


@dataclass
class EmailInteraction:
    """Aggregated email exchanges with one sender."""
    participant: str
    last_contact: datetime = ZERO_TIME
    count: int = 0
    name: str = ""
    priority: int = 0


@dataclass
class Event:
    """A calendar event."""
    title: str
    start_time: datetime
    end_time: datetime
    attendees: list[str] = field(default_factory=list)
    description: str = ""


@dataclass
class BlogPost:
    """A single feed entry."""
    title: str
    link: str
    published: datetime


@dataclass
class DraftEmail:
    """An email parsed from model output, saved to Gmail as a draft."""
    subject: str
    body: str
    to: str = ""
