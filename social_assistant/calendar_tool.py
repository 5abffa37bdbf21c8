"""
Google Calendar API integration.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Optional

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from .auth import GOOGLE_API_ERRORS
from .errors import RemoteServiceError
from .models import ZERO_TIME, Event

logger = logging.getLogger(__name__)


def parse_event_time(value: dict[str, Any]) -> datetime:
    """Parse an event start/end object ({'dateTime': ...} or {'date': ...})."""
    raw = value.get("dateTime")
    try:
        if raw:
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        elif value.get("date"):
            day = date.fromisoformat(value["date"])
            parsed = datetime(day.year, day.month, day.day)
        else:
            return ZERO_TIME
    except ValueError:
        return ZERO_TIME

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _rfc3339(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class CalendarTool:
    """Read-only access to the user's primary calendar."""

    def __init__(self, service: Any, calendar_id: str = "primary"):
        self.service = service
        self.calendar_id = calendar_id

    @classmethod
    def from_credentials(cls, creds: Credentials, **kwargs: Any) -> "CalendarTool":
        """Build the Calendar v3 service from OAuth credentials."""
        service = build("calendar", "v3", credentials=creds, cache_discovery=False)
        return cls(service, **kwargs)

    def get_recent_events(self, since: datetime, until: Optional[datetime] = None) -> list[Event]:
        """
        Get single-occurrence events between two times, ordered by start.

        Args:
            since: Window start.
            until: Window end (defaults to now).
        """
        until = until or datetime.now(timezone.utc)
        try:
            events_result = self.service.events().list(
                calendarId=self.calendar_id,
                timeMin=_rfc3339(since),
                timeMax=_rfc3339(until),
                singleEvents=True,
                orderBy="startTime",
            ).execute()
        except GOOGLE_API_ERRORS as e:
            raise RemoteServiceError(f"failed to retrieve events: {e}") from e

        items = events_result.get("items", [])
        logger.info(f"Found {len(items)} calendar events since {since.strftime('%Y-%m-%d')}")

        events = []
        for item in items:
            title = item.get("summary", "")
            attendees = []
            for attendee in item.get("attendees", []):
                attendees.append(attendee.get("email", ""))
                logger.debug(f"Event '{title}' includes attendee: {attendee.get('email', '')}")

            events.append(Event(
                title=title,
                start_time=parse_event_time(item.get("start", {})),
                end_time=parse_event_time(item.get("end", {})),
                attendees=attendees,
                description=item.get("description", ""),
            ))

        logger.info(f"Processed {len(events)} calendar events with attendees")
        return events
