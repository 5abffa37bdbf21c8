"""
Email interaction aggregation.

Turns a list of raw Gmail messages into one EmailInteraction per
sender, then keeps only the senders that appear in the important
contacts list.
"""

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Iterable, Optional

from .models import ZERO_TIME, Contact, EmailInteraction

logger = logging.getLogger(__name__)


def extract_email(from_header: str) -> str:
    """
    Extract the bare address from a free-form From header.

    Handles:
        "Name <email@domain.com>"  -> email@domain.com
        "email@domain.com (Name)"  -> email@domain.com
        "email@domain.com"         -> email@domain.com
    """
    start = from_header.find("<")
    if start >= 0:
        end = from_header.find(">", start)
        if end >= 0:
            return from_header[start + 1:end].strip()

    end = from_header.find(" (")
    if end >= 0:
        return from_header[:end].strip()

    return from_header.strip()


def parse_email_date(value: str) -> Optional[datetime]:
    """Parse an RFC 1123 Date header with numeric zone. Returns None if unparseable."""
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def get_header(message: dict[str, Any], name: str) -> str:
    """Return the first header value called `name` from a Gmail message resource."""
    headers = message.get("payload", {}).get("headers", [])
    return next((h.get("value", "") for h in headers if h.get("name") == name), "")


def aggregate_interactions(messages: Iterable[dict[str, Any]]) -> list[EmailInteraction]:
    """
    Group messages by sender address.

    Messages with no usable sender are skipped. Messages whose date
    cannot be parsed still count, with a zero timestamp.

    Args:
        messages: Gmail message resources (only From/Date headers are read).

    Returns:
        One interaction per distinct sender, in first-seen order.
    """
    interactions: dict[str, EmailInteraction] = {}

    for message in messages:
        raw_from = get_header(message, "From")
        sender = extract_email(raw_from)
        if not sender:
            logger.debug(f"Skipping message {message.get('id', '?')}: no From header")
            continue
        logger.debug(f"Found email from: {sender} (raw: {raw_from})")

        date = parse_email_date(get_header(message, "Date")) or ZERO_TIME

        interaction = interactions.get(sender)
        if interaction is not None:
            interaction.count += 1
            if date > interaction.last_contact:
                interaction.last_contact = date
        else:
            interactions[sender] = EmailInteraction(
                participant=sender,
                last_contact=date,
                count=1,
            )

    return list(interactions.values())


def filter_and_enrich(
    interactions: Iterable[EmailInteraction],
    contacts: Iterable[Contact],
) -> list[EmailInteraction]:
    """Keep interactions with important contacts, copying their name and priority."""
    contact_map: dict[str, Contact] = {}
    for contact in contacts:
        contact_map.setdefault(contact.email, contact)

    filtered = []
    for interaction in interactions:
        contact = contact_map.get(interaction.participant)
        if contact is None:
            continue
        interaction.name = contact.name
        interaction.priority = contact.priority
        filtered.append(interaction)
    return filtered
