"""
Important contacts loading and lookup.

Contacts live in a JSON array:

    [
      {"email": "ada@example.com", "name": "Ada", "priority": 5,
       "rss_feed": "https://ada.example.com/feed.xml",
       "writing_sample": "Hey Ada, ..."}
    ]
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional

from .errors import ConfigurationError
from .models import Contact

logger = logging.getLogger(__name__)


def _parse_contact(index: int, entry: Any) -> Contact:
    """Build a Contact from one JSON object, raising ConfigurationError on bad data."""
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Invalid contact data: entry {index} is not an object")

    priority = entry.get("priority", 0)
    # bool is an int subclass; JSON true/false is not a priority
    if isinstance(priority, bool) or not isinstance(priority, int):
        raise ConfigurationError(
            f"Invalid contact data: priority must be an integer for entry {index}"
        )

    for key in ("email", "name", "rss_feed", "writing_sample"):
        value = entry.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigurationError(
                f"Invalid contact data: {key} must be a string for entry {index}"
            )

    contact = Contact(
        email=entry.get("email") or "",
        name=entry.get("name") or "",
        priority=priority,
        rss_feed=entry.get("rss_feed") or None,
        writing_sample=entry.get("writing_sample") or None,
    )

    try:
        contact.validate()
    except ValueError as e:
        raise ConfigurationError(f"Invalid contact data: {e}") from e

    return contact


def load_contacts(contacts_file: str | Path) -> list[Contact]:
    """
    Load and validate important contacts from a JSON file.

    Args:
        contacts_file: Path to the contacts JSON array.

    Returns:
        Contacts in file order.

    Raises:
        ConfigurationError: If the file is missing, malformed, or any
            entry fails validation.
    """
    path = Path(contacts_file)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Failed to read contacts file: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Failed to parse contacts: {e}") from e

    if not isinstance(data, list):
        raise ConfigurationError("Failed to parse contacts: expected a JSON array")

    contacts = [_parse_contact(i, entry) for i, entry in enumerate(data)]

    seen = set()
    for contact in contacts:
        if contact.email in seen:
            logger.warning(f"Duplicate contact {contact.email}; the first entry wins")
        seen.add(contact.email)

    logger.debug(f"Loaded {len(contacts)} important contacts from {path}")
    return contacts


def find_contact(contacts: Iterable[Contact], email: str) -> Optional[Contact]:
    """Return the first contact whose email matches exactly, or None."""
    for contact in contacts:
        if contact.email == email:
            return contact
    return None
