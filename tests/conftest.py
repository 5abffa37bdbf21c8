"""
Shared fixtures for the social assistant tests.
"""

import os
import sys
from unittest.mock import MagicMock

import pytest

# Add project to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from social_assistant.config import Config
from social_assistant.models import Contact


@pytest.fixture
def contacts():
    """Two important contacts, one with a feed and a writing sample."""
    return [
        Contact(
            email="ada@example.com",
            name="Ada Lovelace",
            priority=5,
            rss_feed="https://ada.example.com/feed.xml",
            writing_sample="Hey Ada!\n\nLong time no see.\n\nCheers,\nSam",
        ),
        Contact(email="grace@example.com", name="Grace Hopper", priority=3),
    ]


@pytest.fixture
def config(tmp_path):
    """Fully populated config pointing at files under tmp_path."""
    return Config(
        contacts_file=tmp_path / "contacts.json",
        credentials_file=tmp_path / "oauth_credentials.json",
        token_file=tmp_path / "token.json",
        openai_api_key="sk-test",
        openai_model="gpt-4o",
        openai_temperature=0.7,
        sender_email="me",
        lookback_days=30,
        log_level="INFO",
    )


def make_http_error(status=500, reason="Server Error"):
    """Build a googleapiclient HttpError without a real HTTP response."""
    from googleapiclient.errors import HttpError

    resp = MagicMock(status=status, reason=reason)
    return HttpError(resp=resp, content=b"boom")


def gmail_message(message_id, from_header, date_header):
    """Minimal Gmail message resource with From/Date headers."""
    headers = []
    if from_header is not None:
        headers.append({"name": "From", "value": from_header})
    if date_header is not None:
        headers.append({"name": "Date", "value": date_header})
    return {"id": message_id, "payload": {"headers": headers}}
