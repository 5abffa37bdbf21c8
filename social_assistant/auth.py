"""
Google OAuth for Gmail and Calendar.

Two token providers are available: one that reuses the cached token
file and one that walks the user through the authorization-code flow
on the terminal. select_token_provider() picks between them based on
whether a cached token is available.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

import click
import httplib2
from google.auth.exceptions import GoogleAuthError, RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.errors import Error as GoogleApiClientError

from .config import Config
from .errors import ConfigurationError, RemoteServiceError

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/gmail.compose",
    "https://www.googleapis.com/auth/gmail.readonly",
    "https://www.googleapis.com/auth/calendar.readonly",
]

# Loopback redirect for the copy/paste flow; the code is read off the address bar
DEFAULT_REDIRECT_URI = "http://localhost:1"

# Anything a Google API request can raise: API errors, transport failures,
# and credential refreshes that fail mid-request
GOOGLE_API_ERRORS = (GoogleApiClientError, httplib2.HttpLib2Error, GoogleAuthError, OSError)


def save_token(path: str | Path, creds: Credentials) -> None:
    """Write credentials to the token file, creating or truncating it with mode 0600."""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as token:
        token.write(creds.to_json())


class TokenProvider(ABC):
    """Abstract source of Google OAuth credentials."""

    def __init__(self, config: Config, scopes: list[str] | None = None):
        self.config = config
        self.scopes = scopes or SCOPES

    @abstractmethod
    def get_credentials(self) -> Credentials:
        """Return valid credentials or raise a SocialAssistantError."""
        pass


class CachedTokenProvider(TokenProvider):
    """Credentials from the cached token file, refreshed when expired."""

    def get_credentials(self) -> Credentials:
        token_file = self.config.token_file
        try:
            creds = Credentials.from_authorized_user_file(str(token_file), self.scopes)
        except (OSError, ValueError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"unable to read cached token {token_file}: {e}") from e

        if creds.valid:
            return creds

        if creds.expired and creds.refresh_token:
            logger.info("Refreshing expired OAuth token")
            try:
                creds.refresh(Request())
            except RefreshError as e:
                raise RemoteServiceError(f"failed to refresh OAuth token: {e}") from e
            save_token(token_file, creds)
            return creds

        raise ConfigurationError(f"cached token {token_file} is invalid and cannot be refreshed")


class InteractiveTokenProvider(TokenProvider):
    """Authorization-code flow against standard input/output."""

    def __init__(
        self,
        config: Config,
        scopes: list[str] | None = None,
        redirect_uri: str = DEFAULT_REDIRECT_URI,
    ):
        super().__init__(config, scopes)
        self.redirect_uri = redirect_uri

    def get_credentials(self) -> Credentials:
        credentials_file = self.config.credentials_file
        if not credentials_file.exists():
            raise ConfigurationError(f"unable to read client secret file: {credentials_file}")

        try:
            flow = InstalledAppFlow.from_client_secrets_file(
                str(credentials_file), self.scopes, redirect_uri=self.redirect_uri
            )
        except ValueError as e:
            raise ConfigurationError(f"unable to parse client secret file to config: {e}") from e

        auth_url, _ = flow.authorization_url(access_type="offline", prompt="consent")
        click.echo(f"Go to the following link in your browser:\n{auth_url}")
        code = click.prompt("Enter the authorization code").strip()

        try:
            flow.fetch_token(code=code)
        except Exception as e:
            raise RemoteServiceError(f"unable to retrieve token from web: {e}") from e

        creds = flow.credentials
        save_token(self.config.token_file, creds)
        logger.info(f"OAuth token cached at {self.config.token_file}")
        return creds


def _token_readable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.R_OK)


def select_token_provider(config: Config) -> TokenProvider:
    """Cached provider when a readable token file exists, interactive otherwise."""
    if _token_readable(config.token_file):
        return CachedTokenProvider(config)
    return InteractiveTokenProvider(config)


def get_credentials(config: Config) -> Credentials:
    """
    Get Google credentials with Gmail and Calendar scopes.

    Falls back to the interactive flow if the cached token turns out to
    be unusable.
    """
    provider = select_token_provider(config)
    if isinstance(provider, CachedTokenProvider):
        try:
            return provider.get_credentials()
        except (ConfigurationError, GoogleAuthError, RemoteServiceError) as e:
            logger.warning(f"Cached token unusable ({e}); starting authorization flow")
            provider = InteractiveTokenProvider(config)
    return provider.get_credentials()
