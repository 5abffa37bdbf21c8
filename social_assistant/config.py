"""
Application configuration management.

Loads settings from environment variables with sensible defaults.
A single Config instance is built by the CLI and handed to every
component that needs it.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigurationError

_PACKAGE_DIR = Path(__file__).parent
_PROJECT_ROOT = _PACKAGE_DIR.parent

# Try loading .env from the working directory first, then the project root
for env_path in [Path.cwd() / ".env", _PROJECT_ROOT / ".env"]:
    if env_path.exists():
        load_dotenv(env_path)
        break


def _env(name: str, default: str) -> str:
    return os.getenv(name, default)


def _env_number(name: str, default: str, kind: type):
    value = _env(name, default)
    try:
        return kind(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a valid {kind.__name__}, got {value!r}") from None


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # ========================================
    # Files
    # ========================================
    contacts_file: Path = field(
        default_factory=lambda: Path(_env("CONTACTS_FILE", "config/contacts.json"))
    )
    credentials_file: Path = field(
        default_factory=lambda: Path(_env("CREDENTIALS_FILE", "oauth_credentials.json"))
    )
    token_file: Path = field(
        default_factory=lambda: Path(_env("TOKEN_FILE", "token.json"))
    )

    # ========================================
    # OpenAI Configuration
    # ========================================
    openai_api_key: str = field(default_factory=lambda: _env("OPENAI_API_KEY", ""))
    openai_model: str = field(default_factory=lambda: _env("OPENAI_MODEL", "gpt-4o"))
    openai_temperature: float = field(
        default_factory=lambda: _env_number("OPENAI_TEMPERATURE", "0.7", float)
    )

    # ========================================
    # Gmail / Calendar
    # ========================================
    sender_email: str = field(default_factory=lambda: _env("SENDER_EMAIL", "me"))
    lookback_days: int = field(default_factory=lambda: _env_number("LOOKBACK_DAYS", "30", int))

    # ========================================
    # Logging
    # ========================================
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO").upper())

    def validate(self, require_google: bool = True) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.openai_api_key:
            errors.append("OPENAI_API_KEY is not set")

        if require_google and not self.token_file.exists() and not self.credentials_file.exists():
            errors.append(
                f"OAuth client secret file not found at {self.credentials_file} "
                f"(and no cached token at {self.token_file})"
            )

        return errors
