"""
Error types raised by the assistant.

Each category carries the process exit code the CLI uses when the
error reaches the top level.
"""


class SocialAssistantError(Exception):
    """Base class for every handled error."""
    exit_code = 1


class ConfigurationError(SocialAssistantError):
    """Missing or invalid configuration (contacts file, credentials, API key)."""
    exit_code = 2


class ContactNotFoundError(SocialAssistantError):
    """The requested email is not in the important contacts list."""
    exit_code = 3

    def __init__(self, email: str):
        super().__init__(f"contact not found in important contacts: {email}")
        self.email = email


class RemoteServiceError(SocialAssistantError):
    """A call to Gmail, Calendar, a feed or the language model failed."""
    exit_code = 4


class ResponseParseError(SocialAssistantError):
    """The language model response could not be parsed."""
    exit_code = 5


class FeedError(RemoteServiceError):
    """An RSS/Atom feed could not be fetched or parsed."""
