"""
Command-line interface for the social assistant.

Usage:
    social-assistant                                  Who should I reach out to?
    social-assistant --cmd draft --email a@b.com      Draft an email into Gmail
    social-assistant --cmd catchup --email a@b.com    Summarize their recent blog posts
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.markup import escape
from rich.text import Text

from .assistant import SocialAssistant
from .config import Config
from .contacts import load_contacts
from .errors import ConfigurationError, SocialAssistantError

logger = logging.getLogger(__name__)

console = Console()

HEADINGS = {
    "recommend": "Social Recommendations",
    "draft": "Email Draft",
    "catchup": "Blog Catchup Summary",
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(levelname)s: %(message)s",
        force=True,
    )


def run_command(cmd: str, email: str | None, config: Config) -> str:
    """Validate inputs, build the assistant and run one command."""
    if cmd in ("draft", "catchup") and not email:
        raise ConfigurationError(f"Email address is required for {cmd} command")

    errors = config.validate(require_google=cmd != "catchup")
    if errors:
        raise ConfigurationError("; ".join(errors))

    contacts = load_contacts(config.contacts_file)
    assistant = SocialAssistant(config, contacts)

    if cmd == "recommend":
        logger.info("Getting social recommendations")
        return assistant.get_social_recommendations()
    if cmd == "draft":
        logger.info(f"Drafting email to {email}")
        return assistant.draft_email(email)
    logger.info(f"Getting blog catchup for {email}")
    return assistant.catchup_with_blog(email)


@click.command()
@click.option(
    "--cmd",
    type=click.Choice(["recommend", "draft", "catchup"]),
    default="recommend",
    show_default=True,
    help="Command to run.",
)
@click.option(
    "--email",
    default=None,
    help="Email address for draft/catchup command.",
)
@click.option(
    "--contacts",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to contacts JSON file. Defaults to $CONTACTS_FILE or config/contacts.json.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(cmd: str, email: str | None, contacts: str | None, verbose: bool) -> None:
    """
    Social Assistant - keep in touch with your important contacts.

    Uses your calendar, Gmail history and contacts' blogs to recommend
    outreach, draft emails and summarize recent posts.
    """
    try:
        config = Config()
        if contacts:
            config.contacts_file = Path(contacts)
        configure_logging("DEBUG" if verbose else config.log_level)
        result = run_command(cmd, email, config)
    except SocialAssistantError as e:
        logger.error(f"Failed to run {cmd}: {e}")
        console.print(f"\n[red]✗ Error: {escape(str(e))}[/red]")
        sys.exit(e.exit_code)
    except Exception as e:
        logger.error(f"Failed to run {cmd}: {e}", exc_info=verbose)
        console.print(f"\n[red]✗ Error: {escape(str(e))}[/red]")
        sys.exit(1)

    console.print(Panel(Text(result), title=HEADINGS[cmd], border_style="blue"))


if __name__ == "__main__":
    main()
