"""
Prompt templates for recommendations, email drafts and blog catchups.
"""

from datetime import datetime
from typing import Optional

from .models import ZERO_TIME, BlogPost, Contact, EmailInteraction, Event

DATE_FORMAT = "%Y-%m-%d"

NO_WRITING_SAMPLE = "No writing sample available."

# Shown in place of dates that could not be parsed
UNKNOWN_DATE = "unknown"

SOCIAL_DATA_TEMPLATE = """Based on the following data about my important contacts, who should I reach out to this week?

Calendar Events (Last {days} days):
{events}
Important Contact Interactions (Last {days} days):
{interactions}
Please recommend 3 or less important contacts I should reach out to this week.
Consider factors like:
1. Contact priority (1-5, where 5 is highest)
2. Time since last contact
3. Frequency of past interactions
4. Any upcoming events
"""

EMAIL_DRAFT_TEMPLATE = """Draft a friendly email to {name} ({email}).

Here's an example of how I write emails:
---
{writing_sample}
---

Context about our relationship: {context}

Please write a natural, personal email that:
1. Has an appropriate subject line
2. Matches my writing style and tone from the example
3. Includes a specific reference to our last interaction if available
4. If they have recent blog posts, mention one that interested you
5. Ends with a clear next step or question
6. Uses similar greeting/closing styles as my example

Format the response as:
Subject: [subject]

[email body]"""

CATCHUP_TEMPLATE = """Summarize these recent blog posts from {name}:

{posts}
Please provide:
1. A brief overview of the main themes/topics covered
2. Key insights or interesting points from each post
3. Any actionable takeaways
4. Potential discussion points I could bring up in a conversation with the author

Keep the summary concise but informative."""


def format_date(value: datetime) -> str:
    if value == ZERO_TIME:
        return UNKNOWN_DATE
    return value.strftime(DATE_FORMAT)


def format_events(events: list[Event]) -> str:
    lines = []
    for event in events:
        lines.append(
            f"- {event.title} with {', '.join(event.attendees)} "
            f"on {format_date(event.start_time)}\n"
        )
    return "".join(lines)


def format_interactions(interactions: list[EmailInteraction]) -> str:
    lines = []
    for interaction in interactions:
        lines.append(
            f"- {interaction.name} ({interaction.participant}) "
            f"[Priority: {interaction.priority}] "
            f"(Last contact: {format_date(interaction.last_contact)}, "
            f"Total interactions: {interaction.count})\n"
        )
    return "".join(lines)


def format_social_data_prompt(
    events: list[Event],
    interactions: list[EmailInteraction],
    days: int = 30,
) -> str:
    """Prompt asking whom to reach out to this week."""
    return SOCIAL_DATA_TEMPLATE.format(
        days=days,
        events=format_events(events),
        interactions=format_interactions(interactions),
    )


def format_email_draft_prompt(
    contact: Contact,
    interaction: Optional[EmailInteraction],
    posts: list[BlogPost],
) -> str:
    """
    Prompt for a personal email to one contact.

    Combines the last interaction summary, recent blog posts and the
    contact's writing sample so the model can match tone.
    """
    if interaction is not None:
        context = (
            f"Last contact was on {format_date(interaction.last_contact)}, "
            f"with {interaction.count} total interactions. "
        )
    else:
        context = "No previous email interactions found. "

    if posts:
        context += "\n\nRecent blog posts:\n"
        for post in posts:
            context += (
                f"- {post.title} (published {format_date(post.published)})\n"
                f"  {post.link}\n"
            )

    return EMAIL_DRAFT_TEMPLATE.format(
        name=contact.name,
        email=contact.email,
        writing_sample=contact.writing_sample or NO_WRITING_SAMPLE,
        context=context,
    )


def format_catchup_prompt(contact: Contact, posts: list[BlogPost]) -> str:
    """Prompt summarizing a contact's recent posts."""
    formatted = "".join(
        f"- {post.title} (published {format_date(post.published)})\n"
        f"  {post.link}\n\n"
        for post in posts
    )
    return CATCHUP_TEMPLATE.format(name=contact.name, posts=formatted)
