"""
Social Assistant - keep in touch with the people who matter.

This package looks at your Google Calendar, Gmail history and your
contacts' blog feeds, and uses OpenAI to recommend outreach, draft
emails into Gmail and summarize recent blog posts.
"""

__version__ = "0.1.0"
