"""Kudos board: recognition messages between colleagues with admin moderation."""

__version__ = "0.1.0"
