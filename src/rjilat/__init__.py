"""rjilat: image sharing with threaded discussions and admin moderation."""

__version__ = "0.1.0"
