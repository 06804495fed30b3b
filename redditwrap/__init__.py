"""Client for the Reddit API: account settings, collections, flair, emoji, gold, live threads and messages."""

__version__ = "0.1.0"