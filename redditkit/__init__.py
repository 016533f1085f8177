"""Client library for the Reddit API: account, collections, flair, emoji, gold and live threads."""

__version__ = "0.1.0"

__all__ = [
    "account",
    "client",
    "collection",
    "emoji",
    "errors",
    "flair",
    "gold",
    "live_thread",
]