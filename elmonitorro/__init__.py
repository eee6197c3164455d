"""Telegram feed reader bot: configuration, Telegram client, in-memory storage and cleanup jobs."""

__version__ = "0.1.0"