"""Relay Chat: web chat backend with accounts, saved chats and a guest mode."""

__version__ = "1.0.0"
