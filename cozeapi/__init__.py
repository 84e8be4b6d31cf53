"""Client for the Coze HTTP API: bots, chats, conversations and audio."""

__version__ = "0.1.0"