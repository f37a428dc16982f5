"""
Client configuration module.

This module handles client-side configuration settings.
"""

from common.constants import DEFAULT_HOST, DEFAULT_PORT, WS_PATH


class ClientConfig:
    """Client configuration class."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, username: str = '',
                 path: str = WS_PATH):
        self.host = host
        self.port = port
        self.username = username
        self.path = path

    @property
    def url(self) -> str:
        """WebSocket URL of the chat endpoint."""
        return f"ws://{self.host}:{self.port}{self.path}"

