"""
Protocol definitions for the WebSocket chat service.

This module defines the chat message envelope exchanged after the username
handshake, and the system notices the server sends on behalf of the host.
"""

import json
from dataclasses import dataclass, asdict
from typing import Dict, Any

from common.constants import HOST_USERNAME


@dataclass(frozen=True)
class ChatMessage:
    """Chat message structure."""
    username: str
    content: str

    def render(self) -> str:
        """Human-readable form shown on the client console."""
        return f"{self.username}: {self.content}"

    def __str__(self):
        return self.render()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChatMessage':
        """
        Build a message from its two-key mapping.

        Raises ValueError if either field is missing or not a string.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        username = data.get('username')
        content = data.get('content')
        if not isinstance(username, str) or not isinstance(content, str):
            raise ValueError("Message needs string 'username' and 'content' fields")
        return cls(username=username, content=content)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> 'ChatMessage':
        """Decode the wire form; json.JSONDecodeError is a ValueError too."""
        return cls.from_dict(json.loads(text))


def create_join_notice(username: str) -> ChatMessage:
    """Create a user joined notice."""
    return ChatMessage(HOST_USERNAME, f"{username} has joined the chat!")


def create_leave_notice(username: str) -> ChatMessage:
    """Create a user left notice."""
    return ChatMessage(HOST_USERNAME, f"{username} has left the chat!")


def create_rejection_notice(username: str) -> ChatMessage:
    """Create the notice sent to a client whose username is in use."""
    return ChatMessage(
        HOST_USERNAME,
        f"Username '{username}' is already taken. Please reconnect with a different name."
    )
