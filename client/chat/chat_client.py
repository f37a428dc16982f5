"""
Chat client module.

This module handles client-side chat messaging functionality.
"""

from typing import Optional, Tuple, Union

from websockets.exceptions import ConnectionClosed

from common.constants import Commands
from common.protocol_definitions import ChatMessage
from client.utils.logger import logger

USAGE_HINT = "Unknown command. Use 'send <message>' to send a message or 'leave' to disconnect."

_SEND_PREFIX = Commands.SEND + ' '


def parse_command(line: str) -> Tuple[str, str]:
    """
    Split a console line into (command, argument).

    `leave` is matched case-insensitively; `send <text>` carries the trimmed
    text as its argument. Blank lines are EMPTY, everything else UNKNOWN.
    """
    text = line.strip()
    if not text:
        return Commands.EMPTY, ''
    if text.lower() == Commands.LEAVE:
        return Commands.LEAVE, ''
    if text.startswith(_SEND_PREFIX):
        return Commands.SEND, text[len(_SEND_PREFIX):].strip()
    return Commands.UNKNOWN, text


class ChatClient:
    """Client-side chat functionality."""

    def __init__(self, websocket=None):
        self.websocket = websocket

    def set_websocket(self, websocket):
        """Set the connection used for sending messages."""
        self.websocket = websocket

    async def send_text(self, text: str) -> bool:
        """Send a raw text frame to the server."""
        if self.websocket is None:
            logger.error("Not connected to server")
            return False

        try:
            await self.websocket.send(text)
            return True
        except ConnectionClosed as e:
            logger.error(f"Failed to send message to the server: {e}")
            return False

    async def send_handshake(self, username: str) -> bool:
        """Send the username as the first frame."""
        logger.show_login_info(username)
        return await self.send_text(username)

    async def send_chat(self, message: str) -> bool:
        """Send a chat message."""
        sent = await self.send_text(message)
        if sent:
            logger.log_chat_sent(message)
        return sent

    def format_incoming(self, frame: Union[str, bytes]) -> Optional[str]:
        """
        Turn a server frame into a console line.

        Returns None for frames that should not be shown (binary frames).
        Text that is not a chat message is shown as-is.
        """
        if not isinstance(frame, str):
            return None
        try:
            return ChatMessage.from_json(frame).render()
        except ValueError as e:
            logger.warning(f"Malformed message from server: {e}")
            return frame
