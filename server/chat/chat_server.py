"""
Chat server module.

This module handles the per-connection chat session: the username handshake,
then relaying between the client's WebSocket and the shared broadcast channel.
"""

import asyncio
from enum import Enum
from typing import Optional

from websockets.exceptions import ConnectionClosed, ConnectionClosedOK

from common.constants import CLOSE_CODE_REJECTED
from common.protocol_definitions import (
    ChatMessage, create_join_notice, create_leave_notice, create_rejection_notice
)
from server.chat.broadcast import BroadcastChannel, ChannelClosed, Subscriber
from server.chat.registry import ClientRegistry
from server.utils.config import ServerConfig
from server.utils.logger import logger


class ConnectionState(Enum):
    AWAITING_HANDSHAKE = 'awaiting_handshake'
    ACTIVE = 'active'
    CLOSING = 'closing'
    CLOSED = 'closed'


class ClientConnection:
    """
    One client's session on the server.

    The connection subscribes to the broadcast channel as soon as it is
    accepted, waits for the username handshake, then runs two tasks until
    either stops: one publishing what the client sends, one forwarding what
    other users publish. The username and the subscription are released on
    every exit path.
    """

    def __init__(self, server: 'ChatServer', websocket):
        self.server = server
        self.websocket = websocket
        self.addr = websocket.remote_address
        self.username: Optional[str] = None
        self.state = ConnectionState.AWAITING_HANDSHAKE

    async def run(self):
        logger.log_connection(self.addr)
        with self.server.channel.subscribe() as subscriber:
            try:
                if await self.handshake():
                    await self.relay(subscriber)
            finally:
                await self.teardown()

    async def handshake(self) -> bool:
        """Read the username frame. Returns True once the user is registered."""
        try:
            frame = await self.websocket.recv()
        except ConnectionClosed:
            logger.info(f"Connection from {self.addr} closed before sending a username")
            self.state = ConnectionState.CLOSING
            return False

        if not isinstance(frame, str):
            logger.warning(f"Non-text handshake from {self.addr}, closing connection")
            self.state = ConnectionState.CLOSING
            return False

        name = frame.strip()
        if not self.server.registry.try_register(name):
            logger.log_rejection(name, self.addr)
            try:
                await self.websocket.send(create_rejection_notice(name).to_json())
                await self.websocket.close(CLOSE_CODE_REJECTED, "username already taken")
            except ConnectionClosed:
                logger.debug(f"Connection from {self.addr} closed during rejection")
            self.state = ConnectionState.CLOSED
            return False

        self.username = name
        self.state = ConnectionState.ACTIVE
        logger.log_login(name, self.addr)
        self.server.channel.publish(create_join_notice(name))
        return True

    async def relay(self, subscriber: Subscriber):
        """Race the inbound and outbound drains; the first to finish ends the session."""
        inbound = asyncio.create_task(self.drain_inbound())
        outbound = asyncio.create_task(self.drain_outbound(subscriber))
        try:
            done, _ = await asyncio.wait({inbound, outbound}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            inbound.cancel()
            outbound.cancel()
            await asyncio.gather(inbound, outbound, return_exceptions=True)

        self.state = ConnectionState.CLOSING
        for task in done:
            if not task.cancelled() and task.exception() is not None:
                logger.log_error(f"session of '{self.username}'", task.exception())

    async def drain_inbound(self):
        """Publish every text frame the client sends."""
        while True:
            try:
                frame = await self.websocket.recv()
            except ConnectionClosedOK:
                logger.info(f"Client '{self.username}' disconnected")
                return
            except ConnectionClosed as e:
                logger.warning(f"Error while receiving a message from '{self.username}': {e}")
                return

            if not isinstance(frame, str):
                logger.debug(f"Ignoring binary frame from '{self.username}'")
                continue

            logger.log_chat(self.username, frame)
            self.server.channel.publish(ChatMessage(self.username, frame))

    async def drain_outbound(self, subscriber: Subscriber):
        """Forward broadcast messages to the client, skipping the client's own."""
        while True:
            try:
                message = await subscriber.receive()
            except ChannelClosed:
                logger.info(f"Broadcast channel closed, ending session of '{self.username}'")
                return

            if message.username == self.username:
                continue

            try:
                await self.websocket.send(message.to_json())
            except ConnectionClosed as e:
                logger.warning(f"Failed to send to '{self.username}': {e}")
                return

    async def teardown(self):
        if self.state == ConnectionState.CLOSED:
            return
        self.state = ConnectionState.CLOSING

        if self.username is not None:
            self.server.registry.unregister(self.username)
            logger.log_disconnect(self.username)
            if self.server.config.announce_leave:
                self.server.channel.publish(create_leave_notice(self.username))

        await self.websocket.close()
        self.state = ConnectionState.CLOSED


class ChatServer:
    """Server-side chat state shared by every connection."""

    def __init__(self, config: ServerConfig = None):
        self.config = config or ServerConfig()
        self.registry = ClientRegistry()
        self.channel = BroadcastChannel(self.config.channel_capacity)

    async def handle_connection(self, websocket):
        """Handle individual client connection."""
        connection = ClientConnection(self, websocket)
        await connection.run()
        return connection

    def get_participant_count(self) -> int:
        """Get the number of current participants."""
        return len(self.registry)

    def close(self):
        """Stop broadcasting; live sessions end once their queues drain."""
        self.channel.close()
