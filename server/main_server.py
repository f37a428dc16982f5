#!/usr/bin/env python3
"""
WebSocket Chat Server - Main Entry Point

Binds the listening socket, upgrades requests on the chat path to WebSocket
connections and hands each one to the shared ChatServer.
"""

import argparse
import asyncio
import logging
import sys
import os
from http import HTTPStatus
from typing import Tuple
from urllib.parse import urlsplit

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from websockets.asyncio.server import serve

from server.chat.chat_server import ChatServer
from server.utils.config import ServerConfig
from server.utils.logger import logger
from common.constants import DEFAULT_SERVER_HOST, DEFAULT_PORT, CHANNEL_CAPACITY, LOG_DIR


class WebSocketChatServer:
    """Main server class that owns the listener and the chat state."""

    def __init__(self, host: str = DEFAULT_SERVER_HOST, port: int = DEFAULT_PORT,
                 channel_capacity: int = CHANNEL_CAPACITY, announce_leave: bool = True,
                 logs_dir: str = LOG_DIR):
        self.config = ServerConfig(host, port, channel_capacity=channel_capacity,
                                   announce_leave=announce_leave, logs_dir=logs_dir)
        self.chat_server = ChatServer(self.config)
        logger.set_logs_dir(self.config.logs_dir)
        self.server = None

    def process_request(self, connection, request):
        """Refuse the upgrade for any path other than the chat path."""
        path = urlsplit(request.path).path
        if path != self.config.path:
            logger.warning(f"Rejected request for unknown path '{request.path}'")
            return connection.respond(HTTPStatus.NOT_FOUND, "Not Found\n")
        return None

    async def listen(self) -> Tuple[str, int]:
        """Bind the listening socket. Returns the bound (host, port)."""
        self.server = await serve(
            self.chat_server.handle_connection,
            self.config.host,
            self.config.port,
            process_request=self.process_request,
        )

        host, port = next(iter(self.server.sockets)).getsockname()[:2]
        logger.info(f"Chat server running on ws://{host}:{port}{self.config.path}")
        return host, port

    async def start(self):
        """Start the server and serve until cancelled."""
        if self.server is None:
            await self.listen()

        try:
            await self.server.serve_forever()
        finally:
            await self.stop()

    async def stop(self):
        """Close the listener, every open connection and the broadcast channel."""
        if self.server is None:
            return
        server, self.server = self.server, None
        self.chat_server.close()
        server.close()
        await server.wait_closed()
        logger.info("Chat server stopped")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='WebSocket Chat Server')
    parser.add_argument('--host', type=str, default=DEFAULT_SERVER_HOST,
                        help=f'Host to bind to (default: {DEFAULT_SERVER_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'TCP port to listen on (default: {DEFAULT_PORT})')
    parser.add_argument('--capacity', type=int, default=CHANNEL_CAPACITY,
                        help=f'Pending messages kept per client (default: {CHANNEL_CAPACITY})')
    parser.add_argument('--log-dir', type=str, default=LOG_DIR,
                        help=f'Directory for the chat history log (default: {LOG_DIR})')
    parser.add_argument('--no-leave-notice', action='store_true',
                        help='Do not tell other users when someone leaves')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug logging')
    return parser


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.capacity < 1:
        parser.error('--capacity must be at least 1')
    logger.configure(log_level=logging.DEBUG if args.debug else logging.INFO)

    server = WebSocketChatServer(
        host=args.host,
        port=args.port,
        channel_capacity=args.capacity,
        announce_leave=not args.no_leave_notice,
        logs_dir=args.log_dir
    )

    try:
        asyncio.run(server.start())
    except KeyboardInterrupt:
        logger.info("Server shutting down...")
    except OSError as e:
        logger.log_error("server startup", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
