#!/usr/bin/env python3
"""
WebSocket Chat Client - Main Entry Point

Connects to the chat server, sends the username handshake, then runs two
activities side by side: printing what the server broadcasts and reading
commands typed on the console.
"""

import argparse
import asyncio
import sys
import os
import threading
from typing import Awaitable, Callable, Optional

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from websockets.asyncio.client import connect
from websockets.exceptions import ConnectionClosedError, InvalidHandshake, InvalidURI

from client.chat.chat_client import ChatClient, USAGE_HINT, parse_command
from client.utils.config import ClientConfig
from client.utils.logger import logger
from common.constants import Commands, PROMPT


def print_prompt():
    print(PROMPT, end='', flush=True)


class StdinReader:
    """
    Reads console lines on a daemon thread and hands them to the event loop.

    A blocking readline never holds up shutdown: the thread dies with the
    process. readline() returns None at end of input.
    """

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self.queue: Optional[asyncio.Queue] = None
        self.thread: Optional[threading.Thread] = None

    def start(self):
        loop = asyncio.get_running_loop()
        self.queue = asyncio.Queue()
        self.thread = threading.Thread(target=self._pump, args=(loop,), name='stdin-reader', daemon=True)
        self.thread.start()

    def _pump(self, loop):
        try:
            for line in iter(self.stream.readline, ''):
                loop.call_soon_threadsafe(self.queue.put_nowait, line)
            loop.call_soon_threadsafe(self.queue.put_nowait, None)
        except RuntimeError:
            # Event loop already closed
            return

    async def readline(self) -> Optional[str]:
        if self.thread is None:
            self.start()
        return await self.queue.get()


class ChatCLIClient:
    """Main client class that integrates all functionality."""

    def __init__(self, host: str, port: int, username: str):
        self.config = ClientConfig(host, port, username)
        self.websocket = None
        self.chat_client = ChatClient()
        self.shutdown = asyncio.Event()
        self.leaving = False

    async def connect(self) -> bool:
        """Open the WebSocket connection. No retries: a failure is final."""
        try:
            self.websocket = await connect(self.config.url)
        except (OSError, asyncio.TimeoutError, InvalidHandshake, InvalidURI) as e:
            logger.log_connection(self.config.url, False)
            logger.log_error("connection", e)
            return False

        self.chat_client.set_websocket(self.websocket)
        logger.log_connection(self.config.url, True)
        print(f"Connected to the WebSocket server at {self.config.host}:{self.config.port} "
              f"as '{self.config.username}'")
        return True

    async def receive_loop(self):
        """Print every broadcast until the connection closes."""
        try:
            async for frame in self.websocket:
                line = self.chat_client.format_incoming(frame)
                if line is None:
                    continue
                print(f"\n{line}")
                print_prompt()
        except ConnectionClosedError as e:
            logger.warning(f"Connection lost: {e}")

        if not self.leaving:
            print("\nConnection closed by the server.")
        self.shutdown.set()

    async def leave(self):
        self.leaving = True
        print("Disconnecting from the server...")
        await self.websocket.close()

    async def input_loop(self, read_line: Callable[[], Awaitable[Optional[str]]]):
        """Handle console commands until `leave`, end of input or server close."""
        logger.show_interactive_mode_info()

        while not self.shutdown.is_set():
            print_prompt()
            line_task = asyncio.ensure_future(read_line())
            shutdown_task = asyncio.ensure_future(self.shutdown.wait())
            done, _ = await asyncio.wait({line_task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED)
            shutdown_task.cancel()

            if line_task not in done:
                line_task.cancel()
                print("Shutting down client...")
                break

            line = line_task.result()
            if line is None:
                await self.leave()
                break

            command, text = parse_command(line)
            if command == Commands.LEAVE:
                await self.leave()
                break
            elif command == Commands.SEND:
                if text and not await self.chat_client.send_chat(text):
                    break
            elif command == Commands.UNKNOWN:
                print(USAGE_HINT)

    async def run(self, read_line: Callable[[], Awaitable[Optional[str]]] = None) -> bool:
        """Main client loop. Returns False if the server could not be reached."""
        if not await self.connect():
            return False

        if read_line is None:
            read_line = StdinReader().readline

        if not await self.chat_client.send_handshake(self.config.username):
            await self.websocket.close()
            return True

        receive_task = asyncio.create_task(self.receive_loop())
        try:
            await self.input_loop(read_line)
        finally:
            await self.websocket.close()
            await receive_task

        print("Client has shut down.")
        return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='WebSocket Chat Client')
    parser.add_argument('address', help='Server address')
    parser.add_argument('port', type=int, help='Server port')
    parser.add_argument('username', help='Username to join the chat as')
    return parser


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    client = ChatCLIClient(args.address, args.port, args.username)
    try:
        connected = asyncio.run(client.run())
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return

    if not connected:
        sys.exit(1)


if __name__ == "__main__":
    main()
