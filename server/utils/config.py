"""
Server configuration module.

This module handles server-side configuration settings.
"""

from common.constants import DEFAULT_SERVER_HOST, DEFAULT_PORT, WS_PATH, CHANNEL_CAPACITY, LOG_DIR


class ServerConfig:
    """Server configuration class."""

    def __init__(self, host: str = DEFAULT_SERVER_HOST, port: int = DEFAULT_PORT, path: str = WS_PATH,
                 channel_capacity: int = CHANNEL_CAPACITY, announce_leave: bool = True,
                 logs_dir: str = LOG_DIR):
        self.host = host
        self.port = port
        self.path = path

        # Logging configuration
        self.logs_dir = logs_dir

        # Chat settings
        self.channel_capacity = channel_capacity
        self.announce_leave = announce_leave
