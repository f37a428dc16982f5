"""
Server logging module.

This module handles server-side logging functionality.
"""

import logging
from datetime import datetime
from pathlib import Path

from common.constants import LOG_DIR, CHAT_LOG_FILE


class ServerLogger:
    """Server logging class."""

    def __init__(self, logs_dir: str = LOG_DIR, log_level: int = logging.INFO):
        # Set up main logger
        self.logger = logging.getLogger('chat_server')
        self.logger.setLevel(log_level)

        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        # Create console handler
        self.console_handler = logging.StreamHandler()
        self.console_handler.setLevel(log_level)

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        self.console_handler.setFormatter(formatter)

        # Add handler to logger
        self.logger.addHandler(self.console_handler)

        self.set_logs_dir(logs_dir)

    def set_logs_dir(self, logs_dir: str):
        """Point the chat history file at another directory (created on first write)."""
        self.logs_dir = Path(logs_dir)
        self.chat_log_path = self.logs_dir / CHAT_LOG_FILE

    def configure(self, logs_dir: str = None, log_level: int = None):
        """Apply command-line overrides."""
        if logs_dir is not None:
            self.set_logs_dir(logs_dir)
        if log_level is not None:
            self.logger.setLevel(log_level)
            self.console_handler.setLevel(log_level)

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def log_connection(self, addr):
        """Log client connection."""
        self.info(f"New connection from {addr}")

    def log_login(self, username: str, addr):
        """Log user joining the chat."""
        self.info(f"User '{username}' joined the chat from {addr}")

    def log_rejection(self, username: str, addr):
        """Log a handshake rejected because the name is taken."""
        self.warning(f"Rejected {addr}: username '{username}' is already taken")

    def log_disconnect(self, username: str):
        """Log user disconnect."""
        self.info(f"User '{username}' left the chat")

    def log_chat(self, username: str, message: str):
        """Log chat message."""
        self.info(f"Chat from {username}: {message}")
        self._write_to_file(self.chat_log_path, f"{datetime.now().isoformat()} | {username} | {message}")

    def log_no_subscribers(self, username: str):
        """Log a publish that reached nobody."""
        self.info(f"No active subscribers to receive the message from {username}")

    def log_lagging(self, dropped: int):
        """Log a subscriber losing its oldest buffered message."""
        self.warning(f"Subscriber is lagging, dropped oldest message ({dropped} dropped so far)")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")

    def _write_to_file(self, file_path: Path, content: str):
        """Write content to log file."""
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'a', encoding='utf-8') as f:
                f.write(content + '\n')
        except OSError as e:
            self.error(f"Failed to write to log file {file_path}: {e}")


# Global logger instance
logger = ServerLogger()
