"""
Shared constants for the WebSocket chat service.

This module contains all constants used across client and server components.
"""

# Network Configuration
DEFAULT_HOST = '127.0.0.1'
DEFAULT_SERVER_HOST = '127.0.0.1'
DEFAULT_PORT = 3000
WS_PATH = '/ws'

# Broadcast channel
CHANNEL_CAPACITY = 100  # pending messages per subscriber

# System notices are authored by this username
HOST_USERNAME = 'Host'

# Close code sent when a handshake is rejected (RFC 6455 policy violation)
CLOSE_CODE_REJECTED = 1008

# Logging
LOG_DIR = 'logs'
CHAT_LOG_FILE = 'chat_history.log'

# Client console
PROMPT = '> '


# Interactive client commands
class Commands:
    SEND = 'send'
    LEAVE = 'leave'
    EMPTY = 'empty'
    UNKNOWN = 'unknown'
