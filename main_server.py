#!/usr/bin/env python3
"""
WebSocket Chat Server - Main Entry Point

Accepts WebSocket connections on /ws, assigns each a username and
broadcasts every message to all other connected users.

Usage:
    python main_server.py

Optional arguments:
    --host HOST           Bind address (default: 127.0.0.1)
    --port PORT           TCP port (default: 3000)
    --capacity N          Pending messages kept per client (default: 100)
    --log-dir DIR         Chat history log directory (default: logs)
    --no-leave-notice     Do not broadcast "has left the chat!" notices
    --debug               Enable debug logging
"""

if __name__ == "__main__":
    from server.main_server import main

    main()
