#!/usr/bin/env python3
"""
WebSocket Chat Client - Main Entry Point

Usage:
    python main_client.py <address> <port> <username>

Commands once connected:
    send <message>   Send a message to everyone else in the chat
    leave            Disconnect
"""

if __name__ == "__main__":
    from client.main_client import main

    main()
