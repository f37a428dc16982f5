"""
Client package for the WebSocket chat service.

This package contains all client-side functionality including:
- Connection and username handshake
- Console commands
- Configuration and utilities
"""
