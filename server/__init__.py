"""
Server package for the WebSocket chat service.

This package contains all server-side functionality including:
- WebSocket listener and request routing
- Per-connection chat sessions
- Username registry and broadcast channel
- Configuration and utilities
"""
