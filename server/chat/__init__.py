"""
Chat module for server-side messaging functionality.

Handles:
- Username handshake and duplicate rejection
- Message broadcasting to every other user
- Join and leave notices
"""
