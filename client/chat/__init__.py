"""
Chat module for client-side messaging functionality.

Handles:
- Parsing console commands
- Sending chat messages
- Rendering incoming messages
"""
