#!/usr/bin/env python3
"""
Unit tests for the chat message envelope in common/protocol_definitions.py

Covers:
- Rendering and equality
- JSON wire form
- Rejection of malformed wire text
- Host notices
"""

import dataclasses
import json
import unittest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.constants import HOST_USERNAME
from common.protocol_definitions import (
    ChatMessage, create_join_notice, create_leave_notice, create_rejection_notice
)


class TestChatMessage(unittest.TestCase):
    """Test cases for the ChatMessage envelope."""

    def test_render(self):
        message = ChatMessage("alice", "hello")
        self.assertEqual(message.render(), "alice: hello")
        self.assertEqual(str(message), "alice: hello")

    def test_equality_is_structural(self):
        self.assertEqual(ChatMessage("alice", "hi"), ChatMessage("alice", "hi"))
        self.assertNotEqual(ChatMessage("alice", "hi"), ChatMessage("bob", "hi"))

    def test_immutable(self):
        message = ChatMessage("alice", "hi")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            message.content = "changed"

    def test_wire_form_has_exactly_two_fields(self):
        """The JSON object carries only username and content."""
        data = json.loads(ChatMessage("alice", "hi").to_json())
        self.assertEqual(data, {"username": "alice", "content": "hi"})

    def test_json_round_trip_keeps_unicode_and_empty_values(self):
        for message in (ChatMessage("", ""), ChatMessage("zoë", "naïve: \"quoted\"\nline")):
            decoded = ChatMessage.from_json(message.to_json())
            self.assertEqual(decoded, message)
            self.assertEqual(decoded.render(), message.render())

    def test_from_json_rejects_malformed_text(self):
        for text in ("not json", "[1, 2]", '{"username": "alice"}', '{"username": 1, "content": "x"}'):
            with self.subTest(text=text):
                with self.assertRaises(ValueError):
                    ChatMessage.from_json(text)


class TestNotices(unittest.TestCase):
    """Test cases for the Host-authored notices."""

    def test_join_notice(self):
        notice = create_join_notice("alice")
        self.assertEqual(notice.username, HOST_USERNAME)
        self.assertEqual(notice.content, "alice has joined the chat!")

    def test_leave_notice(self):
        self.assertEqual(create_leave_notice("alice").render(), "Host: alice has left the chat!")

    def test_rejection_notice(self):
        notice = create_rejection_notice("alice")
        self.assertEqual(notice.username, HOST_USERNAME)
        self.assertIn("already taken", notice.content)
        self.assertIn("alice", notice.content)


if __name__ == '__main__':
    unittest.main()
