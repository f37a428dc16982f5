#!/usr/bin/env python3
"""
Unit tests for the broadcast channel in server/chat/broadcast.py

Covers:
- Fan-out to every subscriber
- No history for late subscribers
- Publishing with nobody listening
- Drop-oldest for a lagging subscriber
- Closing the channel
"""

import asyncio
import unittest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.protocol_definitions import ChatMessage
from server.chat.broadcast import BroadcastChannel, ChannelClosed


class TestBroadcastChannel(unittest.IsolatedAsyncioTestCase):
    """Test cases for BroadcastChannel and Subscriber."""

    def setUp(self):
        self.channel = BroadcastChannel(capacity=3)

    async def receive(self, subscriber):
        return await asyncio.wait_for(subscriber.receive(), timeout=1.0)

    async def test_publish_reaches_every_subscriber(self):
        first = self.channel.subscribe()
        second = self.channel.subscribe()
        message = ChatMessage("alice", "hello")

        self.assertEqual(self.channel.publish(message), 2)
        self.assertEqual(await self.receive(first), message)
        self.assertEqual(await self.receive(second), message)

    async def test_late_subscriber_gets_no_history(self):
        early = self.channel.subscribe()
        self.channel.publish(ChatMessage("alice", "before"))
        late = self.channel.subscribe()
        self.channel.publish(ChatMessage("alice", "after"))

        self.assertEqual((await self.receive(early)).content, "before")
        self.assertEqual((await self.receive(late)).content, "after")

    async def test_publish_without_subscribers_is_not_an_error(self):
        self.assertEqual(self.channel.publish(ChatMessage("Host", "self-test")), 0)

    async def test_same_publisher_order_is_kept(self):
        subscriber = self.channel.subscribe()
        for text in ("one", "two", "three"):
            self.channel.publish(ChatMessage("alice", text))

        received = [(await self.receive(subscriber)).content for _ in range(3)]
        self.assertEqual(received, ["one", "two", "three"])

    async def test_lagging_subscriber_drops_oldest(self):
        """Only the slow subscriber loses messages."""
        slow = self.channel.subscribe()
        for i in range(5):
            self.channel.publish(ChatMessage("alice", str(i)))
            if i == 0:
                fast = self.channel.subscribe()
                fast_seen = []
            else:
                fast_seen.append((await self.receive(fast)).content)

        self.assertEqual(slow.dropped, 2)
        received = [(await self.receive(slow)).content for _ in range(3)]
        self.assertEqual(received, ["2", "3", "4"])
        self.assertEqual(fast.dropped, 0)
        self.assertEqual(fast_seen, ["1", "2", "3", "4"])

    async def test_waiting_receiver_wakes_on_publish(self):
        subscriber = self.channel.subscribe()
        waiter = asyncio.create_task(subscriber.receive())
        await asyncio.sleep(0)
        self.channel.publish(ChatMessage("alice", "wake up"))
        self.assertEqual((await asyncio.wait_for(waiter, 1.0)).content, "wake up")

    async def test_close_wakes_subscribers(self):
        subscriber = self.channel.subscribe()
        waiter = asyncio.create_task(subscriber.receive())
        await asyncio.sleep(0)

        self.channel.close()
        with self.assertRaises(ChannelClosed):
            await asyncio.wait_for(waiter, 1.0)
        self.assertEqual(self.channel.publish(ChatMessage("alice", "late")), 0)

    async def test_close_delivers_pending_first(self):
        subscriber = self.channel.subscribe()
        self.channel.publish(ChatMessage("alice", "last words"))
        self.channel.close()

        self.assertEqual((await self.receive(subscriber)).content, "last words")
        with self.assertRaises(ChannelClosed):
            await self.receive(subscriber)

    async def test_subscribe_after_close(self):
        self.channel.close()
        with self.assertRaises(ChannelClosed):
            await self.receive(self.channel.subscribe())

    async def test_subscriber_context_manager_unsubscribes(self):
        with self.channel.subscribe() as subscriber:
            self.assertEqual(self.channel.receiver_count(), 1)
        self.assertEqual(self.channel.receiver_count(), 0)
        with self.assertRaises(ChannelClosed):
            await subscriber.receive()

    def test_capacity_must_be_positive(self):
        with self.assertRaises(ValueError):
            BroadcastChannel(capacity=0)


if __name__ == '__main__':
    unittest.main()
