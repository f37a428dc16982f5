"""
Broadcast channel module.

A fan-out channel: every message published is queued for each subscriber
that existed at publish time. Each subscriber owns a bounded queue; when a
slow subscriber's queue is full its oldest message is dropped so that other
subscribers are never held back.
"""

import asyncio
from typing import Set

from common.constants import CHANNEL_CAPACITY
from common.protocol_definitions import ChatMessage
from server.utils.logger import logger


class ChannelClosed(Exception):
    """Raised by Subscriber.receive() once the channel has been closed."""


_CLOSED = object()


class Subscriber:
    """Receiving end of a BroadcastChannel, owned by one connection."""

    def __init__(self, channel: 'BroadcastChannel', capacity: int):
        self.channel = channel
        # One extra slot so the close marker always fits
        self.queue = asyncio.Queue(maxsize=capacity + 1)
        self.capacity = capacity
        self.dropped = 0
        self.closed = False

    def _deliver(self, message: ChatMessage):
        if self.queue.qsize() >= self.capacity:
            self.queue.get_nowait()
            self.dropped += 1
            logger.log_lagging(self.dropped)
        self.queue.put_nowait(message)

    def _mark_closed(self):
        self.queue.put_nowait(_CLOSED)

    async def receive(self) -> ChatMessage:
        """Wait for the next message. Raises ChannelClosed after close."""
        if self.closed:
            raise ChannelClosed()
        item = await self.queue.get()
        if item is _CLOSED:
            self.closed = True
            raise ChannelClosed()
        return item

    def close(self):
        """Unsubscribe. Safe to call more than once."""
        self.closed = True
        self.channel.unsubscribe(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class BroadcastChannel:
    """Multi-producer, multi-consumer fan-out of chat messages."""

    def __init__(self, capacity: int = CHANNEL_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self.subscribers: Set[Subscriber] = set()
        self.closed = False

    def subscribe(self) -> Subscriber:
        """Create a subscriber that sees every message published from now on."""
        subscriber = Subscriber(self, self.capacity)
        if self.closed:
            subscriber._mark_closed()
        else:
            self.subscribers.add(subscriber)
        return subscriber

    def unsubscribe(self, subscriber: Subscriber):
        self.subscribers.discard(subscriber)

    def publish(self, message: ChatMessage) -> int:
        """
        Queue a message for every live subscriber.

        Returns the number of subscribers it was queued for. Publishing with
        no subscribers is not an error; it is only logged.
        """
        if self.closed or not self.subscribers:
            logger.log_no_subscribers(message.username)
            return 0

        for subscriber in list(self.subscribers):
            subscriber._deliver(message)
        return len(self.subscribers)

    def receiver_count(self) -> int:
        return len(self.subscribers)

    def close(self):
        """Close the channel and wake every subscriber with ChannelClosed."""
        if self.closed:
            return
        self.closed = True
        for subscriber in list(self.subscribers):
            subscriber._mark_closed()
        self.subscribers.clear()
