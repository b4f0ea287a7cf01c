"""Single-channel async fan-out for live dashboard updates."""
from __future__ import annotations

import asyncio
import datetime as dt
import logging
from typing import Any

from pydantic import BaseModel, Field

from app.common import utcnow

DATA_UPDATE = "data-update"
METRICS_UPDATE = "metrics-update"


class UpdateMessage(BaseModel):
    """Typed payload pushed to every channel member."""

    event: str
    data: Any
    timestamp: dt.datetime = Field(default_factory=utcnow)


class Subscription:
    """One subscriber's inbox. Iterate it to receive messages."""

    def __init__(self, maxsize: int = 16) -> None:
        self.queue: asyncio.Queue[UpdateMessage] = asyncio.Queue(maxsize=maxsize)

    def offer(self, message: UpdateMessage) -> None:
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            # slow consumer: drop the oldest message
            self.queue.get_nowait()
            self.queue.put_nowait(message)

    async def get(self) -> UpdateMessage:
        return await self.queue.get()

    def __aiter__(self):
        return self

    async def __anext__(self) -> UpdateMessage:
        return await self.queue.get()


class Channel:
    """Best-effort broadcast: no acks, no replay, no delivery guarantee."""

    def __init__(self, maxsize: int = 16) -> None:
        self._subscribers: set[Subscription] = set()
        self._maxsize = maxsize

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> Subscription:
        sub = Subscription(self._maxsize)
        self._subscribers.add(sub)
        logging.info(f"Subscriber joined live updates ({self.subscriber_count} total)")
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        if sub in self._subscribers:
            self._subscribers.discard(sub)
            logging.info(f"Subscriber left live updates ({self.subscriber_count} total)")

    def publish(self, event: str, data: Any) -> UpdateMessage:
        message = UpdateMessage(event=event, data=data)
        for sub in list(self._subscribers):
            sub.offer(message)
        return message
