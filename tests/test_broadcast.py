from __future__ import annotations
import asyncio

from backend.broadcast import DATA_UPDATE, METRICS_UPDATE, Channel

def test_publish_reaches_every_subscriber():
    async def go():
        channel = Channel()
        a, b = channel.subscribe(), channel.subscribe()
        channel.publish(METRICS_UPDATE, {"n": 1})
        return await a.get(), await b.get()

    first, second = asyncio.run(go())
    assert first.event == second.event == METRICS_UPDATE
    assert first.data == {"n": 1}

def test_publish_without_subscribers_is_a_noop():
    msg = Channel().publish(DATA_UPDATE, {"x": 1})
    assert msg.event == DATA_UPDATE

def test_unsubscribed_clients_get_nothing():
    channel = Channel()
    sub = channel.subscribe()
    channel.unsubscribe(sub)
    channel.unsubscribe(sub)
    channel.publish(DATA_UPDATE, {})
    assert channel.subscriber_count == 0
    assert sub.queue.empty()

def test_no_replay_for_late_subscribers():
    channel = Channel()
    channel.publish(DATA_UPDATE, {"old": True})
    assert channel.subscribe().queue.empty()

def test_slow_subscriber_drops_oldest():
    channel = Channel(maxsize=2)
    sub = channel.subscribe()
    for i in range(4):
        channel.publish(METRICS_UPDATE, i)
    assert [sub.queue.get_nowait().data for _ in range(2)] == [2, 3]

def test_message_serializes_to_json():
    msg = Channel().publish(DATA_UPDATE, {"a": 1})
    dumped = msg.model_dump(mode="json")
    assert dumped["event"] == DATA_UPDATE
    assert isinstance(dumped["timestamp"], str)
