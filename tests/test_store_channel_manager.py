"""Tests for the per-store websocket channel registry."""

from __future__ import annotations

import asyncio

import pytest

from shelfcure.infrastructure.notifications import StoreChannelManager

pytestmark = pytest.mark.anyio


class FakeSocket:
    def __init__(self, *, fail: bool = False, gate: asyncio.Event | None = None) -> None:
        self.accepted = False
        self.sent: list[dict] = []
        self.fail = fail
        self.gate = gate

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, data) -> None:
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise RuntimeError("connection reset")
        self.sent.append(data)


async def settle(rounds: int = 10) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
async def manager():
    channels = StoreChannelManager(queue_size=10)
    yield channels
    for channel_id in list(channels._channels):
        channels.disconnect(channel_id)
    await settle()


async def test_connect_accepts_the_socket(manager):
    socket = FakeSocket()

    await manager.connect("a", socket)

    assert socket.accepted is True
    assert manager.store_of("a") is None


async def test_publish_reaches_only_the_target_store(manager):
    first, second = FakeSocket(), FakeSocket()
    await manager.connect("a", first)
    await manager.connect("b", second)
    manager.join("a", 1)
    manager.join("b", 2)

    delivered = manager.publish(1, {"type": "new-notification", "data": {"id": 7}})
    await settle()

    assert delivered == 1
    assert first.sent == [{"type": "new-notification", "data": {"id": 7}}]
    assert second.sent == []


async def test_messages_arrive_in_publish_order(manager):
    socket = FakeSocket()
    await manager.connect("a", socket)
    manager.join("a", 1)

    for sequence in range(8):
        manager.publish(1, {"type": "new-notification", "data": {"seq": sequence}})
    await settle(30)

    assert [message["data"]["seq"] for message in socket.sent] == list(range(8))


async def test_join_is_idempotent_and_moves_between_stores(manager):
    socket = FakeSocket()
    await manager.connect("a", socket)

    assert manager.join("a", 1) is True
    assert manager.join("a", 1) is True
    assert manager.subscribers(1) == {"a"}

    manager.join("a", 2)
    assert manager.subscribers(1) == set()
    assert manager.subscribers(2) == {"a"}
    assert manager.store_of("a") == 2


async def test_join_unknown_channel_is_rejected(manager):
    assert manager.join("ghost", 1) is False


async def test_leave_stops_delivery(manager):
    socket = FakeSocket()
    await manager.connect("a", socket)
    manager.join("a", 1)
    manager.leave("a")

    assert manager.publish(1, {"type": "new-notification"}) == 0
    await settle()
    assert socket.sent == []


async def test_publish_can_exclude_the_sender(manager):
    sender, listener = FakeSocket(), FakeSocket()
    await manager.connect("sender", sender)
    await manager.connect("listener", listener)
    manager.join("sender", 1)
    manager.join("listener", 1)

    manager.publish(1, {"type": "sale-notification"}, exclude="sender")
    await settle()

    assert sender.sent == []
    assert listener.sent == [{"type": "sale-notification"}]


async def test_published_messages_are_copied(manager):
    socket = FakeSocket()
    await manager.connect("a", socket)
    manager.join("a", 1)
    message = {"type": "new-notification", "data": {"title": "Low Stock Alert"}}

    manager.publish(1, message)
    message["data"]["title"] = "changed"
    await settle()

    assert socket.sent[0]["data"]["title"] == "Low Stock Alert"


async def test_slow_channel_only_drops_its_own_messages():
    manager = StoreChannelManager(queue_size=2)
    gate = asyncio.Event()
    slow, fast = FakeSocket(gate=gate), FakeSocket()
    await manager.connect("slow", slow)
    await manager.connect("fast", fast)
    manager.join("slow", 1)
    manager.join("fast", 1)

    manager.publish(1, {"seq": 0})
    await settle()
    results = []
    for sequence in range(1, 4):
        results.append(manager.publish(1, {"seq": sequence}))
        await settle()

    assert results == [2, 2, 1]
    assert [message["seq"] for message in fast.sent] == [0, 1, 2, 3]

    gate.set()
    await settle()
    assert [message["seq"] for message in slow.sent] == [0, 1, 2]

    manager.disconnect("slow")
    manager.disconnect("fast")
    await settle()


async def test_failing_channel_is_disconnected_without_affecting_others(manager):
    broken, healthy = FakeSocket(fail=True), FakeSocket()
    await manager.connect("broken", broken)
    await manager.connect("healthy", healthy)
    manager.join("broken", 1)
    manager.join("healthy", 1)

    manager.publish(1, {"type": "new-notification"})
    await settle()

    assert manager.subscribers(1) == {"healthy"}
    assert healthy.sent == [{"type": "new-notification"}]

    manager.publish(1, {"type": "new-notification"})
    await settle()
    assert len(healthy.sent) == 2


async def test_send_targets_a_single_channel(manager):
    first, second = FakeSocket(), FakeSocket()
    await manager.connect("a", first)
    await manager.connect("b", second)

    assert manager.send("a", {"type": "pong"}) is True
    assert manager.send("missing", {"type": "pong"}) is False
    await settle()

    assert first.sent == [{"type": "pong"}]
    assert second.sent == []
