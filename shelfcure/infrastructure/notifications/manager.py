"""Connection management helpers for store notification websockets."""

from __future__ import annotations

import asyncio
import copy
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, DefaultDict, Protocol, Set

from shelfcure.config import get_settings

logger = logging.getLogger(__name__)


class ChannelSocket(Protocol):
    """Subset of :class:`fastapi.WebSocket` used by the manager."""

    async def accept(self) -> None: ...

    async def send_json(self, data: Any) -> None: ...


@dataclass(eq=False)
class _Channel:
    channel_id: str
    websocket: ChannelSocket
    queue: asyncio.Queue
    store_id: int | None = None
    writer: asyncio.Task | None = field(default=None, repr=False)


class StoreChannelManager:
    """Manage websocket channels grouped by the store they subscribed to.

    Every channel owns a bounded outbox drained by a single writer task, so
    messages reach a channel in the order they were queued and a slow client
    only ever delays itself. All methods must run on the event loop thread.
    """

    def __init__(self, *, queue_size: int = 100) -> None:
        self._queue_size = queue_size
        self._channels: dict[str, _Channel] = {}
        self._stores: DefaultDict[int, Set[str]] = defaultdict(set)

    async def connect(self, channel_id: str, websocket: ChannelSocket) -> None:
        """Accept the websocket connection and start its writer task."""

        await websocket.accept()
        self.register(channel_id, websocket)

    def register(self, channel_id: str, websocket: ChannelSocket) -> None:
        """Track an already accepted ``websocket`` under ``channel_id``."""

        if channel_id in self._channels:
            self.disconnect(channel_id)
        channel = _Channel(
            channel_id=channel_id,
            websocket=websocket,
            queue=asyncio.Queue(maxsize=self._queue_size),
        )
        channel.writer = asyncio.get_running_loop().create_task(self._drain(channel))
        self._channels[channel_id] = channel

    def join(self, channel_id: str, store_id: int) -> bool:
        """Subscribe ``channel_id`` to ``store_id``; a channel follows one store."""

        channel = self._channels.get(channel_id)
        if channel is None:
            return False
        if channel.store_id == store_id:
            return True
        self.leave(channel_id)
        channel.store_id = store_id
        self._stores[store_id].add(channel_id)
        logger.info("Channel %s joined store %s", channel_id, store_id)
        return True

    def leave(self, channel_id: str) -> None:
        """Remove ``channel_id`` from whichever store it was subscribed to."""

        channel = self._channels.get(channel_id)
        if channel is None or channel.store_id is None:
            return
        members = self._stores.get(channel.store_id)
        if members is not None:
            members.discard(channel_id)
            if not members:
                self._stores.pop(channel.store_id, None)
        channel.store_id = None

    def disconnect(self, channel_id: str) -> None:
        """Forget ``channel_id`` and stop its writer."""

        self.leave(channel_id)
        channel = self._channels.pop(channel_id, None)
        if channel is None:
            return
        if channel.writer is not None and channel.writer is not asyncio.current_task():
            channel.writer.cancel()

    def store_of(self, channel_id: str) -> int | None:
        channel = self._channels.get(channel_id)
        return channel.store_id if channel else None

    def subscribers(self, store_id: int) -> Set[str]:
        return set(self._stores.get(store_id, ()))

    def send(self, channel_id: str, message: dict[str, Any]) -> bool:
        """Queue ``message`` for a single channel."""

        channel = self._channels.get(channel_id)
        if channel is None:
            return False
        return self._enqueue(channel, message)

    def publish(
        self, store_id: int, message: dict[str, Any], *, exclude: str | None = None
    ) -> int:
        """Queue ``message`` for every channel subscribed to ``store_id``.

        Never waits for delivery. Returns how many channels accepted it.
        """

        delivered = 0
        for channel_id in list(self._stores.get(store_id, ())):
            if channel_id == exclude:
                continue
            channel = self._channels.get(channel_id)
            if channel is not None and self._enqueue(channel, message):
                delivered += 1
        return delivered

    def _enqueue(self, channel: _Channel, message: dict[str, Any]) -> bool:
        try:
            channel.queue.put_nowait(copy.deepcopy(message))
        except asyncio.QueueFull:
            logger.warning(
                "Dropping %s message for slow channel %s",
                message.get("type"),
                channel.channel_id,
            )
            return False
        return True

    async def _drain(self, channel: _Channel) -> None:
        while True:
            message = await channel.queue.get()
            try:
                await channel.websocket.send_json(message)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.warning(
                    "Realtime delivery to channel %s failed; disconnecting",
                    channel.channel_id,
                    exc_info=True,
                )
                self.disconnect(channel.channel_id)
                return
            finally:
                channel.queue.task_done()


notification_manager = StoreChannelManager(
    queue_size=get_settings().dispatch_queue_size
)


__all__ = ["ChannelSocket", "StoreChannelManager", "notification_manager"]
