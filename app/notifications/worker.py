from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from app.notifications.dispatcher import NotificationDispatcher
from app.notifications.host import (
    ExtendableEvent,
    NotificationClickEvent,
    NotificationCloseEvent,
    PushEvent,
)

logger = logging.getLogger("notifications")


class NotificationWorker:
    """Delivers queued host events to the dispatcher one at a time.

    An event is finished only once every task it registered with
    ``wait_until`` has settled; the next event starts after that.
    """

    def __init__(self, dispatcher: NotificationDispatcher) -> None:
        self.dispatcher = dispatcher
        self._queue: asyncio.Queue[ExtendableEvent] = asyncio.Queue()

    def post(self, event: ExtendableEvent) -> None:
        self._queue.put_nowait(event)

    @property
    def queued(self) -> int:
        return self._queue.qsize()

    def _handler_for(self, event: ExtendableEvent) -> Callable[..., Awaitable[None]]:
        if isinstance(event, PushEvent):
            return self.dispatcher.on_push
        if isinstance(event, NotificationClickEvent):
            return self.dispatcher.on_notification_click
        if isinstance(event, NotificationCloseEvent):
            return self.dispatcher.on_notification_close
        raise TypeError(f"unsupported event type: {type(event).__name__}")

    async def dispatch(self, event: ExtendableEvent) -> None:
        name = type(event).__name__
        try:
            await self._handler_for(event)(event)
        except Exception:
            logger.exception("notifications: %s handler failed", name)
        for error in await event.settled():
            logger.error("notifications: %s work failed: %r", name, error)

    async def drain(self) -> None:
        while not self._queue.empty():
            event = self._queue.get_nowait()
            try:
                await self.dispatch(event)
            finally:
                self._queue.task_done()

    async def join(self) -> None:
        await self._queue.join()

    async def run(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self.dispatch(event)
            finally:
                self._queue.task_done()
