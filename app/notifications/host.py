"""Event types and host capabilities seen by the notification dispatcher.

The host (a browser worker runtime, or the in-memory surface used by
previews and tests) delivers events and owns the notification surface and
the list of open application views. The dispatcher only requests actions.
"""
from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Dict, List, Optional, Protocol, Sequence

from app.notifications.types import NotificationOptions


class DisplayedNotification(Protocol):
    title: str
    tag: str
    data: Dict[str, Any]

    def close(self) -> None:
        ...


class NotificationSurface(Protocol):
    async def show_notification(self, title: str, options: NotificationOptions) -> None:
        ...


class ApplicationView(Protocol):
    url: str


class ViewClients(Protocol):
    async def match_all(self, type: str = "window") -> Sequence[ApplicationView]:
        ...


class ExtendableEvent:
    """An event whose lifetime can be extended past its handler.

    Handlers register pending work with ``wait_until``; the host awaits
    ``settled()`` before it may reclaim the worker.
    """

    def __init__(self) -> None:
        self._pending: List[asyncio.Future] = []

    def wait_until(self, awaitable: Awaitable[Any]) -> None:
        self._pending.append(asyncio.ensure_future(awaitable))

    @property
    def pending(self) -> int:
        return sum(1 for f in self._pending if not f.done())

    async def settled(self) -> List[BaseException]:
        errors: List[BaseException] = []
        # work registered while waiting is awaited too
        while self._pending:
            batch, self._pending = self._pending, []
            results = await asyncio.gather(*batch, return_exceptions=True)
            errors.extend(r for r in results if isinstance(r, BaseException))
        return errors


class PushEvent(ExtendableEvent):
    def __init__(self, data: Optional[bytes | str] = None) -> None:
        super().__init__()
        self.data = data


class NotificationEvent(ExtendableEvent):
    def __init__(self, notification: DisplayedNotification) -> None:
        super().__init__()
        self.notification = notification


class NotificationClickEvent(NotificationEvent):
    pass


class NotificationCloseEvent(NotificationEvent):
    pass
