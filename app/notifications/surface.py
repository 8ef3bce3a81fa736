"""In-memory notification host used for previews and tests."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from app.notifications.host import NotificationClickEvent, NotificationCloseEvent
from app.notifications.types import NotificationOptions

DISPLAYED = "displayed"
CLICKED = "clicked"
DISMISSED = "dismissed"
CLOSED = "closed"
REPLACED = "replaced"


class InMemoryNotification:
    def __init__(self, surface: "InMemoryNotificationSurface", title: str, options: NotificationOptions) -> None:
        self._surface = surface
        self.title = title
        self.options = options
        self.tag = options.tag
        self.data: Dict[str, Any] = dict(options.data)
        self.state = DISPLAYED

    def close(self) -> None:
        if self.state == DISPLAYED:
            self.state = CLOSED
        self._surface._remove(self)


class InMemoryNotificationSurface:
    def __init__(self) -> None:
        self._displayed: Dict[str, InMemoryNotification] = {}
        self.shown: List[InMemoryNotification] = []

    async def show_notification(self, title: str, options: NotificationOptions) -> None:
        previous = self._displayed.get(options.tag)
        if previous is not None:
            previous.state = REPLACED
        notification = InMemoryNotification(self, title, options)
        self._displayed[options.tag] = notification
        self.shown.append(notification)

    @property
    def displayed(self) -> List[InMemoryNotification]:
        return list(self._displayed.values())

    def get(self, tag: str) -> Optional[InMemoryNotification]:
        return self._displayed.get(tag)

    def click(self, tag: str) -> NotificationClickEvent:
        notification = self._active(tag)
        notification.state = CLICKED
        return NotificationClickEvent(notification)

    def dismiss(self, tag: str) -> NotificationCloseEvent:
        notification = self._active(tag)
        notification.state = DISMISSED
        self._remove(notification)
        return NotificationCloseEvent(notification)

    def _active(self, tag: str) -> InMemoryNotification:
        notification = self._displayed.get(tag)
        if notification is None or notification.state != DISPLAYED:
            raise LookupError(f"no displayed notification with tag {tag!r}")
        return notification

    def _remove(self, notification: InMemoryNotification) -> None:
        if self._displayed.get(notification.tag) is notification:
            del self._displayed[notification.tag]


class InMemoryView:
    def __init__(self, url: str) -> None:
        self.url = url
        self.focused = False

    async def focus(self) -> "InMemoryView":
        self.focused = True
        return self


class InMemoryClients:
    def __init__(self, views: Optional[List[InMemoryView]] = None) -> None:
        self.views: List[InMemoryView] = list(views or [])
        self.opened: List[str] = []

    async def match_all(self, type: str = "window") -> List[InMemoryView]:
        if type != "window":
            return []
        return list(self.views)

    async def open_window(self, url: str) -> InMemoryView:
        view = InMemoryView(url)
        self.views.append(view)
        self.opened.append(url)
        return view
