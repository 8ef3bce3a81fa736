from __future__ import annotations

import logging
from typing import Optional

from app.notifications.host import (
    NotificationClickEvent,
    NotificationCloseEvent,
    NotificationSurface,
    PushEvent,
    ViewClients,
)
from app.notifications.types import NotificationOptions, PayloadDecodeError, decode_payload, display_title

logger = logging.getLogger("notifications")


class NotificationDispatcher:
    """Turns push events into notifications and routes clicks to views."""

    def __init__(self, surface: NotificationSurface, clients: ViewClients) -> None:
        self.surface = surface
        self.clients = clients

    async def on_push(self, event: PushEvent) -> None:
        if not event.data:
            logger.info("notifications: push received without data")
            return
        try:
            payload = decode_payload(event.data)
        except PayloadDecodeError as e:
            logger.error("notifications: dropping malformed push payload: %s", e)
            return
        title = display_title(payload)
        options = NotificationOptions.from_payload(payload)
        event.wait_until(self.surface.show_notification(title, options))

    async def on_notification_click(self, event: NotificationClickEvent) -> None:
        notification = event.notification
        notification.close()
        url = _target_url(notification.data)
        if url:
            event.wait_until(self._focus_or_open(url))

    async def on_notification_close(self, event: NotificationCloseEvent) -> None:
        logger.info("notifications: notification closed: %s", event.notification.tag)

    async def _focus_or_open(self, url: str) -> None:
        views = await self.clients.match_all(type="window")
        for view in views:
            focus = getattr(view, "focus", None)
            if view.url == url and focus is not None:
                await focus()
                return
        open_window = getattr(self.clients, "open_window", None)
        if open_window is not None:
            await open_window(url)


def _target_url(data: object) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    url = data.get("url")
    return url if isinstance(url, str) and url else None
