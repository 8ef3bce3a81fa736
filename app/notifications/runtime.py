"""Process-wide notification worker used by the ``worker`` provider."""
from __future__ import annotations

from typing import Optional

from app.notifications.dispatcher import NotificationDispatcher
from app.notifications.surface import InMemoryClients, InMemoryNotificationSurface
from app.notifications.worker import NotificationWorker

_worker: Optional[NotificationWorker] = None


def _new_worker() -> NotificationWorker:
    return NotificationWorker(NotificationDispatcher(InMemoryNotificationSurface(), InMemoryClients()))


def get_notification_worker() -> NotificationWorker:
    global _worker
    if _worker is None:
        _worker = _new_worker()
    return _worker


def start_notification_worker() -> NotificationWorker:
    # a queue stays bound to the event loop that first waited on it,
    # so every loop (app startup, each task run) gets its own worker
    global _worker
    _worker = _new_worker()
    return _worker


def stop_notification_worker() -> None:
    global _worker
    _worker = None
