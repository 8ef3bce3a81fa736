from app.notifications.providers.base import NotificationProvider
from app.notifications.providers.log_only import LogNotificationProvider
from app.notifications.providers.worker import WorkerNotificationProvider

__all__ = [
    "NotificationProvider",
    "LogNotificationProvider",
    "WorkerNotificationProvider",
]
