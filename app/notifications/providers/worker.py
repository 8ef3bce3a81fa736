from app.notifications.host import PushEvent
from app.notifications.types import Notification
from app.notifications.worker import NotificationWorker


class WorkerNotificationProvider:
    """Delivers notifications as push events to an in-process worker."""

    def __init__(self, worker: NotificationWorker) -> None:
        self.worker = worker

    def send(self, notification: Notification) -> None:
        blob = notification.to_payload().model_dump_json(by_alias=True, exclude_none=True).encode()
        self.worker.post(PushEvent(blob))
