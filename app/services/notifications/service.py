from app.core.config import settings
from app.notifications.config import NotificationsConfig
from app.notifications.providers.base import NotificationProvider
from app.notifications.providers.log_only import LogNotificationProvider
from app.notifications.providers.worker import WorkerNotificationProvider
from app.notifications.runtime import get_notification_worker
from app.notifications.types import Notification
from app.notifications.worker import NotificationWorker


class NotificationService:
    def __init__(
        self,
        config: NotificationsConfig | None = None,
        worker: NotificationWorker | None = None,
    ) -> None:
        self.config = config or NotificationsConfig(
            provider=settings.NOTIFY_PROVIDER,
            video_url_template=settings.NOTIFY_VIDEO_URL_TEMPLATE,
        )
        self.provider: NotificationProvider
        if self.config.provider == "worker":
            self.provider = WorkerNotificationProvider(worker or get_notification_worker())
        elif self.config.provider == "log":
            self.provider = LogNotificationProvider()
        else:
            raise ValueError(f"unknown notification provider: {self.config.provider!r}")

    def send(self, notification: Notification) -> None:
        self.provider.send(notification)

    def video_ready(self, user_id: str, asset_id: str, playback_id: str) -> Notification:
        return video_ready_notification(user_id, asset_id, playback_id, self.config.video_url_template)


def video_ready_notification(
    user_id: str,
    asset_id: str,
    playback_id: str,
    url_template: str = "/videos/{asset_id}",
) -> Notification:
    return Notification(
        user_id=user_id,
        title="Your video is ready",
        body="Processing finished and the video can now be played.",
        tag=f"video-{asset_id}",
        url=url_template.format(asset_id=asset_id, playback_id=playback_id),
    )
