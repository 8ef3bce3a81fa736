from app.services.notifications.service import NotificationService, video_ready_notification

__all__ = ["NotificationService", "video_ready_notification"]
