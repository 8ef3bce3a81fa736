from dataclasses import dataclass


@dataclass(frozen=True)
class NotificationsConfig:
    provider: str = "log"
    video_url_template: str = "/videos/{asset_id}"
