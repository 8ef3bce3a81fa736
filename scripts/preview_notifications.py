import asyncio
import sys

from app.notifications.config import NotificationsConfig
from app.notifications.dispatcher import NotificationDispatcher
from app.notifications.surface import InMemoryClients, InMemoryNotificationSurface
from app.notifications.worker import NotificationWorker
from app.services.notifications.service import NotificationService


async def main(asset_id: str) -> None:
    surface = InMemoryNotificationSurface()
    clients = InMemoryClients()
    worker = NotificationWorker(NotificationDispatcher(surface, clients))
    service = NotificationService(NotificationsConfig(provider="worker"), worker=worker)

    service.send(service.video_ready("demo", asset_id, "demo-playback"))
    await worker.drain()
    for notification in surface.displayed:
        print(f"shown: {notification.title!r} tag={notification.tag} data={notification.data}")

    tag = f"video-{asset_id}"
    worker.post(surface.click(tag))
    await worker.drain()
    print(f"opened: {clients.opened}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "demo-asset"))
