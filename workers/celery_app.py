import os
from celery import Celery
from dotenv import load_dotenv

load_dotenv()

broker = os.getenv("REDIS_URL", "redis://localhost:6379/0")
backend = broker

celery = Celery("relay_workers", broker=broker, backend=backend, include=["workers.tasks"])
celery.conf.task_routes = {
    "tasks.refresh_asset_status": {"queue": "videos"},
    "tasks.refresh_processing_assets": {"queue": "videos"},
}

# Fallback for missed webhooks
celery.conf.beat_schedule = {
    "refresh-processing-assets": {
        "task": "tasks.refresh_processing_assets",
        "schedule": 60.0,
    },
}
