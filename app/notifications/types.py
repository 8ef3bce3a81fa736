from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from pydantic import ValidationError

from app.schemas.notifications import NotificationPayload

DEFAULT_TITLE = "Event Reminder"
DEFAULT_BODY = "You have a new notification"
DEFAULT_ICON = "/icons/event-reminder-icon.png"
DEFAULT_BADGE = "/icons/event-badge.png"
DEFAULT_TAG = "event-reminder"


class PayloadDecodeError(ValueError):
    pass


def decode_payload(blob: bytes | str) -> NotificationPayload:
    """Parse a push blob into a NotificationPayload.

    Only blobs that are not JSON, or not a JSON object, raise
    PayloadDecodeError; field values are extracted leniently.
    """
    try:
        raw = json.loads(blob)
    except (TypeError, ValueError) as e:
        raise PayloadDecodeError(f"invalid json: {e}") from e
    if not isinstance(raw, dict):
        raise PayloadDecodeError(f"expected a json object, got {type(raw).__name__}")
    try:
        return NotificationPayload.model_validate(raw)
    except ValidationError as e:
        raise PayloadDecodeError(str(e)) from e


@dataclass(frozen=True)
class NotificationOptions:
    body: str
    icon: str
    badge: str
    tag: str
    require_interaction: bool = False
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: NotificationPayload) -> "NotificationOptions":
        return cls(
            body=payload.body or DEFAULT_BODY,
            icon=payload.icon or DEFAULT_ICON,
            badge=payload.badge or DEFAULT_BADGE,
            tag=payload.tag or DEFAULT_TAG,
            require_interaction=payload.require_interaction or False,
            data=payload.data or {},
        )


def display_title(payload: NotificationPayload) -> str:
    return payload.title or DEFAULT_TITLE


@dataclass(frozen=True)
class Notification:
    user_id: str
    title: str
    body: str
    tag: Optional[str] = None
    url: Optional[str] = None
    require_interaction: bool = False

    def to_payload(self) -> NotificationPayload:
        data = {"url": self.url} if self.url else {}
        return NotificationPayload(
            title=self.title,
            body=self.body,
            tag=self.tag,
            require_interaction=self.require_interaction,
            data=data,
        )
