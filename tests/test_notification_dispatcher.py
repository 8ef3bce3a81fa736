import json

import pytest

from app.notifications.dispatcher import NotificationDispatcher
from app.notifications.host import NotificationClickEvent, NotificationCloseEvent, PushEvent
from app.notifications.types import (
    DEFAULT_BADGE,
    DEFAULT_BODY,
    DEFAULT_ICON,
    DEFAULT_TAG,
    DEFAULT_TITLE,
    PayloadDecodeError,
    decode_payload,
)


class FakeSurface:
    def __init__(self):
        self.shown = []

    async def show_notification(self, title, options):
        self.shown.append((title, options))


class FakeNotification:
    def __init__(self, log, data=None, tag="event-reminder"):
        self.title = "Reminder"
        self.tag = tag
        self.data = data
        self.log = log

    def close(self):
        self.log.append("close")


class FakeView:
    def __init__(self, url, log):
        self.url = url
        self.log = log

    async def focus(self):
        self.log.append(("focus", self.url))


class UnfocusableView:
    def __init__(self, url):
        self.url = url


class FakeClients:
    def __init__(self, views, log):
        self.views = views
        self.log = log

    async def match_all(self, type="window"):
        self.log.append(("match_all", type))
        return list(self.views)

    async def open_window(self, url):
        self.log.append(("open", url))


class ClientsWithoutOpen:
    def __init__(self, views, log):
        self.views = views
        self.log = log

    async def match_all(self, type="window"):
        self.log.append(("match_all", type))
        return list(self.views)


def make_dispatcher(views=(), log=None, clients_cls=FakeClients):
    log = [] if log is None else log
    surface = FakeSurface()
    clients = clients_cls(list(views), log)
    return NotificationDispatcher(surface, clients), surface, log


def blob(obj) -> bytes:
    return json.dumps(obj).encode()


@pytest.mark.asyncio
@pytest.mark.parametrize("data", [None, b"", ""])
async def test_push_without_data_shows_nothing(data):
    dispatcher, surface, _ = make_dispatcher()
    event = PushEvent(data)
    await dispatcher.on_push(event)
    assert await event.settled() == []
    assert surface.shown == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "data",
    [
        b"not json",
        b"\xff\xfe\x00garbage",
        "[1, 2, 3]",
        '"just a string"',
    ],
)
async def test_malformed_push_is_dropped(data):
    dispatcher, surface, _ = make_dispatcher()
    event = PushEvent(data)
    await dispatcher.on_push(event)
    assert event.pending == 0
    assert await event.settled() == []
    assert surface.shown == []


@pytest.mark.asyncio
async def test_push_with_odd_field_types_is_still_shown():
    dispatcher, surface, _ = make_dispatcher()
    payload = {"title": "Reminder", "body": "Event in 1hr", "tag": 42, "badge": 7, "data": {"url": "/events/42"}}
    event = PushEvent(json.dumps(payload))
    await dispatcher.on_push(event)
    await event.settled()
    [(title, options)] = surface.shown
    assert title == "Reminder"
    assert options.tag == "42"
    assert options.badge == "7"
    assert options.data == {"url": "/events/42"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "data",
    [
        '{"title": {"text": "x"}}',
        '{"title": 0}',
        '{"data": ["url"]}',
        '{"data": "/events/42"}',
        '{"icon": [1], "badge": null}',
    ],
)
async def test_unusable_fields_fall_back_to_defaults(data):
    dispatcher, surface, _ = make_dispatcher()
    event = PushEvent(data)
    await dispatcher.on_push(event)
    await event.settled()
    [(title, options)] = surface.shown
    assert title == DEFAULT_TITLE
    assert options.icon == DEFAULT_ICON
    assert options.badge == DEFAULT_BADGE
    assert options.data == {}


@pytest.mark.asyncio
async def test_require_interaction_uses_truthiness():
    dispatcher, surface, _ = make_dispatcher()
    event = PushEvent('{"title": 5, "requireInteraction": "sometimes"}')
    await dispatcher.on_push(event)
    await event.settled()
    [(title, options)] = surface.shown
    assert title == "5"
    assert options.require_interaction is True


@pytest.mark.asyncio
async def test_push_defaults_are_substituted():
    dispatcher, surface, _ = make_dispatcher()
    event = PushEvent(b"{}")
    await dispatcher.on_push(event)
    await event.settled()
    [(title, options)] = surface.shown
    assert title == DEFAULT_TITLE == "Event Reminder"
    assert options.body == DEFAULT_BODY == "You have a new notification"
    assert options.tag == DEFAULT_TAG == "event-reminder"
    assert options.icon == DEFAULT_ICON
    assert options.badge == DEFAULT_BADGE
    assert options.require_interaction is False
    assert options.data == {}


@pytest.mark.asyncio
async def test_push_empty_strings_fall_back_to_defaults():
    dispatcher, surface, _ = make_dispatcher()
    event = PushEvent(blob({"title": "", "body": "", "tag": "", "data": None}))
    await dispatcher.on_push(event)
    await event.settled()
    [(title, options)] = surface.shown
    assert title == "Event Reminder"
    assert options.body == "You have a new notification"
    assert options.tag == "event-reminder"
    assert options.data == {}


@pytest.mark.asyncio
async def test_push_uses_payload_fields():
    dispatcher, surface, _ = make_dispatcher()
    payload = {
        "title": "Reminder",
        "body": "Event in 1hr",
        "icon": "/icons/custom.png",
        "badge": "/icons/badge.png",
        "tag": "event-42",
        "requireInteraction": True,
        "data": {"url": "/events/42", "eventId": 42},
    }
    event = PushEvent(json.dumps(payload))
    await dispatcher.on_push(event)
    await event.settled()
    [(title, options)] = surface.shown
    assert title == "Reminder"
    assert options.body == "Event in 1hr"
    assert options.icon == "/icons/custom.png"
    assert options.badge == "/icons/badge.png"
    assert options.tag == "event-42"
    assert options.require_interaction is True
    assert options.data == {"url": "/events/42", "eventId": 42}


@pytest.mark.asyncio
async def test_show_request_is_held_by_the_event():
    dispatcher, surface, _ = make_dispatcher()
    event = PushEvent(blob({"title": "Reminder"}))
    await dispatcher.on_push(event)
    assert event.pending == 1
    assert surface.shown == []
    await event.settled()
    assert [t for t, _ in surface.shown] == ["Reminder"]


@pytest.mark.asyncio
async def test_click_closes_before_navigation():
    dispatcher, _, log = make_dispatcher()
    notification = FakeNotification(log, data={"url": "/events/42"})
    event = NotificationClickEvent(notification)
    await dispatcher.on_notification_click(event)
    assert log == ["close"]
    await event.settled()
    assert log == ["close", ("match_all", "window"), ("open", "/events/42")]


@pytest.mark.asyncio
async def test_click_focuses_matching_view_without_opening():
    log = []
    views = [FakeView("/events/1", log), FakeView("/events/42", log), FakeView("/events/42", log)]
    dispatcher, _, _ = make_dispatcher(views, log)
    event = NotificationClickEvent(FakeNotification(log, data={"url": "/events/42"}))
    await dispatcher.on_notification_click(event)
    await event.settled()
    assert log == ["close", ("match_all", "window"), ("focus", "/events/42")]


@pytest.mark.asyncio
async def test_click_requires_exact_url_match():
    log = []
    views = [FakeView("/events/42/", log), FakeView("https://example.com/events/42", log)]
    dispatcher, _, _ = make_dispatcher(views, log)
    event = NotificationClickEvent(FakeNotification(log, data={"url": "/events/42"}))
    await dispatcher.on_notification_click(event)
    await event.settled()
    assert ("open", "/events/42") in log
    assert not [entry for entry in log if entry[0] == "focus"]


@pytest.mark.asyncio
async def test_click_skips_views_that_cannot_focus():
    log = []
    views = [UnfocusableView("/events/42"), FakeView("/events/42", log)]
    dispatcher, _, _ = make_dispatcher(views, log)
    event = NotificationClickEvent(FakeNotification(log, data={"url": "/events/42"}))
    await dispatcher.on_notification_click(event)
    await event.settled()
    assert log[-1] == ("focus", "/events/42")


@pytest.mark.asyncio
async def test_click_without_open_capability_is_noop():
    dispatcher, _, log = make_dispatcher(clients_cls=ClientsWithoutOpen)
    event = NotificationClickEvent(FakeNotification(log, data={"url": "/events/42"}))
    await dispatcher.on_notification_click(event)
    assert await event.settled() == []
    assert log == ["close", ("match_all", "window")]


@pytest.mark.asyncio
@pytest.mark.parametrize("data", [None, {}, {"url": ""}, {"url": None}, {"other": "/events/42"}])
async def test_click_without_url_only_closes(data):
    dispatcher, _, log = make_dispatcher()
    event = NotificationClickEvent(FakeNotification(log, data=data))
    await dispatcher.on_notification_click(event)
    assert event.pending == 0
    await event.settled()
    assert log == ["close"]


@pytest.mark.asyncio
async def test_close_logs_tag(caplog):
    dispatcher, surface, log = make_dispatcher()
    event = NotificationCloseEvent(FakeNotification(log, tag="event-42"))
    with caplog.at_level("INFO", logger="notifications"):
        await dispatcher.on_notification_close(event)
    assert "event-42" in caplog.text
    assert log == []
    assert surface.shown == []


def test_decode_payload_accepts_bytes_and_text():
    assert decode_payload(b'{"title": "a"}').title == "a"
    assert decode_payload('{"requireInteraction": true}').require_interaction is True


def test_decode_payload_rejects_non_objects():
    with pytest.raises(PayloadDecodeError):
        decode_payload("null")
