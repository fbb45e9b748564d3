"""Tests for best-effort click recording."""
from datetime import datetime

from linkshort.services.clicks import ClickRecorder, RequestContext

from .fakes import (
    BrokenAnalyticsRepository,
    BrokenLinkRepository,
    InMemoryAnalyticsRepository,
    InMemoryLinkRepository,
    make_link,
)

NOW = datetime(2026, 6, 1, 12, 0, 0)

IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)

CONTEXT = RequestContext(
    ip_address="198.51.100.7",
    user_agent=IPHONE,
    referer="https://news.example.org/story",
    country="DE",
    city="Berlin",
)


async def test_records_event_and_counter():
    link = make_link("abc123")
    links = InMemoryLinkRepository([link])
    events = InMemoryAnalyticsRepository()

    outcome = await ClickRecorder(events, links, clock=lambda: NOW).record(link.id, CONTEXT)

    assert outcome.ok
    assert outcome.errors == ()
    assert link.click_count == 1

    [event] = events.events
    assert event.link_id == link.id
    assert event.timestamp == NOW
    assert event.device_type == "mobile"
    assert event.os == "iOS"
    assert event.country == "DE"
    assert event.referer == "https://news.example.org/story"


async def test_missing_user_agent_defaults():
    link = make_link("abc123")
    events = InMemoryAnalyticsRepository()

    await ClickRecorder(events, InMemoryLinkRepository([link])).record(link.id, RequestContext())

    [event] = events.events
    assert (event.device_type, event.browser, event.os) == ("desktop", "unknown", "unknown")


async def test_event_failure_still_counts_click():
    link = make_link("abc123")

    outcome = await ClickRecorder(BrokenAnalyticsRepository(), InMemoryLinkRepository([link])).record(
        link.id, CONTEXT
    )

    assert not outcome.ok
    assert not outcome.event_recorded
    assert outcome.counter_incremented
    assert link.click_count == 1
    assert len(outcome.errors) == 1


async def test_counter_failure_keeps_event():
    link = make_link("abc123")
    events = InMemoryAnalyticsRepository()

    outcome = await ClickRecorder(events, BrokenLinkRepository([link])).record(link.id, CONTEXT)

    assert outcome.event_recorded
    assert not outcome.counter_incremented
    assert len(events.events) == 1


async def test_total_failure_is_reported_not_raised():
    outcome = await ClickRecorder(BrokenAnalyticsRepository(), BrokenLinkRepository()).record(
        "missing", CONTEXT
    )

    assert not outcome.event_recorded
    assert not outcome.counter_incremented
    assert len(outcome.errors) == 2
