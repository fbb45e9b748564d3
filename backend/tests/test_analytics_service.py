"""Tests for analytics aggregation and tier shaping."""
from datetime import datetime, timedelta

import pytest

from linkshort.core.errors import NotFoundError
from linkshort.core.security import AuthenticatedPrincipal
from linkshort.models import AnalyticsEvent
from linkshort.services.analytics import AnalyticsService, get_period_start, referrer_paths, top_n

from .fakes import InMemoryAnalyticsRepository, InMemoryLinkRepository, make_link

NOW = datetime(2026, 6, 1, 12, 0, 0)


def principal(tier):
    return AuthenticatedPrincipal(user_id="user-1", email=f"{tier}@example.com", tier=tier)


def event(link_id, at, **fields):
    values = dict(device_type="desktop", browser="Chrome", os="Windows", country="DE", referer="")
    values.update(fields)
    return AnalyticsEvent(link_id=link_id, timestamp=at, **values)


@pytest.fixture
def link():
    return make_link("abc123")


@pytest.fixture
def service(link):
    events = InMemoryAnalyticsRepository()
    countries = ["DE", "US", "FR", "GB", "JP", "BR", "IN"]
    for i, country in enumerate(countries):
        for _ in range(i + 1):
            events.events.append(event(link.id, NOW - timedelta(hours=i + 1), country=country,
                                       referer="https://news.example.org/a?x=1"))
    # Outside a 30 day window
    events.events.append(event(link.id, NOW - timedelta(days=40)))
    return AnalyticsService(events, InMemoryLinkRepository([link]), clock=lambda: NOW)


def test_period_is_clamped():
    assert get_period_start(0, NOW) == NOW - timedelta(days=1)
    assert get_period_start(1000, NOW) == NOW - timedelta(days=365)


def test_top_n():
    counts = {"a": 1, "b": 5, "c": 3}
    assert list(top_n(counts, 2)) == ["b", "c"]
    assert top_n(counts, 0) == counts


def test_referrer_paths_drop_query_and_blank():
    assert referrer_paths({"https://x.org/a?q=1": 2, "https://x.org/a": 1, "": 4}) == {"x.org/a": 3}


async def test_free_tier_sees_totals_only(service, link):
    report = await service.link_analytics(principal("free"), link.id, days=30)

    assert report["totalClicks"] == 28
    assert sum(report["clicksByDate"].values()) == 28
    assert report["clicksByCountry"] == {}
    assert report["clicksByHour"] == {}
    assert "clicksByCountry" in report["restrictions"]["lockedSections"]
    assert report["restrictions"]["canSeeFullAnalytics"] is False


async def test_pro_tier_sees_top_five(service, link):
    report = await service.link_analytics(principal("pro"), link.id, days=30)

    assert len(report["clicksByCountry"]) == 5
    assert next(iter(report["clicksByCountry"])) == "IN"
    assert report["clicksByReferrerPath"] == {}
    assert report["restrictions"]["breakdownLimit"] == 5
    assert report["restrictions"]["canSeeAdvancedCharts"] is False


async def test_premium_sees_everything(service, link):
    report = await service.link_analytics(principal("premium"), link.id, days=30)

    assert len(report["clicksByCountry"]) == 7
    assert sum(report["clicksByHour"].values()) == 28
    assert report["clicksByReferrerPath"] == {"news.example.org/a": 28}
    assert report["restrictions"]["lockedSections"] == []
    assert report["linkId"] == link.id
    assert report["shortCode"] == "abc123"


async def test_window_includes_older_events_when_widened(service, link):
    report = await service.link_analytics(principal("free"), link.id, days=60)
    assert report["totalClicks"] == 29


async def test_other_users_link_is_not_found(service, link):
    stranger = AuthenticatedPrincipal(user_id="user-2", email="x@example.com", tier="premium")
    with pytest.raises(NotFoundError):
        await service.link_analytics(stranger, link.id)


async def test_global_analytics(service):
    report = await service.global_analytics(principal("premium"))
    assert report["totalLinks"] == 1
    assert report["totalClicks"] == 28
