"""Tests for short code resolution."""
from datetime import datetime, timedelta

import pytest

from linkshort.services.redirect import RedirectResolver, Resolution

from .fakes import BrokenLinkRepository, InMemoryLinkRepository, make_link

NOW = datetime(2026, 6, 1, 12, 0, 0)


def resolver_for(*links):
    return RedirectResolver(InMemoryLinkRepository(list(links)), clock=lambda: NOW)


async def test_active_link():
    link = make_link("abc123")
    result = await resolver_for(link).resolve("abc123")

    assert result.status is Resolution.ACTIVE
    assert result.link is link


async def test_future_expiry_is_active():
    result = await resolver_for(make_link("abc123", expires_at=NOW + timedelta(minutes=1))).resolve("abc123")
    assert result.status is Resolution.ACTIVE


async def test_past_expiry_is_expired():
    result = await resolver_for(make_link("abc123", expires_at=NOW - timedelta(seconds=1))).resolve("abc123")
    assert result.status is Resolution.EXPIRED
    assert not result.is_active


@pytest.mark.parametrize("expires_at", [None, NOW - timedelta(days=1), NOW + timedelta(days=1)])
async def test_inactive_link_is_not_found_whatever_its_expiry(expires_at):
    link = make_link("abc123", is_active=False, expires_at=expires_at)
    result = await resolver_for(link).resolve("abc123")
    assert result.status is Resolution.NOT_FOUND


async def test_unknown_code():
    result = await resolver_for(make_link("abc123")).resolve("zzz999")
    assert result.status is Resolution.NOT_FOUND
    assert result.link is None


async def test_lookup_is_case_sensitive():
    result = await resolver_for(make_link("abc123")).resolve("ABC123")
    assert result.status is Resolution.NOT_FOUND


async def test_store_failure_is_error():
    result = await RedirectResolver(BrokenLinkRepository()).resolve("abc123")
    assert result.status is Resolution.ERROR
