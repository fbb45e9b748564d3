"""Tests for subscription tier gates."""
import pytest

from linkshort.core import policy
from linkshort.core.errors import ForbiddenError
from linkshort.core.policy import Tier


def test_unknown_tier_falls_back_to_free():
    assert policy.get_plan("enterprise").tier is Tier.FREE
    assert policy.get_plan(None).tier is Tier.FREE


def test_custom_codes_need_paid_plan():
    with pytest.raises(ForbiddenError):
        policy.ensure_can_use_custom_code("free")
    policy.ensure_can_use_custom_code("pro")
    policy.ensure_can_use_custom_code("premium")


def test_changing_short_code_is_premium_only():
    for tier in ("free", "pro"):
        with pytest.raises(ForbiddenError):
            policy.ensure_can_change_short_code(tier)
    policy.ensure_can_change_short_code("premium")


def test_custom_domains_are_premium_only():
    with pytest.raises(ForbiddenError):
        policy.ensure_can_add_custom_domain("pro")
    policy.ensure_can_add_custom_domain("premium")


def test_analytics_access_by_tier():
    free = policy.analytics_access("free")
    pro = policy.analytics_access("pro")
    premium = policy.analytics_access("premium")

    assert not free.breakdowns
    assert pro.breakdowns and pro.breakdown_limit == 5 and not pro.advanced_charts
    assert premium.breakdowns and premium.breakdown_limit == 0
    assert premium.advanced_charts and premium.pdf_export
