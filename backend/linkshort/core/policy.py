"""
Subscription tier gates.

Tiers only decide *what a user may do or see*; the stored data is the same
for every tier. Each gate takes the tier explicitly rather than reading it
from request state.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List

from .errors import ForbiddenError


class Tier(str, Enum):
    FREE = "free"
    PRO = "pro"
    PREMIUM = "premium"


@dataclass(frozen=True)
class AnalyticsAccess:
    """What part of the analytics payload a tier may see"""
    breakdowns: bool          # country / device / browser lists
    breakdown_limit: int      # 0 means no cap
    advanced_charts: bool     # hourly series, referrer paths
    pdf_export: bool


@dataclass(frozen=True)
class Plan:
    tier: Tier
    name: str
    features: List[str]
    custom_codes: bool
    custom_domains: bool
    analytics: AnalyticsAccess


PLANS = {
    Tier.FREE: Plan(
        tier=Tier.FREE,
        name="Free",
        features=["Short links", "Click counts"],
        custom_codes=False,
        custom_domains=False,
        analytics=AnalyticsAccess(breakdowns=False, breakdown_limit=0,
                                  advanced_charts=False, pdf_export=False),
    ),
    Tier.PRO: Plan(
        tier=Tier.PRO,
        name="Pro",
        features=["Short links", "Custom short codes", "Analytics summaries"],
        custom_codes=True,
        custom_domains=False,
        analytics=AnalyticsAccess(breakdowns=True, breakdown_limit=5,
                                  advanced_charts=False, pdf_export=False),
    ),
    Tier.PREMIUM: Plan(
        tier=Tier.PREMIUM,
        name="Premium",
        features=["Short links", "Custom short codes", "Custom domains",
                  "Full analytics", "Advanced charts", "PDF reports"],
        custom_codes=True,
        custom_domains=True,
        analytics=AnalyticsAccess(breakdowns=True, breakdown_limit=0,
                                  advanced_charts=True, pdf_export=True),
    ),
}


def get_plan(tier) -> Plan:
    """Plan for a tier; unknown tiers fall back to free"""
    try:
        return PLANS[Tier(tier)]
    except ValueError:
        return PLANS[Tier.FREE]


def ensure_can_use_custom_code(tier) -> None:
    if not get_plan(tier).custom_codes:
        raise ForbiddenError("Custom codes require Pro or Premium plan")


def ensure_can_change_short_code(tier) -> None:
    if get_plan(tier).tier is not Tier.PREMIUM:
        raise ForbiddenError("Custom short codes require Premium plan")


def ensure_can_add_custom_domain(tier) -> None:
    if not get_plan(tier).custom_domains:
        raise ForbiddenError("Custom domains require Premium plan")


def analytics_access(tier) -> AnalyticsAccess:
    return get_plan(tier).analytics
