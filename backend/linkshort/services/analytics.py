from datetime import datetime, timedelta
from typing import Callable, Dict, List, Sequence
from urllib.parse import urlparse

from ..core import policy
from ..core.clock import utcnow
from ..core.errors import NotFoundError
from ..core.security import AuthenticatedPrincipal
from ..repositories import AnalyticsRepository, LinkRepository

MAX_DAYS = 365

# Breakdown sections gated by tier, keyed by response field
BREAKDOWNS = {
    "clicksByCountry": "country",
    "clicksByDevice": "device_type",
    "clicksByBrowser": "browser",
    "clicksByOs": "os",
}


def get_period_start(days: int, now: datetime) -> datetime:
    """Start of the trailing window, clamped to 1..365 days"""
    days = max(1, min(days, MAX_DAYS))
    return now - timedelta(days=days)


def top_n(counts: Dict[str, int], limit: int) -> Dict[str, int]:
    """Keep the ``limit`` largest buckets; 0 keeps everything"""
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    if limit:
        ordered = ordered[:limit]
    return dict(ordered)


def referrer_paths(referrers: Dict[str, int]) -> Dict[str, int]:
    """Collapse full referrer URLs to host + path"""
    paths: Dict[str, int] = {}
    for referer, clicks in referrers.items():
        parsed = urlparse(referer)
        if not parsed.hostname:
            continue
        key = f"{parsed.hostname}{parsed.path}"
        paths[key] = paths.get(key, 0) + clicks
    return paths


class AnalyticsService:
    """Bucketed click analytics, shaped by the caller's tier."""

    def __init__(
        self,
        events: AnalyticsRepository,
        links: LinkRepository,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.events = events
        self.links = links
        self.clock = clock

    async def link_analytics(self, principal: AuthenticatedPrincipal, link_id: str, days: int = 30) -> dict:
        """Analytics for one link the principal owns"""
        link = await self.links.get_for_user(link_id, principal.user_id)
        if link is None:
            raise NotFoundError("Link not found")

        report = await self._build(principal, [link.id], days)
        report["linkId"] = link.id
        report["shortCode"] = link.short_code
        return report

    async def global_analytics(self, principal: AuthenticatedPrincipal, days: int = 30) -> dict:
        """Analytics across every link the principal owns"""
        link_ids = await self.links.ids_for_user(principal.user_id)
        report = await self._build(principal, link_ids, days)
        report["totalLinks"] = len(link_ids)
        return report

    async def _build(self, principal: AuthenticatedPrincipal, link_ids: Sequence[str], days: int) -> dict:
        access = policy.analytics_access(principal.tier)
        since = get_period_start(days, self.clock())

        clicks_by_date = await self.events.count_by_day(link_ids, since)
        referrers = await self.events.count_by(link_ids, since, "referer")
        total = await self.events.count_total(link_ids, since)

        report = {
            "days": max(1, min(days, MAX_DAYS)),
            "totalClicks": total,
            "clicksByDate": clicks_by_date,
            "clicksByReferrer": top_n(referrers, access.breakdown_limit),
        }

        locked: List[str] = []
        for field, dimension in BREAKDOWNS.items():
            if access.breakdowns:
                counts = await self.events.count_by(link_ids, since, dimension)
                report[field] = top_n(counts, access.breakdown_limit)
            else:
                report[field] = {}
                locked.append(field)

        if access.advanced_charts:
            report["clicksByHour"] = await self.events.count_by_hour(link_ids, since)
            report["clicksByReferrerPath"] = referrer_paths(referrers)
        else:
            report["clicksByHour"] = {}
            report["clicksByReferrerPath"] = {}
            locked.extend(["clicksByHour", "clicksByReferrerPath"])

        report["restrictions"] = {
            "tier": policy.get_plan(principal.tier).tier.value,
            "canSeeFullAnalytics": access.breakdowns and not access.breakdown_limit,
            "canSeeAdvancedCharts": access.advanced_charts,
            "canDownloadPdf": access.pdf_export,
            "breakdownLimit": access.breakdown_limit,
            "lockedSections": locked,
        }
        return report
