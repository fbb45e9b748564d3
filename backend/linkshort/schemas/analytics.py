from typing import Dict, List

from .base import CamelModel


class AnalyticsRestrictions(CamelModel):
    """Which sections the caller's tier unlocks"""
    tier: str
    can_see_full_analytics: bool
    can_see_advanced_charts: bool
    can_download_pdf: bool
    breakdown_limit: int
    locked_sections: List[str]


class AnalyticsReport(CamelModel):
    """Click counts bucketed over the trailing window"""
    days: int
    total_clicks: int
    clicks_by_date: Dict[str, int]
    clicks_by_country: Dict[str, int]
    clicks_by_device: Dict[str, int]
    clicks_by_browser: Dict[str, int]
    clicks_by_os: Dict[str, int]
    clicks_by_referrer: Dict[str, int]
    clicks_by_referrer_path: Dict[str, int]
    clicks_by_hour: Dict[str, int]
    restrictions: AnalyticsRestrictions


class LinkAnalytics(AnalyticsReport):
    """Complete analytics for a link"""
    link_id: str
    short_code: str


class GlobalAnalytics(AnalyticsReport):
    """Analytics across all of a user's links"""
    total_links: int
