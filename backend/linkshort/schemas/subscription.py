from typing import List

from .base import CamelModel


class PlanResponse(CamelModel):
    tier: str
    name: str
    features: List[str]
    custom_codes: bool
    custom_domains: bool
    full_analytics: bool
    advanced_charts: bool
    pdf_download: bool


class CurrentSubscription(CamelModel):
    tier: str
    plan: PlanResponse
