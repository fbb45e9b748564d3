import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..core.clock import utcnow
from ..core.errors import RecordOutcome
from ..models import AnalyticsEvent
from ..repositories import AnalyticsRepository, LinkRepository
from ..utils.geo import get_geo_data
from ..utils.user_agent import classify
from ..utils.validators import get_client_ip

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Visitor details captured from a redirect request"""
    ip_address: Optional[str] = None
    user_agent: str = ""
    referer: str = ""
    country: Optional[str] = None
    city: Optional[str] = None

    @classmethod
    def from_request(cls, request) -> "RequestContext":
        geo = get_geo_data(request.headers)
        return cls(
            ip_address=get_client_ip(request),
            user_agent=request.headers.get('user-agent', '')[:512],
            referer=request.headers.get('referer', '')[:512],
            country=geo.country,
            city=geo.city,
        )


class ClickRecorder:
    """
    Best-effort click analytics.

    Writes one event row, then bumps the link counter with an atomic
    increment. The two writes succeed or fail independently; failures are
    logged and reported in the returned ``RecordOutcome``, never raised.
    """

    def __init__(
        self,
        events: AnalyticsRepository,
        links: LinkRepository,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.events = events
        self.links = links
        self.clock = clock

    async def record(self, link_id: str, context: RequestContext) -> RecordOutcome:
        errors = []
        visitor = classify(context.user_agent)

        event = AnalyticsEvent(
            link_id=link_id,
            ip_address=context.ip_address,
            user_agent=context.user_agent,
            referer=context.referer,
            country=context.country,
            city=context.city,
            device_type=visitor.device_type,
            browser=visitor.browser,
            os=visitor.os,
            timestamp=self.clock(),
        )

        event_recorded = True
        try:
            await self.events.add(event)
        except Exception as e:
            event_recorded = False
            errors.append(f"event: {e}")
            logger.warning("Failed to record analytics event for link %s", link_id, exc_info=True)

        counter_incremented = True
        try:
            await self.links.increment_clicks(link_id)
        except Exception as e:
            counter_incremented = False
            errors.append(f"counter: {e}")
            logger.warning("Failed to increment click count for link %s", link_id, exc_info=True)

        return RecordOutcome(
            event_recorded=event_recorded,
            counter_incremented=counter_incremented,
            errors=tuple(errors),
        )
