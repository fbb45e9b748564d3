import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from ..core.clock import utcnow
from ..models import Link
from ..repositories import LinkRepository

logger = logging.getLogger(__name__)


class Resolution(str, Enum):
    ACTIVE = "active"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    ERROR = "error"


@dataclass(frozen=True)
class RedirectResult:
    status: Resolution
    link: Optional[Link] = None

    @property
    def is_active(self) -> bool:
        return self.status is Resolution.ACTIVE


class RedirectResolver:
    """
    Resolve a short code to a redirect decision.

    Lookup only considers active links, so a deactivated link is reported as
    not found whatever its expiry. Expiry is checked against the injected
    clock at call time. Store failures never escape: they resolve to ERROR.
    """

    def __init__(self, links: LinkRepository, clock: Callable[[], datetime] = utcnow):
        self.links = links
        self.clock = clock

    async def resolve(self, short_code: str) -> RedirectResult:
        try:
            link = await self.links.find_active_by_code(short_code)
        except Exception:
            logger.exception("Lookup failed for short code %r", short_code)
            return RedirectResult(Resolution.ERROR)

        if link is None:
            logger.debug("Short code not found: %s", short_code)
            return RedirectResult(Resolution.NOT_FOUND)

        if link.expires_at is not None and link.expires_at < self.clock():
            logger.debug("Short code expired: %s", short_code)
            return RedirectResult(Resolution.EXPIRED, link)

        return RedirectResult(Resolution.ACTIVE, link)
