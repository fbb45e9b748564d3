import logging
from dataclasses import dataclass
from typing import Optional

from user_agents import parse

logger = logging.getLogger(__name__)

DEFAULT_DEVICE = "desktop"
UNKNOWN = "unknown"


@dataclass(frozen=True)
class VisitorInfo:
    """Device/browser/OS classification of a visitor"""
    device_type: str = DEFAULT_DEVICE
    browser: str = UNKNOWN
    os: str = UNKNOWN


def _family(value: Optional[str]) -> str:
    # ua-parser reports unrecognised families as "Other"
    if not value or value == "Other":
        return UNKNOWN
    return value


def classify(user_agent: Optional[str]) -> VisitorInfo:
    """
    Classify a raw User-Agent header.

    Never raises: empty or unparseable input yields desktop/unknown/unknown.
    """
    if not user_agent:
        return VisitorInfo()

    try:
        ua = parse(user_agent)
    except Exception:
        logger.debug("Unparseable user agent: %r", user_agent[:100])
        return VisitorInfo()

    if ua.is_bot:
        device_type = "bot"
    elif ua.is_tablet:
        device_type = "tablet"
    elif ua.is_mobile:
        device_type = "mobile"
    else:
        device_type = DEFAULT_DEVICE

    return VisitorInfo(
        device_type=device_type,
        browser=_family(ua.browser.family),
        os=_family(ua.os.family),
    )
