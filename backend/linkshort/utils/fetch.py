import html
import logging
import re
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

TITLE_PATTERN = re.compile(r'<title[^>]*>([^<]+)</title>', re.IGNORECASE)
USER_AGENT = "Mozilla/5.0 (compatible; LinkShort-Bot/1.0)"
VERIFICATION_PATH = "/.well-known/linkshort-verification.txt"


async def fetch_page_title(url: str, timeout: float = 5.0) -> Optional[str]:
    """
    Fetch a page and return its <title>, or None.

    Failures are expected (dead hosts, non-HTML, timeouts) and are never raised.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            response = await client.get(url, headers={"User-Agent": USER_AGENT})
    except httpx.HTTPError as e:
        logger.debug("Title fetch failed for %s: %s", url, e)
        return None

    if response.status_code != 200:
        return None

    match = TITLE_PATTERN.search(response.text)
    if not match:
        return None

    title = html.unescape(match.group(1)).strip()
    return title[:500] or None


async def fetch_verification_token(domain: str, timeout: float = 5.0) -> Optional[str]:
    """Read the verification token a domain owner published at the well-known path"""
    url = f"http://{domain}{VERIFICATION_PATH}"
    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            response = await client.get(url, headers={"User-Agent": USER_AGENT})
    except httpx.HTTPError as e:
        logger.info("Verification fetch failed for %s: %s", domain, e)
        return None

    if response.status_code != 200:
        return None

    return response.text.strip() or None
