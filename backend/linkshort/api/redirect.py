import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.background import BackgroundTask

from ..config import settings
from ..database import get_db
from ..repositories import SqlAnalyticsRepository, SqlLinkRepository
from ..services.clicks import ClickRecorder, RequestContext
from ..services.redirect import RedirectResolver, Resolution

logger = logging.getLogger(__name__)

router = APIRouter(tags=["redirect"])

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}

FALLBACK_PATHS = {
    Resolution.NOT_FOUND: settings.NOT_FOUND_PATH,
    Resolution.EXPIRED: settings.EXPIRED_PATH,
    Resolution.ERROR: settings.ERROR_PATH,
}


async def record_click(session_factory, link_id: str, context: RequestContext) -> None:
    """Record a click after the redirect has been sent, in its own session"""
    try:
        async with session_factory() as db:
            recorder = ClickRecorder(SqlAnalyticsRepository(db), SqlLinkRepository(db))
            outcome = await recorder.record(link_id, context)
    except Exception:
        logger.exception("Click recording failed for link %s", link_id)
        return

    if not outcome.ok:
        logger.warning("Click for link %s partially recorded: %s", link_id, "; ".join(outcome.errors))


def fallback_redirect(status: Resolution) -> RedirectResponse:
    url = settings.fallback_url(FALLBACK_PATHS.get(status, settings.ERROR_PATH))
    return RedirectResponse(url=url, status_code=302, headers=NO_CACHE_HEADERS)


@router.get("/{short_code}")
async def redirect_to_url(
    short_code: str,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Redirect to the original URL from short code.

    Lookup is case-sensitive. Unknown, inactive and expired codes go to the
    frontend fallback pages; the click is recorded after the response is
    sent and never delays or fails the redirect.
    """
    result = await RedirectResolver(SqlLinkRepository(db)).resolve(short_code)

    if not result.is_active:
        return fallback_redirect(result.status)

    link = result.link
    try:
        context = RequestContext.from_request(request)
        task = BackgroundTask(record_click, request.app.state.session_factory, link.id, context)
    except Exception:
        logger.exception("Could not schedule click recording for %s", short_code)
        task = None

    # Redirect to original URL (302 for tracking)
    return RedirectResponse(
        url=link.original_url,
        status_code=302,
        headers=NO_CACHE_HEADERS,
        background=task,
    )
