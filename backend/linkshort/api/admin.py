from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFoundError
from ..core.security import AuthenticatedPrincipal, get_admin_principal
from ..database import get_db
from ..repositories import SqlLinkRepository
from ..schemas.link import LinkResponse
from .links import to_link_response

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/links", response_model=List[LinkResponse])
async def get_all_links(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    search: Optional[str] = None,
    active_only: bool = False,
    db: AsyncSession = Depends(get_db),
    admin: AuthenticatedPrincipal = Depends(get_admin_principal)
):
    """
    Get all links with pagination and filtering.

    ``search`` matches short code or original URL, case-insensitively.
    """
    links = await SqlLinkRepository(db).list_all(
        skip=skip, limit=limit, search=search, active_only=active_only
    )
    return [to_link_response(link) for link in links]


@router.patch("/links/{link_id}/toggle", response_model=LinkResponse)
async def toggle_link_status(
    link_id: str,
    db: AsyncSession = Depends(get_db),
    admin: AuthenticatedPrincipal = Depends(get_admin_principal)
):
    """Toggle link active status"""
    links = SqlLinkRepository(db)
    link = await links.get(link_id)

    if not link:
        raise NotFoundError("Link not found")

    link = await links.update(link, {"is_active": not link.is_active})
    return to_link_response(link)


@router.get("/stats/overview")
async def get_overview_stats(
    db: AsyncSession = Depends(get_db),
    admin: AuthenticatedPrincipal = Depends(get_admin_principal)
):
    """Get overall statistics"""
    stats = await SqlLinkRepository(db).overview(top=10)

    return {
        "totalLinks": stats["total_links"],
        "activeLinks": stats["active_links"],
        "inactiveLinks": stats["total_links"] - stats["active_links"],
        "totalClicks": stats["total_clicks"],
        "topLinks": [
            {
                "id": link.id,
                "shortCode": link.short_code,
                "originalUrl": link.original_url,
                "clickCount": link.click_count,
            }
            for link in stats["top_links"]
        ],
    }
