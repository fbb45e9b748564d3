from fastapi import APIRouter, Depends, Query, Request

from ..config import settings
from ..core.security import AuthenticatedPrincipal, get_current_principal
from ..models import Link
from ..schemas.analytics import LinkAnalytics
from ..schemas.link import LinkCreate, LinkListResponse, LinkResponse, LinkUpdate
from ..services.analytics import AnalyticsService
from ..services.links import LinkService
from .deps import get_analytics_service, get_link_service, limiter

router = APIRouter(prefix="/links", tags=["links"])


def build_short_url(link: Link) -> str:
    if link.custom_domain:
        return f"https://{link.custom_domain}/{link.short_code}"
    return f"{settings.BASE_URL}/{link.short_code}"


def to_link_response(link: Link) -> LinkResponse:
    return LinkResponse(
        id=link.id,
        short_code=link.short_code,
        short_url=build_short_url(link),
        original_url=link.original_url,
        title=link.title,
        description=link.description,
        custom_domain=link.custom_domain,
        click_count=link.click_count or 0,
        is_active=link.is_active,
        expires_at=link.expires_at,
        created_at=link.created_at,
    )


@router.post("", response_model=LinkResponse, status_code=201)
@limiter.limit(f"{settings.RATE_LIMIT_PER_HOUR}/hour")
async def create_link(
    request: Request,
    link_data: LinkCreate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: LinkService = Depends(get_link_service)
):
    """
    Create a short link.

    Rate limited per client address. Custom codes need a Pro or Premium plan.
    """
    link = await service.create_link(
        principal,
        original_url=link_data.original_url.strip(),
        custom_code=link_data.custom_code.strip() if link_data.custom_code else None,
        title=link_data.title,
        expires_at=link_data.expires_at,
        description=link_data.description,
    )
    return to_link_response(link)


@router.get("", response_model=LinkListResponse)
async def list_links(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: LinkService = Depends(get_link_service)
):
    """Get the caller's links, newest first"""
    links = await service.list_links(principal, limit=limit, offset=offset)
    return LinkListResponse(
        links=[to_link_response(link) for link in links],
        limit=limit,
        offset=offset,
    )


@router.get("/{link_id}", response_model=LinkResponse)
async def get_link(
    link_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: LinkService = Depends(get_link_service)
):
    link = await service.get_link(principal, link_id)
    return to_link_response(link)


@router.put("/{link_id}", response_model=LinkResponse)
async def update_link(
    link_id: str,
    link_update: LinkUpdate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: LinkService = Depends(get_link_service)
):
    """
    Update a link.

    Only fields present in the body are changed; changing the short code
    requires the Premium plan.
    """
    # Forward only the fields the client actually sent
    changes = link_update.model_dump(include=link_update.model_fields_set)
    link = await service.update_link(principal, link_id, **changes)
    return to_link_response(link)


@router.delete("/{link_id}")
async def delete_link(
    link_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: LinkService = Depends(get_link_service)
):
    """Delete a link together with its analytics"""
    await service.delete_link(principal, link_id)
    return {"success": True}


@router.get("/{link_id}/analytics", response_model=LinkAnalytics)
async def get_link_analytics(
    link_id: str,
    days: int = Query(30, ge=1, le=365),
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """
    Get analytics for a link.

    Sections outside the caller's plan come back empty and are listed in
    ``restrictions.lockedSections``.
    """
    return await service.link_analytics(principal, link_id, days=days)
