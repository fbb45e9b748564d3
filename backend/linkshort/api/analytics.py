from fastapi import APIRouter, Depends, Query

from ..core.security import AuthenticatedPrincipal, get_current_principal
from ..schemas.analytics import GlobalAnalytics
from ..services.analytics import AnalyticsService
from .deps import get_analytics_service

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/global", response_model=GlobalAnalytics)
async def get_global_analytics(
    days: int = Query(30, ge=1, le=365),
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """Clicks across every link the caller owns"""
    return await service.global_analytics(principal, days=days)
