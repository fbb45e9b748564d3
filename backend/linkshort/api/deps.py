"""Service providers for route dependencies."""
from functools import partial

from fastapi import Depends
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..database import get_db
from ..repositories import (
    SqlAnalyticsRepository,
    SqlDomainRepository,
    SqlLinkRepository,
    SqlUserRepository,
)
from ..services.analytics import AnalyticsService
from ..services.domains import DomainService
from ..services.links import LinkService
from ..services.users import UserService
from ..utils.fetch import fetch_page_title, fetch_verification_token

limiter = Limiter(key_func=get_remote_address)


def get_link_service(db: AsyncSession = Depends(get_db)) -> LinkService:
    title_fetcher = None
    if settings.FETCH_PAGE_TITLE:
        title_fetcher = partial(fetch_page_title, timeout=settings.TITLE_FETCH_TIMEOUT)

    return LinkService(
        SqlLinkRepository(db),
        title_fetcher=title_fetcher,
        code_length=settings.SHORT_CODE_LENGTH,
        max_attempts=settings.MAX_CODE_ATTEMPTS,
    )


def get_analytics_service(db: AsyncSession = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(SqlAnalyticsRepository(db), SqlLinkRepository(db))


def get_domain_service(db: AsyncSession = Depends(get_db)) -> DomainService:
    return DomainService(
        SqlDomainRepository(db),
        token_fetcher=partial(fetch_verification_token, timeout=settings.DOMAIN_VERIFY_TIMEOUT),
    )


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(SqlUserRepository(db))
