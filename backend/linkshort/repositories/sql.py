"""SQLAlchemy implementations of the repository interfaces."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import delete, desc, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import ConflictError
from ..models import AnalyticsEvent, CustomDomain, Link, User
from .base import AnalyticsRepository, DomainRepository, LinkRepository, UserRepository

logger = logging.getLogger(__name__)


class _SessionRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _commit(self, conflict_message: str = "Already exists") -> None:
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(conflict_message)
        except Exception:
            await self.db.rollback()
            raise


class SqlLinkRepository(_SessionRepository, LinkRepository):

    async def find_active_by_code(self, short_code: str) -> Optional[Link]:
        result = await self.db.execute(
            select(Link).where(Link.short_code == short_code, Link.is_active.is_(True))
        )
        return result.scalars().first()

    async def code_exists(self, short_code: str) -> bool:
        result = await self.db.execute(select(Link.id).where(Link.short_code == short_code))
        return result.first() is not None

    async def add(self, link: Link) -> Link:
        self.db.add(link)
        await self._commit(f"Short code '{link.short_code}' already exists")
        await self.db.refresh(link)
        return link

    async def get(self, link_id: str) -> Optional[Link]:
        return await self.db.get(Link, link_id)

    async def get_for_user(self, link_id: str, user_id: str) -> Optional[Link]:
        result = await self.db.execute(
            select(Link).where(Link.id == link_id, Link.user_id == user_id)
        )
        return result.scalars().first()

    async def list_for_user(self, user_id: str, limit: int = 50, offset: int = 0) -> List[Link]:
        result = await self.db.execute(
            select(Link)
            .where(Link.user_id == user_id)
            .order_by(desc(Link.created_at))
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def ids_for_user(self, user_id: str) -> List[str]:
        result = await self.db.execute(select(Link.id).where(Link.user_id == user_id))
        return list(result.scalars().all())

    async def update(self, link: Link, changes: Dict[str, Any]) -> Link:
        for field, value in changes.items():
            setattr(link, field, value)
        await self._commit("Short code already in use")
        await self.db.refresh(link)
        return link

    async def delete_for_user(self, link_id: str, user_id: str) -> bool:
        result = await self.db.execute(
            delete(Link).where(Link.id == link_id, Link.user_id == user_id)
        )
        await self._commit()
        return result.rowcount > 0

    async def increment_clicks(self, link_id: str) -> None:
        # Single UPDATE with an expression; no read-modify-write
        await self.db.execute(
            update(Link)
            .where(Link.id == link_id)
            .values(click_count=Link.click_count + 1)
            .execution_options(synchronize_session=False)
        )
        await self._commit()

    async def list_all(
        self,
        skip: int = 0,
        limit: int = 100,
        search: Optional[str] = None,
        active_only: bool = False,
    ) -> List[Link]:
        query = select(Link)

        if active_only:
            query = query.where(Link.is_active.is_(True))

        # Search by short_code or original_url
        if search:
            pattern = f"%{search.lower()}%"
            query = query.where(or_(
                func.lower(Link.short_code).like(pattern),
                func.lower(Link.original_url).like(pattern),
            ))

        query = query.order_by(desc(Link.created_at)).offset(skip).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def overview(self, top: int = 10) -> Dict[str, Any]:
        total_links = await self.db.scalar(select(func.count(Link.id)))
        active_links = await self.db.scalar(
            select(func.count(Link.id)).where(Link.is_active.is_(True))
        )
        total_clicks = await self.db.scalar(select(func.sum(Link.click_count)))

        result = await self.db.execute(
            select(Link).order_by(desc(Link.click_count)).limit(top)
        )

        return {
            "total_links": total_links or 0,
            "active_links": active_links or 0,
            "total_clicks": total_clicks or 0,
            "top_links": list(result.scalars().all()),
        }


class SqlAnalyticsRepository(_SessionRepository, AnalyticsRepository):

    async def add(self, event: AnalyticsEvent) -> None:
        self.db.add(event)
        await self._commit()

    async def count_total(self, link_ids: Sequence[str], since: datetime) -> int:
        if not link_ids:
            return 0
        total = await self.db.scalar(
            select(func.count(AnalyticsEvent.id)).where(
                AnalyticsEvent.link_id.in_(link_ids),
                AnalyticsEvent.timestamp >= since,
            )
        )
        return total or 0

    async def count_by_day(self, link_ids: Sequence[str], since: datetime) -> Dict[str, int]:
        # SQLite compatible date extraction
        return await self._grouped(link_ids, since, func.date(AnalyticsEvent.timestamp))

    async def count_by_hour(self, link_ids: Sequence[str], since: datetime) -> Dict[str, int]:
        # SQLite compatible hour extraction
        return await self._grouped(
            link_ids, since, func.strftime('%Y-%m-%d %H:00', AnalyticsEvent.timestamp)
        )

    async def count_by(self, link_ids: Sequence[str], since: datetime, dimension: str) -> Dict[str, int]:
        if dimension not in self.DIMENSIONS:
            raise ValueError(f"Unknown analytics dimension: {dimension}")
        column = getattr(AnalyticsEvent, dimension)
        return await self._grouped(link_ids, since, column, column.isnot(None), column != "")

    async def _grouped(self, link_ids, since, key, *filters) -> Dict[str, int]:
        if not link_ids:
            return {}

        label = key.label("bucket")
        results = await self.db.execute(
            select(label, func.count(AnalyticsEvent.id).label("clicks"))
            .where(
                AnalyticsEvent.link_id.in_(link_ids),
                AnalyticsEvent.timestamp >= since,
                *filters,
            )
            .group_by(label)
            .order_by(label)
        )

        return {str(row.bucket): row.clicks for row in results if row.bucket is not None}


class SqlUserRepository(_SessionRepository, UserRepository):

    async def get(self, user_id: str) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def add(self, user: User) -> User:
        self.db.add(user)
        await self._commit("Email is already registered")
        await self.db.refresh(user)
        return user

    async def update(self, user: User, changes: Dict[str, Any]) -> User:
        for field, value in changes.items():
            setattr(user, field, value)
        await self._commit("Email already exists")
        await self.db.refresh(user)
        return user


class SqlDomainRepository(_SessionRepository, DomainRepository):

    async def add(self, domain: CustomDomain) -> CustomDomain:
        self.db.add(domain)
        await self._commit(f"Domain '{domain.domain}' is already registered")
        await self.db.refresh(domain)
        return domain

    async def domain_exists(self, domain: str) -> bool:
        result = await self.db.execute(
            select(CustomDomain.id).where(CustomDomain.domain == domain)
        )
        return result.first() is not None

    async def list_for_user(self, user_id: str) -> List[CustomDomain]:
        result = await self.db.execute(
            select(CustomDomain)
            .where(CustomDomain.user_id == user_id)
            .order_by(desc(CustomDomain.created_at))
        )
        return list(result.scalars().all())

    async def get_for_user(self, domain_id: str, user_id: str) -> Optional[CustomDomain]:
        result = await self.db.execute(
            select(CustomDomain).where(CustomDomain.id == domain_id, CustomDomain.user_id == user_id)
        )
        return result.scalars().first()

    async def mark_verified(self, domain: CustomDomain) -> CustomDomain:
        domain.is_verified = True
        await self._commit()
        await self.db.refresh(domain)
        return domain

    async def delete_for_user(self, domain_id: str, user_id: str) -> bool:
        result = await self.db.execute(
            delete(CustomDomain).where(CustomDomain.id == domain_id, CustomDomain.user_id == user_id)
        )
        await self._commit()
        return result.rowcount > 0
