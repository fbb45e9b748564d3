"""Narrow storage interfaces, one per entity."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from ..models import AnalyticsEvent, CustomDomain, Link, User


class LinkRepository(ABC):
    """Storage operations on short links."""

    @abstractmethod
    async def find_active_by_code(self, short_code: str) -> Optional[Link]:
        """Get an active link by its exact (case-sensitive) short code.

        Args:
            short_code: The short code to lookup

        Returns:
            The link if it exists and is active, None otherwise
        """

    @abstractmethod
    async def code_exists(self, short_code: str) -> bool:
        """Check whether a short code is taken by any link, active or not."""

    @abstractmethod
    async def add(self, link: Link) -> Link:
        """Persist a new link.

        Raises:
            ConflictError: If the short code was taken concurrently
        """

    @abstractmethod
    async def get(self, link_id: str) -> Optional[Link]:
        """Get a link by id regardless of owner."""

    @abstractmethod
    async def get_for_user(self, link_id: str, user_id: str) -> Optional[Link]:
        """Get a link by id only if it belongs to the given user."""

    @abstractmethod
    async def list_for_user(self, user_id: str, limit: int = 50, offset: int = 0) -> List[Link]:
        """List a user's links, newest first."""

    @abstractmethod
    async def ids_for_user(self, user_id: str) -> List[str]:
        """Ids of every link the user owns."""

    @abstractmethod
    async def update(self, link: Link, changes: Dict[str, Any]) -> Link:
        """Apply field changes to a link and persist them.

        Raises:
            ConflictError: If a changed short code collides with another link
        """

    @abstractmethod
    async def delete_for_user(self, link_id: str, user_id: str) -> bool:
        """Delete a user's link.

        Returns:
            True if a link was deleted
        """

    @abstractmethod
    async def increment_clicks(self, link_id: str) -> None:
        """Atomically add one to the link's click counter in the store."""

    @abstractmethod
    async def list_all(
        self,
        skip: int = 0,
        limit: int = 100,
        search: Optional[str] = None,
        active_only: bool = False,
    ) -> List[Link]:
        """List links across all users, newest first."""

    @abstractmethod
    async def overview(self, top: int = 10) -> Dict[str, Any]:
        """System-wide totals: total_links, active_links, total_clicks, top_links."""


class AnalyticsRepository(ABC):
    """Append and aggregate click events."""

    # Columns that may be used as a breakdown dimension
    DIMENSIONS = ("country", "city", "device_type", "browser", "os", "referer")

    @abstractmethod
    async def add(self, event: AnalyticsEvent) -> None:
        """Persist one click event."""

    @abstractmethod
    async def count_total(self, link_ids: Sequence[str], since: datetime) -> int:
        """Number of events for the links since a timestamp."""

    @abstractmethod
    async def count_by_day(self, link_ids: Sequence[str], since: datetime) -> Dict[str, int]:
        """Event counts keyed by ISO date (YYYY-MM-DD)."""

    @abstractmethod
    async def count_by_hour(self, link_ids: Sequence[str], since: datetime) -> Dict[str, int]:
        """Event counts keyed by hour (YYYY-MM-DD HH:00)."""

    @abstractmethod
    async def count_by(self, link_ids: Sequence[str], since: datetime, dimension: str) -> Dict[str, int]:
        """Event counts keyed by one of ``DIMENSIONS``; empty values are skipped."""


class UserRepository(ABC):
    """Storage operations on users."""

    @abstractmethod
    async def get(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def add(self, user: User) -> User:
        """Persist a new user.

        Raises:
            ConflictError: If the email is already registered
        """

    @abstractmethod
    async def update(self, user: User, changes: Dict[str, Any]) -> User:
        """Apply field changes to a user and persist them.

        Raises:
            ConflictError: If a changed email belongs to another user
        """


class DomainRepository(ABC):
    """Storage operations on custom domains."""

    @abstractmethod
    async def add(self, domain: CustomDomain) -> CustomDomain:
        """Persist a new domain.

        Raises:
            ConflictError: If the domain is already registered
        """

    @abstractmethod
    async def domain_exists(self, domain: str) -> bool:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str) -> List[CustomDomain]:
        pass

    @abstractmethod
    async def get_for_user(self, domain_id: str, user_id: str) -> Optional[CustomDomain]:
        pass

    @abstractmethod
    async def mark_verified(self, domain: CustomDomain) -> CustomDomain:
        pass

    @abstractmethod
    async def delete_for_user(self, domain_id: str, user_id: str) -> bool:
        pass
