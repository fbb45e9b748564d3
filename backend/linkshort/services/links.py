import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Optional

from ..core import policy
from ..core.clock import to_naive_utc
from ..core.errors import ConflictError, InternalError, NotFoundError, ValidationError
from ..core.security import AuthenticatedPrincipal
from ..core.shortener import generate_short_code, validate_custom_code
from ..models import Link
from ..repositories import LinkRepository
from ..utils.validators import is_valid_url

logger = logging.getLogger(__name__)

TitleFetcher = Callable[[str], Awaitable[Optional[str]]]

# Sentinel telling update_link a field was not supplied
UNSET = object()


class LinkService:
    """Link creation and owner-scoped management."""

    def __init__(
        self,
        links: LinkRepository,
        title_fetcher: Optional[TitleFetcher] = None,
        code_length: int = 6,
        max_attempts: int = 5,
        code_generator: Callable[[int], str] = generate_short_code,
    ):
        self.links = links
        self.title_fetcher = title_fetcher
        self.code_length = code_length
        self.max_attempts = max_attempts
        self.code_generator = code_generator

    async def create_link(
        self,
        principal: AuthenticatedPrincipal,
        original_url: str,
        custom_code: Optional[str] = None,
        title: Optional[str] = None,
        expires_at: Optional[datetime] = None,
        description: Optional[str] = None,
    ) -> Link:
        """
        Create a short link for the principal.

        Raises:
            ValidationError: Malformed URL or custom code
            ForbiddenError: Custom code requested on the free tier
            ConflictError: Custom code already taken
            InternalError: No free generated code within ``max_attempts``
        """
        is_valid, error_msg = is_valid_url(original_url)
        if not is_valid:
            raise ValidationError(error_msg)

        if custom_code:
            # Tier gate comes before any store access
            policy.ensure_can_use_custom_code(principal.tier)

            is_valid, error_msg = validate_custom_code(custom_code)
            if not is_valid:
                raise ValidationError(error_msg)

            # One check, no retry
            if await self.links.code_exists(custom_code):
                raise ConflictError("Custom short code already exists")

            short_code = custom_code
        else:
            short_code = await self._generate_unique_code()

        if not title and self.title_fetcher is not None:
            title = await self.title_fetcher(original_url)

        link = Link(
            user_id=principal.user_id,
            original_url=original_url,
            short_code=short_code,
            title=title,
            description=description,
            is_active=True,
            expires_at=to_naive_utc(expires_at),
            click_count=0,
        )

        link = await self.links.add(link)
        logger.info("Created short link %s -> %s for user %s", short_code, original_url, principal.user_id)
        return link

    async def _generate_unique_code(self) -> str:
        for attempt in range(self.max_attempts):
            code = self.code_generator(self.code_length)
            if not await self.links.code_exists(code):
                if attempt:
                    logger.debug("Generated code after %d attempts: %s", attempt + 1, code)
                return code
            logger.warning("Short code collision on attempt %d: %s", attempt + 1, code)

        raise InternalError("Unable to generate unique short code")

    async def list_links(self, principal: AuthenticatedPrincipal, limit: int = 50, offset: int = 0) -> List[Link]:
        return await self.links.list_for_user(principal.user_id, limit=limit, offset=offset)

    async def get_link(self, principal: AuthenticatedPrincipal, link_id: str) -> Link:
        link = await self.links.get_for_user(link_id, principal.user_id)
        if link is None:
            raise NotFoundError("Link not found")
        return link

    async def update_link(
        self,
        principal: AuthenticatedPrincipal,
        link_id: str,
        title=UNSET,
        is_active=UNSET,
        expires_at=UNSET,
        short_code=UNSET,
    ) -> Link:
        """
        Update the owner-editable fields of a link.

        Changing the short code is a premium feature and is checked for
        uniqueness against every other link.
        """
        link = await self.get_link(principal, link_id)
        changes = {}

        if title is not UNSET:
            changes["title"] = title
        if is_active is not UNSET and is_active is not None:
            changes["is_active"] = bool(is_active)
        if expires_at is not UNSET:
            changes["expires_at"] = to_naive_utc(expires_at)

        if short_code is not UNSET and short_code and short_code.strip():
            short_code = short_code.strip()
            policy.ensure_can_change_short_code(principal.tier)

            if short_code != link.short_code:
                is_valid, error_msg = validate_custom_code(short_code)
                if not is_valid:
                    raise ValidationError(error_msg)
                if await self.links.code_exists(short_code):
                    raise ConflictError("Short code already in use")
                changes["short_code"] = short_code

        if not changes:
            return link

        return await self.links.update(link, changes)

    async def delete_link(self, principal: AuthenticatedPrincipal, link_id: str) -> None:
        if not await self.links.delete_for_user(link_id, principal.user_id):
            raise NotFoundError("Link not found")
        logger.info("Deleted link %s for user %s", link_id, principal.user_id)
