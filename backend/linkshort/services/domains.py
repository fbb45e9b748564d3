import logging
import secrets
from typing import Awaitable, Callable, List, Optional

from ..core import policy
from ..core.errors import ConflictError, NotFoundError, ValidationError
from ..core.security import AuthenticatedPrincipal
from ..models import CustomDomain
from ..repositories import DomainRepository
from ..utils.validators import is_valid_domain, normalize_domain

logger = logging.getLogger(__name__)

TokenFetcher = Callable[[str], Awaitable[Optional[str]]]


class DomainService:
    """Premium custom domains and their ownership verification."""

    def __init__(self, domains: DomainRepository, token_fetcher: TokenFetcher):
        self.domains = domains
        self.token_fetcher = token_fetcher

    async def add_domain(self, principal: AuthenticatedPrincipal, domain: str) -> CustomDomain:
        policy.ensure_can_add_custom_domain(principal.tier)

        domain = normalize_domain(domain)
        is_valid, error_msg = is_valid_domain(domain)
        if not is_valid:
            raise ValidationError(error_msg)

        if await self.domains.domain_exists(domain):
            raise ConflictError(f"Domain '{domain}' is already registered")

        record = CustomDomain(
            user_id=principal.user_id,
            domain=domain,
            verification_token=secrets.token_hex(16),
            is_verified=False,
        )
        record = await self.domains.add(record)
        logger.info("Added custom domain %s for user %s", domain, principal.user_id)
        return record

    async def list_domains(self, principal: AuthenticatedPrincipal) -> List[CustomDomain]:
        return await self.domains.list_for_user(principal.user_id)

    async def verify_domain(self, principal: AuthenticatedPrincipal, domain_id: str) -> tuple[bool, str]:
        """
        Check the published token against the stored one.

        Returns:
            Tuple of (verified, message)
        """
        record = await self.domains.get_for_user(domain_id, principal.user_id)
        if record is None:
            raise NotFoundError("Domain not found")

        if record.is_verified:
            return True, "Domain already verified"

        published = await self.token_fetcher(record.domain)
        if published != record.verification_token:
            return False, "Verification token not found on domain"

        await self.domains.mark_verified(record)
        logger.info("Verified custom domain %s", record.domain)
        return True, "Domain verified"

    async def delete_domain(self, principal: AuthenticatedPrincipal, domain_id: str) -> None:
        if not await self.domains.delete_for_user(domain_id, principal.user_id):
            raise NotFoundError("Domain not found")
