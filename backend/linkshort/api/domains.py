from fastapi import APIRouter, Depends

from ..core.security import AuthenticatedPrincipal, get_current_principal
from ..schemas.domain import (
    DomainCreate,
    DomainListResponse,
    DomainResponse,
    DomainVerifyResponse,
)
from ..services.domains import DomainService
from .deps import get_domain_service

router = APIRouter(prefix="/domains", tags=["domains"])


@router.post("", response_model=DomainResponse, status_code=201)
async def add_domain(
    domain_data: DomainCreate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: DomainService = Depends(get_domain_service)
):
    """
    Register a custom domain (Premium).

    The response carries the token to publish at
    ``/.well-known/linkshort-verification.txt`` on the domain.
    """
    return await service.add_domain(principal, domain_data.domain)


@router.get("", response_model=DomainListResponse)
async def list_domains(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: DomainService = Depends(get_domain_service)
):
    domains = await service.list_domains(principal)
    return DomainListResponse(domains=[DomainResponse.model_validate(d) for d in domains])


@router.post("/{domain_id}/verify", response_model=DomainVerifyResponse)
async def verify_domain(
    domain_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: DomainService = Depends(get_domain_service)
):
    success, message = await service.verify_domain(principal, domain_id)
    return {"success": success, "message": message}


@router.delete("/{domain_id}")
async def delete_domain(
    domain_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: DomainService = Depends(get_domain_service)
):
    await service.delete_domain(principal, domain_id)
    return {"success": True}
