from datetime import datetime
from typing import List

from pydantic import Field

from .base import CamelModel


class DomainCreate(CamelModel):
    domain: str = Field(..., min_length=1, max_length=255)


class DomainResponse(CamelModel):
    id: str
    domain: str
    is_verified: bool
    verification_token: str
    created_at: datetime


class DomainListResponse(CamelModel):
    domains: List[DomainResponse]


class DomainVerifyResponse(CamelModel):
    success: bool
    message: str
