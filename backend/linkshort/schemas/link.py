from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import CamelModel


class LinkCreate(CamelModel):
    """Schema for creating a new short link"""
    original_url: str = Field(..., description="Original URL to shorten", min_length=1, max_length=2048)
    custom_code: Optional[str] = Field(None, description="Custom short code (Pro and Premium)")
    title: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = Field(None, max_length=2000)
    expires_at: Optional[datetime] = None


class LinkUpdate(CamelModel):
    """Schema for updating a link; only supplied fields change"""
    title: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None
    expires_at: Optional[datetime] = None
    short_code: Optional[str] = Field(None, max_length=20)


class LinkResponse(CamelModel):
    """Schema for link response"""
    id: str
    short_code: str
    short_url: str
    original_url: str
    title: Optional[str] = None
    description: Optional[str] = None
    custom_domain: Optional[str] = None
    click_count: int
    is_active: bool
    expires_at: Optional[datetime] = None
    created_at: datetime


class LinkListResponse(CamelModel):
    links: List[LinkResponse]
    limit: int
    offset: int
