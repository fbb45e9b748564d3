from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from .base import CamelModel


class UserCreate(BaseModel):
    """Schema for registering a new user"""
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    name: Optional[str] = Field(None, max_length=255)


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=100)


class UserResponse(CamelModel):
    """Schema for user response"""
    id: str
    email: str
    name: Optional[str] = None
    tier: str
    is_admin: bool
    created_at: datetime


class Token(BaseModel):
    """Schema for authentication token"""
    access_token: str
    token_type: str


class AuthResponse(Token):
    user: UserResponse


class ProfileUpdate(CamelModel):
    """Only supplied fields change"""
    name: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None


class ProfileUpdateResponse(CamelModel):
    message: str
    user: UserResponse


class PasswordUpdate(CamelModel):
    current_password: str = Field(..., min_length=1, max_length=100)
    new_password: str = Field(..., min_length=6, max_length=100)
