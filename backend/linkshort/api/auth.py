from datetime import timedelta

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..core.errors import NotFoundError
from ..core.security import AuthenticatedPrincipal, create_access_token, get_current_principal
from ..database import get_db
from ..models import User
from ..repositories import SqlUserRepository
from ..schemas.user import (
    AuthResponse,
    PasswordUpdate,
    ProfileUpdate,
    ProfileUpdateResponse,
    Token,
    UserCreate,
    UserLogin,
    UserResponse,
)
from ..services.users import UserService
from .deps import get_user_service

router = APIRouter(prefix="/auth", tags=["auth"])


def issue_token(response: Response, user: User) -> str:
    """Create a JWT for the user and set it as the HTTP-only auth cookie"""
    expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(data={"sub": user.id}, expires_delta=expires)

    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=access_token,
        max_age=int(expires.total_seconds()),
        httponly=True,
        samesite="lax",
    )
    return access_token


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    user_data: UserCreate,
    response: Response,
    service: UserService = Depends(get_user_service)
):
    """Register a new free-tier account and sign it in"""
    user = await service.register(user_data.email, user_data.password, user_data.name)
    access_token = issue_token(response, user)

    return AuthResponse(
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=Token)
async def login(
    credentials: UserLogin,
    response: Response,
    service: UserService = Depends(get_user_service)
):
    """
    Login and get access token.

    The token is returned in the body and also set as an HTTP-only cookie.
    """
    user = await service.authenticate(credentials.email, credentials.password)
    access_token = issue_token(response, user)

    return {"access_token": access_token, "token_type": "bearer"}


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(settings.AUTH_COOKIE_NAME)
    return {"success": True}


@router.get("/me", response_model=UserResponse)
async def get_me(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Get current user info"""
    user = await SqlUserRepository(db).get(principal.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.put("/update-profile", response_model=ProfileUpdateResponse)
async def update_profile(
    profile: ProfileUpdate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service)
):
    """Change name and/or email; a taken email is a 409"""
    changes = profile.model_dump(include=profile.model_fields_set)
    user = await service.update_profile(principal.user_id, **changes)

    return ProfileUpdateResponse(
        message="Profile updated successfully",
        user=UserResponse.model_validate(user),
    )


@router.put("/update-password")
async def update_password(
    passwords: PasswordUpdate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service)
):
    await service.update_password(principal.user_id, passwords.current_password, passwords.new_password)
    return {"message": "Password updated successfully"}
