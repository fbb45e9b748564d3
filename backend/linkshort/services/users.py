import logging

from starlette.concurrency import run_in_threadpool

from ..core.errors import AuthenticationError, ConflictError, NotFoundError
from ..core.policy import Tier
from ..core.security import get_password_hash, verify_password
from ..models import User
from ..repositories import UserRepository

logger = logging.getLogger(__name__)

# Sentinel telling update_profile a field was not supplied
UNSET = object()


class UserService:
    """
    Registration, credential checks and account settings.

    bcrypt hashing and checks run in the threadpool, off the event loop.
    """

    def __init__(self, users: UserRepository):
        self.users = users

    async def register(self, email: str, password: str, name: str = None) -> User:
        email = email.strip().lower()

        if await self.users.get_by_email(email):
            raise ConflictError("Email is already registered")

        user = User(
            email=email,
            name=name,
            password_hash=await run_in_threadpool(get_password_hash, password),
            tier=Tier.FREE.value,
            is_admin=False,
        )
        user = await self.users.add(user)
        logger.info("Registered user %s", user.id)
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """
        Authenticate a user.

        Raises:
            AuthenticationError: Unknown email or wrong password
        """
        user = await self.users.get_by_email(email.strip().lower())

        if not user or not await run_in_threadpool(verify_password, password, user.password_hash):
            raise AuthenticationError("Invalid email or password")

        return user

    async def _get(self, user_id: str) -> User:
        user = await self.users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def update_profile(self, user_id: str, name=UNSET, email=UNSET) -> User:
        """
        Change the display name and/or email.

        Raises:
            ConflictError: The email belongs to another user
        """
        user = await self._get(user_id)
        changes = {}

        if name is not UNSET:
            changes["name"] = name.strip() if name else None

        if email is not UNSET and email:
            email = email.strip().lower()
            if email != user.email:
                existing = await self.users.get_by_email(email)
                if existing is not None and existing.id != user.id:
                    raise ConflictError("Email already exists")
                changes["email"] = email

        if not changes:
            return user

        user = await self.users.update(user, changes)
        logger.info("Updated profile of user %s", user.id)
        return user

    async def update_password(self, user_id: str, current_password: str, new_password: str) -> None:
        """
        Replace the password after checking the current one.

        Raises:
            AuthenticationError: The current password is wrong
        """
        user = await self._get(user_id)

        if not await run_in_threadpool(verify_password, current_password, user.password_hash):
            raise AuthenticationError("Current password is incorrect")

        new_hash = await run_in_threadpool(get_password_hash, new_password)
        await self.users.update(user, {"password_hash": new_hash})
        logger.info("Changed password of user %s", user.id)
