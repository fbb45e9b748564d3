from .link import LinkCreate, LinkResponse, LinkUpdate
from .user import UserCreate, UserResponse, Token

__all__ = ["LinkCreate", "LinkResponse", "LinkUpdate", "UserCreate", "UserResponse", "Token"]
