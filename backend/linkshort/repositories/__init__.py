from .base import AnalyticsRepository, DomainRepository, LinkRepository, UserRepository
from .sql import (
    SqlAnalyticsRepository,
    SqlDomainRepository,
    SqlLinkRepository,
    SqlUserRepository,
)

__all__ = [
    "AnalyticsRepository", "DomainRepository", "LinkRepository", "UserRepository",
    "SqlAnalyticsRepository", "SqlDomainRepository", "SqlLinkRepository", "SqlUserRepository",
]
