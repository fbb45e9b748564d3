from .link import Link
from .user import User
from .analytics_event import AnalyticsEvent
from .custom_domain import CustomDomain

__all__ = ["Link", "User", "AnalyticsEvent", "CustomDomain"]
