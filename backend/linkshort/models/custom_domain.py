from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from ..core.clock import utcnow
from ..database import Base
from .link import generate_id


class CustomDomain(Base):
    """Branded domain owned by a premium user"""
    __tablename__ = "custom_domains"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    domain = Column(String(255), unique=True, index=True, nullable=False)
    verification_token = Column(String(64), nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    owner = relationship("User", back_populates="domains")

    def __repr__(self):
        return f"<CustomDomain {self.domain}>"
