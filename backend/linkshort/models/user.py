from sqlalchemy import Column, String, DateTime, Boolean
from sqlalchemy.orm import relationship

from ..core.clock import utcnow
from ..core.policy import Tier
from ..database import Base
from .link import generate_id


class User(Base):
    """Dashboard user"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=False)
    tier = Column(String(20), default=Tier.FREE.value, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    links = relationship("Link", back_populates="owner", cascade="all, delete-orphan",
                         passive_deletes=True)
    domains = relationship("CustomDomain", back_populates="owner", cascade="all, delete-orphan",
                           passive_deletes=True)

    def __repr__(self):
        return f"<User {self.email} ({self.tier})>"
