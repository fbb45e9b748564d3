import uuid

from sqlalchemy import Column, String, Text, Integer, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from ..core.clock import utcnow
from ..database import Base


def generate_id() -> str:
    return str(uuid.uuid4())


class Link(Base):
    """Short link model"""
    __tablename__ = "links"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    original_url = Column(String(2048), nullable=False)
    # Unique across all users and across active and inactive links
    short_code = Column(String(20), unique=True, index=True, nullable=False)
    custom_domain = Column(String(255), nullable=True)
    title = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    expires_at = Column(DateTime, nullable=True)
    click_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    owner = relationship("User", back_populates="links")
    events = relationship("AnalyticsEvent", back_populates="link",
                          cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Link {self.short_code} -> {self.original_url}>"
