from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from ..core.clock import utcnow
from ..database import Base
from .link import generate_id


class AnalyticsEvent(Base):
    """One recorded redirect. Append-only."""
    __tablename__ = "analytics_events"

    id = Column(String(36), primary_key=True, default=generate_id)
    link_id = Column(String(36), ForeignKey("links.id", ondelete="CASCADE"), nullable=False)
    ip_address = Column(String(45), nullable=True)  # IPv4 or IPv6
    user_agent = Column(String(512), nullable=True)
    referer = Column(String(512), nullable=True)
    country = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    device_type = Column(String(20), nullable=True)
    browser = Column(String(50), nullable=True)
    os = Column(String(50), nullable=True)
    timestamp = Column(DateTime, default=utcnow, nullable=False)

    link = relationship("Link", back_populates="events")

    __table_args__ = (
        Index('idx_analytics_link_time', 'link_id', 'timestamp'),
    )

    def __repr__(self):
        return f"<AnalyticsEvent {self.id} for link {self.link_id}>"
