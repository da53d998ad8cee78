"""
Defines Notification model for vendor and rider notification feeds.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, JSON, Boolean, Text
from riderdesk.extensions import Base


class Notification(Base):
    """
    Represents a notification sent to a vendor or a rider.
    """

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipient_id = Column(String(36), nullable=False, index=True)
    type = Column(String(64), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)

    # "metadata" is reserved on declarative classes
    payload = Column("metadata", JSON, nullable=True)
    is_read = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "recipient_id": self.recipient_id,
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "metadata": self.payload,
            "is_read": self.is_read,
            "created_at": self.created_at.isoformat()
            if self.created_at else None,
        }
