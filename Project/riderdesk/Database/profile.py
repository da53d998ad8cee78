"""
Defines the Profile model shared by customers, vendors and riders.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, String
from riderdesk.extensions import Base

RIDER_ROLE = "rider"


class Profile(Base):
    """
    Represents a marketplace account.

    ``location`` is the operating zone for riders and the business zone for
    vendors. A rider without one may take deliveries anywhere.
    """

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    role = Column(String(20), nullable=False, index=True)
    name = Column(String(150), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "role": self.role,
            "name": self.name,
            "phone": self.phone,
            "address": self.address,
            "location": self.location,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
