"""
Defines the Order model for a single vendor's share of a checkout.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, Float, String
from riderdesk.extensions import Base


class Order(Base):
    """
    Represents an order placed with one vendor.

    Orders paid together in a multi-vendor checkout carry the same
    ``payment_reference``.
    """

    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    vendor_id = Column(String(36), nullable=False, index=True)
    payment_reference = Column(String(100), nullable=True, index=True)
    total = Column(Float, nullable=True)
    status = Column(String(30), default="Pending")

    delivery_address = Column(String(255), nullable=True)
    delivery_address_line_1 = Column(String(255), nullable=True)
    delivery_city = Column(String(100), nullable=True)
    delivery_state = Column(String(100), nullable=True)
    delivery_zone = Column(String(100), nullable=True)
    delivery_postal_code = Column(String(20), nullable=True)
    delivery_phone = Column(String(20), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "vendor_id": self.vendor_id,
            "payment_reference": self.payment_reference,
            "total": self.total,
            "status": self.status,
            "delivery_address": self.delivery_address_line_1 or self.delivery_address,
            "delivery_city": self.delivery_city,
            "delivery_state": self.delivery_state,
            "delivery_zone": self.delivery_zone,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
