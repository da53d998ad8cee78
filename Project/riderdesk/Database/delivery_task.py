"""
Defines the DeliveryTask model: one vendor-to-customer leg of an order.
"""

import uuid
from datetime import datetime
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship
from riderdesk.extensions import Base

PENDING = "Pending"
ASSIGNED = "Assigned"
PICKED_UP = "PickedUp"
DELIVERED = "Delivered"

DELIVERY_STATUSES = (PENDING, ASSIGNED, PICKED_UP, DELIVERED)


def _isoformat(value):
    return value.isoformat() if value else None


class DeliveryTask(Base):
    """
    Represents the delivery of one vendor's part of an order.

    Attributes
    ----------
    order_id : str
        Order being delivered.
    vendor_id : str
        Profile id of the vendor the rider collects from.
    rider_id : str | None
        Profile id of the rider, absent while the task is Pending.
    payment_reference : str | None
        Shared by every task of a multi-vendor checkout; groups them into a route.
    vendor_location : str | None
        Zone label captured from the vendor when the task was created.
    pickup_sequence : int | None
        Position of this stop in its route, only set for grouped tasks.
    status : str
        One of Pending, Assigned, PickedUp, Delivered.
    """

    __tablename__ = "delivery_tasks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    vendor_id = Column(String(36), nullable=False, index=True)
    rider_id = Column(String(36), nullable=True, index=True)
    payment_reference = Column(String(100), nullable=True, index=True)
    vendor_location = Column(String(255), nullable=True, index=True)

    pickup_address = Column(String(255), nullable=False)
    delivery_address = Column(String(255), nullable=False)
    delivery_phone = Column(String(20), nullable=True)

    pickup_sequence = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False, default=PENDING, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    assigned_at = Column(DateTime, nullable=True)
    picked_up_at = Column(DateTime, nullable=True)
    delivered_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    order = relationship("Order", backref="delivery_tasks")

    __table_args__ = (
        CheckConstraint(
            "status in (" + ", ".join(f"'{status}'" for status in DELIVERY_STATUSES) + ")",
            name="ck_delivery_tasks_status",
        ),
        CheckConstraint(
            "pickup_sequence is null or pickup_sequence > 0",
            name="ck_delivery_tasks_pickup_sequence",
        ),
        Index("idx_delivery_tasks_created_at", "created_at"),
    )

    @property
    def is_unclaimed(self):
        return self.status == PENDING and not self.rider_id

    def to_dict(self):
        return {
            "id": self.id,
            "order_id": self.order_id,
            "vendor_id": self.vendor_id,
            "rider_id": self.rider_id,
            "payment_reference": self.payment_reference,
            "vendor_location": self.vendor_location,
            "pickup_address": self.pickup_address,
            "delivery_address": self.delivery_address,
            "delivery_phone": self.delivery_phone,
            "pickup_sequence": self.pickup_sequence,
            "status": self.status,
            "created_at": _isoformat(self.created_at),
            "assigned_at": _isoformat(self.assigned_at),
            "picked_up_at": _isoformat(self.picked_up_at),
            "delivered_at": _isoformat(self.delivered_at),
        }
