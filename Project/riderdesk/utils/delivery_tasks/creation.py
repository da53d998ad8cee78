"""
Turns a vendor's order into a Pending delivery task.
"""

from riderdesk.Database.delivery_task import DeliveryTask, PENDING
from riderdesk.Database.order import Order
from riderdesk.Database.repositories import DeliveryTaskRepository, ProfileRepository
from riderdesk.utils.delivery_tasks.errors import (
    DuplicateTask,
    Forbidden,
    InvalidRequest,
    NotFound,
)
from riderdesk.utils.websocket_utils.send_notification import (
    NotificationEvent,
    send_notifications,
)

DEFAULT_PICKUP_ADDRESS = "Vendor Location"


def normalize_location(value):
    if not value:
        return None
    trimmed = value.strip()
    return trimmed or None


def resolve_vendor_location(order, vendor):
    """First usable zone label among the order's and the vendor's."""
    candidates = (
        order.delivery_zone,
        order.delivery_state,
        vendor.location if vendor else None,
        order.delivery_city,
    )
    for candidate in candidates:
        location = normalize_location(candidate)
        if location:
            return location
    return None


def build_delivery_address(order):
    parts = (
        order.delivery_address_line_1 or order.delivery_address,
        order.delivery_city,
        order.delivery_state,
        order.delivery_postal_code,
    )
    return ", ".join(part for part in parts if part)


def create_delivery_task(session_factory, notifier, order_id, vendor_id):
    """
    Create the delivery task for ``order_id`` and tell the riders working in
    the vendor's zone about it.

    Returns the new task as a dict.
    """
    with session_factory() as session:
        tasks = DeliveryTaskRepository(session)
        profiles = ProfileRepository(session)

        order = session.get(Order, order_id)
        if order is None:
            raise NotFound("Order not found")

        if order.vendor_id != vendor_id:
            raise Forbidden("Order does not belong to this vendor")

        vendor = profiles.get(vendor_id)
        if vendor is None:
            raise NotFound("Vendor not found")

        existing = tasks.get_by_order(order_id)
        if existing is not None:
            raise DuplicateTask(
                "Delivery task already exists for this order",
                deliveryTaskId=existing.id,
                status=existing.status,
            )

        delivery_address = build_delivery_address(order)
        if not delivery_address:
            raise InvalidRequest("Order missing delivery address")

        task = tasks.add(DeliveryTask(
            order_id=order.id,
            vendor_id=vendor_id,
            vendor_location=resolve_vendor_location(order, vendor),
            pickup_address=vendor.address or vendor.location or DEFAULT_PICKUP_ADDRESS,
            delivery_address=delivery_address,
            delivery_phone=order.delivery_phone,
            payment_reference=order.payment_reference,
            status=PENDING,
        ))
        task_dict = task.to_dict()

        events = [
            NotificationEvent(
                recipient_id=rider.id,
                type="delivery_request",
                title="New delivery available",
                message=(
                    "A new delivery task is available for pickup. "
                    f"Order #{order.id[:8]}"
                ),
                metadata={
                    "order_id": order.id,
                    "delivery_task_id": task.id,
                    "payment_reference": task.payment_reference,
                    "vendor_location": task.vendor_location,
                },
            )
            for rider in profiles.riders_in_zone(task.vendor_location)
        ]

    send_notifications(notifier, events)
    return task_dict
