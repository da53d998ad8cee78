"""
Rider driven status changes on delivery tasks.

Tasks only move forward, one step at a time:

    Pending -> Assigned -> PickedUp -> Delivered

Within a route a stop may not be picked up while any stop numbered before
it is still waiting to be collected.
"""

from dataclasses import dataclass
from datetime import datetime

from riderdesk.Database.delivery_task import ASSIGNED, DELIVERED, PENDING, PICKED_UP
from riderdesk.Database.repositories import DeliveryTaskRepository
from riderdesk.utils.delivery_tasks.errors import (
    Forbidden,
    InvalidStatus,
    InvalidTransition,
    NotFound,
    SequenceBlocked,
)
from riderdesk.utils.websocket_utils.send_notification import (
    NotificationEvent,
    send_notifications,
)

# target status -> status the task has to be in
REQUIRED_PREVIOUS_STATUS = {
    ASSIGNED: PENDING,
    PICKED_UP: ASSIGNED,
    DELIVERED: PICKED_UP,
}

FIRST_REACHED_AT = {
    ASSIGNED: "assigned_at",
    PICKED_UP: "picked_up_at",
    DELIVERED: "delivered_at",
}

UPDATABLE_STATUSES = (ASSIGNED, PICKED_UP, DELIVERED)


@dataclass
class StatusUpdateResult:
    task: dict
    previous_status: str
    total_stops: int


def pickup_label(pickup_sequence, total_stops) -> str:
    if pickup_sequence:
        return f"Stop {pickup_sequence} of {total_stops}"
    return "Pickup confirmed"


class StatusTransitionGate:

    def __init__(self, session_factory, notifier, clock=datetime.utcnow):
        self._session_scope = session_factory
        self._notifier = notifier
        self._clock = clock

    def update_status(self, task_id, rider_id, new_status) -> StatusUpdateResult:
        if new_status not in UPDATABLE_STATUSES:
            raise InvalidStatus(
                f"Invalid status. Must be one of: {', '.join(UPDATABLE_STATUSES)}"
            )

        events = []
        with self._session_scope() as session:
            tasks = DeliveryTaskRepository(session)

            task = tasks.get(task_id)
            if task is None:
                raise NotFound("Delivery task not found")

            if task.rider_id != rider_id:
                raise Forbidden("Delivery task does not belong to this rider")

            current_status = task.status
            if current_status != REQUIRED_PREVIOUS_STATUS[new_status]:
                raise InvalidTransition(
                    f"Cannot mark as {new_status}. Current status: {current_status}",
                    currentStatus=current_status,
                )

            payment_reference = task.payment_reference
            if new_status == PICKED_UP and payment_reference and task.pickup_sequence:
                waiting = tasks.earlier_unpicked_stops(payment_reference, task.pickup_sequence)
                if waiting:
                    raise SequenceBlocked(
                        "Please pick up earlier stops before marking this pickup.",
                        pendingStops=[stop.pickup_sequence for stop in waiting],
                    )

            now = self._clock()
            values = {"status": new_status, "updated_at": now}
            reached_at = FIRST_REACHED_AT[new_status]
            if getattr(task, reached_at) is None:
                values[reached_at] = now

            if not tasks.advance(task.id, rider_id, current_status, values):
                tasks.refresh(task)
                raise InvalidTransition(
                    f"Cannot mark as {new_status}. Current status: {task.status}",
                    currentStatus=task.status,
                )
            tasks.refresh(task)

            total_stops = 1
            if payment_reference:
                total_stops = tasks.count_by_payment_reference(payment_reference) or 1

            result = StatusUpdateResult(
                task=task.to_dict(),
                previous_status=current_status,
                total_stops=total_stops,
            )
            if new_status == PICKED_UP:
                events = self._pickup_events(rider_id, task, total_stops)

        send_notifications(self._notifier, events)
        return result

    def _pickup_events(self, rider_id, task, total_stops):
        label = pickup_label(task.pickup_sequence, total_stops)
        metadata = {
            "order_id": task.order_id,
            "delivery_task_id": task.id,
            "payment_reference": task.payment_reference,
            "pickup_sequence": task.pickup_sequence,
            "total_stops": total_stops,
        }
        return [
            NotificationEvent(
                recipient_id=task.vendor_id,
                type="delivery_pickup",
                title="Order Picked Up",
                message=f"Your order has been picked up. {label}.",
                metadata=dict(metadata),
            ),
            NotificationEvent(
                recipient_id=rider_id,
                type="delivery_pickup",
                title="Pickup Confirmed",
                message=f"Pickup confirmed for {label}.",
                metadata=dict(metadata),
            ),
        ]
