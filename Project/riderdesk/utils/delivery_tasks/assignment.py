"""
Rider acceptance of delivery tasks.

Accepting one task of a multi-vendor checkout claims every still unclaimed
task of that checkout for the same rider, numbered in pickup order. The
claim is all or nothing: it runs in a single transaction and each task is
written with a conditional update, so a rider who loses a race leaves no
partial assignment behind.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List

from riderdesk.Database.delivery_task import PENDING
from riderdesk.Database.repositories import DeliveryTaskRepository, ProfileRepository
from riderdesk.utils.delivery_tasks.errors import (
    AlreadyAssigned,
    NotAvailable,
    NotFound,
    RiderNotFound,
    ZoneMismatch,
)
from riderdesk.utils.delivery_tasks.route_grouper import RoutePlan, group_and_sequence
from riderdesk.utils.delivery_tasks.zone import ineligible_tasks
from riderdesk.utils.websocket_utils.send_notification import (
    NotificationEvent,
    send_notifications,
)


@dataclass
class AssignmentResult:
    task: dict
    total_stops: int
    assigned_count: int
    is_grouped: bool


class AssignmentCoordinator:

    def __init__(self, session_factory, notifier, clock=datetime.utcnow):
        self._session_scope = session_factory
        self._notifier = notifier
        self._clock = clock

    def accept_task(self, task_id, rider_id) -> AssignmentResult:
        with self._session_scope() as session:
            tasks = DeliveryTaskRepository(session)
            profiles = ProfileRepository(session)

            rider = profiles.get_rider(rider_id)
            if rider is None:
                raise RiderNotFound("Rider not found or not approved")

            task = tasks.get(task_id)
            if task is None:
                raise NotFound("Delivery task not found")

            if task.status != PENDING:
                raise NotAvailable(
                    f"Delivery task is not available. Current status: {task.status}",
                    currentStatus=task.status,
                )

            if task.rider_id:
                raise AlreadyAssigned("Delivery task is already assigned to another rider")

            plan = group_and_sequence(tasks, task.payment_reference, task.id)
            if ineligible_tasks(rider.location, plan.members):
                raise ZoneMismatch("This delivery is assigned to a different zone.")

            assigned_at = self._clock()
            for stop in plan.tasks_to_assign:
                claimed = tasks.claim(stop.task.id, rider.id, assigned_at, stop.pickup_sequence)
                if not claimed:
                    # raising rolls back the stops already claimed in this batch
                    raise AlreadyAssigned("Delivery task is already assigned to another rider")

            for member in plan.members:
                tasks.refresh(member)

            result = AssignmentResult(
                task=task.to_dict(),
                total_stops=plan.total_stops,
                assigned_count=len(plan.tasks_to_assign),
                is_grouped=plan.is_grouped,
            )
            events = self._assignment_events(rider.id, task, plan)

        send_notifications(self._notifier, events)
        return result

    def _assignment_events(self, rider_id, task, plan: RoutePlan) -> List[NotificationEvent]:
        events = []
        notified_vendors = set()
        for assigned in plan.members:
            if assigned.vendor_id in notified_vendors:
                continue
            notified_vendors.add(assigned.vendor_id)
            events.append(NotificationEvent(
                recipient_id=assigned.vendor_id,
                type="delivery_assigned",
                title="Rider Assigned",
                message="A rider has been assigned and will pick up this order soon.",
                metadata={
                    "order_id": assigned.order_id,
                    "delivery_task_id": assigned.id,
                    "payment_reference": assigned.payment_reference,
                    "pickup_sequence": assigned.pickup_sequence,
                    "total_stops": plan.total_stops,
                },
            ))

        total_stops = plan.total_stops
        events.append(NotificationEvent(
            recipient_id=rider_id,
            type="delivery_route_assigned",
            title="Multi-stop Pickup Assigned" if plan.is_grouped else "Pickup Assigned",
            message=(
                f"You have {total_stops} pickup stop{'' if total_stops == 1 else 's'} "
                f"for this order group."
            ),
            metadata={
                "order_id": task.order_id,
                "delivery_task_id": task.id,
                "payment_reference": task.payment_reference,
                "pickup_sequence": task.pickup_sequence,
                "total_stops": total_stops,
            },
        ))
        return events
