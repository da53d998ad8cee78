"""
Query helpers over the delivery task and profile tables.

Writes to ``delivery_tasks`` are conditional: each one names the status
(and rider) it expects to find and reports whether a row matched, so two
requests racing on the same task cannot both win.
"""

from sqlalchemy import or_, update
from riderdesk.Database.delivery_task import (
    ASSIGNED,
    DELIVERED,
    DeliveryTask,
    PENDING,
    PICKED_UP,
)
from riderdesk.Database.profile import Profile, RIDER_ROLE


class DeliveryTaskRepository:

    def __init__(self, session):
        self.session = session

    def get(self, task_id):
        return self.session.get(DeliveryTask, task_id)

    def get_by_order(self, order_id):
        return self.session.query(DeliveryTask).filter_by(order_id=order_id).first()

    def add(self, task):
        self.session.add(task)
        self.session.flush()
        return task

    def refresh(self, task):
        self.session.refresh(task)
        return task

    def list_by_payment_reference(self, payment_reference):
        """All tasks of one checkout, oldest first."""
        return (
            self.session.query(DeliveryTask)
            .filter_by(payment_reference=payment_reference)
            .order_by(DeliveryTask.created_at.asc(), DeliveryTask.id.asc())
            .all()
        )

    def count_by_payment_reference(self, payment_reference):
        return (
            self.session.query(DeliveryTask)
            .filter_by(payment_reference=payment_reference)
            .count()
        )

    def earlier_unpicked_stops(self, payment_reference, pickup_sequence):
        """Stops ahead of ``pickup_sequence`` that have not been collected yet."""
        return (
            self.session.query(DeliveryTask)
            .filter_by(payment_reference=payment_reference)
            .filter(
                DeliveryTask.pickup_sequence < pickup_sequence,
                DeliveryTask.status.notin_((PICKED_UP, DELIVERED)),
            )
            .order_by(DeliveryTask.pickup_sequence.asc())
            .all()
        )

    def list_available(self, zone=None):
        query = self.session.query(DeliveryTask).filter_by(status=PENDING, rider_id=None)
        if zone:
            query = query.filter(
                or_(
                    DeliveryTask.vendor_location == zone,
                    DeliveryTask.vendor_location.is_(None),
                    DeliveryTask.vendor_location == "",
                )
            )
        return query.order_by(DeliveryTask.created_at.desc()).all()

    def list_for_rider(self, rider_id):
        return (
            self.session.query(DeliveryTask)
            .filter_by(rider_id=rider_id)
            .order_by(DeliveryTask.created_at.desc())
            .all()
        )

    def claim(self, task_id, rider_id, assigned_at, pickup_sequence=None):
        """
        Assign a Pending, riderless task to ``rider_id``.

        Returns False when the task was claimed or moved on since it was read.
        """
        stmt = (
            update(DeliveryTask)
            .where(
                DeliveryTask.id == task_id,
                DeliveryTask.status == PENDING,
                DeliveryTask.rider_id.is_(None),
            )
            .values(
                rider_id=rider_id,
                status=ASSIGNED,
                assigned_at=assigned_at,
                pickup_sequence=pickup_sequence,
                updated_at=assigned_at,
            )
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1

    def advance(self, task_id, rider_id, from_status, values):
        """
        Apply ``values`` only while the task still belongs to ``rider_id`` and
        is still in ``from_status``.
        """
        stmt = (
            update(DeliveryTask)
            .where(
                DeliveryTask.id == task_id,
                DeliveryTask.rider_id == rider_id,
                DeliveryTask.status == from_status,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1


class ProfileRepository:

    def __init__(self, session):
        self.session = session

    def get(self, profile_id):
        return self.session.get(Profile, profile_id)

    def get_rider(self, rider_id):
        return self.session.query(Profile).filter_by(id=rider_id, role=RIDER_ROLE).first()

    def riders_in_zone(self, zone):
        if not zone:
            return []
        return self.session.query(Profile).filter_by(role=RIDER_ROLE, location=zone).all()
