from datetime import datetime, timedelta

import pytest

from riderdesk import create_app, extensions
from riderdesk.config import TestingConfig
from riderdesk.Database.delivery_task import DeliveryTask, PENDING
from riderdesk.Database.order import Order
from riderdesk.Database.profile import Profile
from riderdesk.extensions import session_scope
from riderdesk.utils.websocket_utils.send_notification import NOTIFIER_EXTENSION

BASE_TIME = datetime(2026, 1, 21, 12, 0, 0)


class RecordingNotifier:
    def __init__(self):
        self.events = []

    def send(self, event):
        self.events.append(event)

    def for_recipient(self, recipient_id):
        return [event for event in self.events if event.recipient_id == recipient_id]


class FailingNotifier:
    def __init__(self):
        self.attempts = 0

    def send(self, event):
        self.attempts += 1
        raise RuntimeError("notification sink is down")


@pytest.fixture
def app():
    app, _ = create_app(TestingConfig)
    app.extensions[NOTIFIER_EXTENSION] = RecordingNotifier()
    with app.app_context():
        yield app
    extensions.SessionLocal.remove()
    extensions.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def notifier(app):
    return app.extensions[NOTIFIER_EXTENSION]


@pytest.fixture
def failing_notifier(app):
    failing = FailingNotifier()
    app.extensions[NOTIFIER_EXTENSION] = failing
    return failing


class Seeder:
    """Inserts profiles, orders and tasks; every task gets a distinct created_at."""

    def __init__(self):
        self._tick = 0

    def profile(self, profile_id, role="rider", location=None, address=None):
        with session_scope() as session:
            session.add(Profile(id=profile_id, role=role, location=location, address=address,
                                name=profile_id.title()))
        return profile_id

    def rider(self, rider_id, location=None):
        return self.profile(rider_id, role="rider", location=location)

    def vendor(self, vendor_id, location=None, address=None):
        return self.profile(vendor_id, role="vendor", location=location, address=address)

    def order(self, order_id, vendor_id, payment_reference=None, **delivery):
        delivery.setdefault("delivery_address_line_1", "12 Allen Avenue")
        with session_scope() as session:
            session.add(Order(
                id=order_id,
                user_id="customer-1",
                vendor_id=vendor_id,
                payment_reference=payment_reference,
                **delivery,
            ))
        return order_id

    def task(self, task_id, vendor_id="vendor-1", payment_reference=None,
             vendor_location="Lagos", status=PENDING, rider_id=None, pickup_sequence=None):
        self._tick += 1
        order_id = self.order(f"order-{task_id}", vendor_id, payment_reference)
        with session_scope() as session:
            session.add(DeliveryTask(
                id=task_id,
                order_id=order_id,
                vendor_id=vendor_id,
                rider_id=rider_id,
                payment_reference=payment_reference,
                vendor_location=vendor_location,
                pickup_address="Vendor street",
                delivery_address="12 Allen Avenue, Ikeja",
                pickup_sequence=pickup_sequence,
                status=status,
                created_at=BASE_TIME + timedelta(seconds=self._tick),
            ))
        return task_id

    def group(self, payment_reference, task_ids, vendor_location="Lagos"):
        for task_id in task_ids:
            self.task(task_id, vendor_id=f"vendor-{task_id}",
                      payment_reference=payment_reference, vendor_location=vendor_location)
        return task_ids


@pytest.fixture
def seed(app):
    return Seeder()


@pytest.fixture
def load_task(app):
    def _load(task_id):
        with session_scope() as session:
            return session.get(DeliveryTask, task_id)
    return _load
