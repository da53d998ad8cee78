from riderdesk.Database.delivery_task import ASSIGNED
from riderdesk.Database.repositories import DeliveryTaskRepository
from riderdesk.extensions import session_scope
from riderdesk.utils.delivery_tasks.route_grouper import group_and_sequence


def test_task_without_payment_reference_is_its_own_route(seed):
    seed.task("solo")

    with session_scope() as session:
        plan = group_and_sequence(DeliveryTaskRepository(session), None, "solo")

        assert plan.is_grouped is False
        assert [stop.task.id for stop in plan.tasks_to_assign] == ["solo"]
        assert plan.tasks_to_assign[0].pickup_sequence is None
        assert plan.total_stops == 1


def test_group_is_numbered_in_creation_order(seed):
    seed.group("PAY-1", ["C", "A", "B"])

    with session_scope() as session:
        plan = group_and_sequence(DeliveryTaskRepository(session), "PAY-1", "A")

        assert plan.is_grouped is True
        assert [(stop.task.id, stop.pickup_sequence) for stop in plan.tasks_to_assign] == [
            ("C", 1), ("A", 2), ("B", 3),
        ]
        assert plan.total_stops == 3


def test_claimed_siblings_are_left_out_of_the_numbering(seed):
    seed.task("A", vendor_id="vendor-A", payment_reference="PAY-2",
              status=ASSIGNED, rider_id="rider-2", pickup_sequence=1)
    seed.task("B", vendor_id="vendor-B", payment_reference="PAY-2")
    seed.task("C", vendor_id="vendor-C", payment_reference="PAY-2")

    with session_scope() as session:
        plan = group_and_sequence(DeliveryTaskRepository(session), "PAY-2", "C")

        assert [(stop.task.id, stop.pickup_sequence) for stop in plan.tasks_to_assign] == [
            ("B", 1), ("C", 2),
        ]
        assert [task.id for task in plan.members] == ["A", "B", "C"]
        assert plan.members[0].pickup_sequence == 1
        assert plan.total_stops == 3


def test_other_checkouts_are_not_part_of_the_route(seed):
    seed.group("PAY-1", ["A", "B"])
    seed.group("PAY-9", ["X"])

    with session_scope() as session:
        plan = group_and_sequence(DeliveryTaskRepository(session), "PAY-1", "B")

        assert [task.id for task in plan.members] == ["A", "B"]
