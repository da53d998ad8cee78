"""
Route grouping for multi-vendor checkouts.

Orders paid with one payment reference are delivered as one route. The
tasks of the route are ordered by creation time and the ones nobody has
claimed yet are numbered 1, 2, 3, ... in that order. Tasks a rider already
holds keep whatever number they were given.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from riderdesk.Database.delivery_task import DeliveryTask


@dataclass
class PlannedStop:
    task: DeliveryTask
    pickup_sequence: Optional[int] = None


@dataclass
class RoutePlan:
    tasks_to_assign: List[PlannedStop]
    is_grouped: bool
    members: List[DeliveryTask] = field(default_factory=list)

    @property
    def total_stops(self) -> int:
        return len(self.members) if self.is_grouped else 1


def group_and_sequence(tasks, payment_reference, task_id) -> RoutePlan:
    """
    Work out which tasks an acceptance of ``task_id`` should claim.

    ``tasks`` is a DeliveryTaskRepository bound to the caller's transaction.
    Nothing is written here; the plan is applied by the caller.
    """
    if not payment_reference:
        return _single(tasks, task_id)

    members = tasks.list_by_payment_reference(payment_reference)
    if not members:
        return _single(tasks, task_id)

    unclaimed = [task for task in members if task.is_unclaimed]
    planned = [
        PlannedStop(task=task, pickup_sequence=sequence)
        for sequence, task in enumerate(unclaimed, start=1)
    ]
    return RoutePlan(tasks_to_assign=planned, is_grouped=True, members=members)


def _single(tasks, task_id) -> RoutePlan:
    task = tasks.get(task_id)
    if task is None:
        return RoutePlan(tasks_to_assign=[], is_grouped=False)
    return RoutePlan(
        tasks_to_assign=[PlannedStop(task=task)],
        is_grouped=False,
        members=[task],
    )
