from riderdesk.Database.delivery_task import DELIVERY_STATUSES, PENDING
from riderdesk.Database.repositories import DeliveryTaskRepository, ProfileRepository
from riderdesk.utils.delivery_tasks.errors import RiderNotFound
from riderdesk.utils.delivery_tasks.zone import eligible


def list_rider_tasks(session_factory, rider_id):
    """
    Tasks a rider can accept in their zone, and the ones they already hold.
    """
    with session_factory() as session:
        rider = ProfileRepository(session).get_rider(rider_id)
        if rider is None:
            raise RiderNotFound("Rider not found or not approved")

        tasks = DeliveryTaskRepository(session)
        pending = [
            task.to_dict()
            for task in tasks.list_available(rider.location)
            if eligible(rider.location, task.vendor_location)
        ]
        assigned = [task.to_dict() for task in tasks.list_for_rider(rider.id)]

    counts = {status: 0 for status in DELIVERY_STATUSES}
    counts[PENDING] = len(pending)
    for task in assigned:
        counts[task["status"]] += 1

    return {"pending": pending, "assigned": assigned, "counts": counts}
