def eligible(rider_zone, vendor_zone) -> bool:
    """
    Whether a rider registered in ``rider_zone`` may collect from a vendor in
    ``vendor_zone``.

    A rider without a zone is unrestricted and a vendor without one imposes
    nothing. Otherwise the labels must be identical; "Lagos" does not match
    "lagos" or "Lagos Island".
    """
    if not rider_zone:
        return True
    if not vendor_zone:
        return True
    return rider_zone == vendor_zone


def ineligible_tasks(rider_zone, tasks):
    """Tasks in ``tasks`` the rider may not collect."""
    return [task for task in tasks if not eligible(rider_zone, task.vendor_location)]
