from flask import Blueprint, current_app, jsonify, request

from riderdesk.extensions import limiter, session_scope
from riderdesk.utils.delivery_tasks.assignment import AssignmentCoordinator
from riderdesk.utils.delivery_tasks.status_gate import StatusTransitionGate
from riderdesk.utils.delivery_tasks.task_board import list_rider_tasks
from riderdesk.utils.helpers.responses import missing_fields, register_error_handlers
from riderdesk.utils.websocket_utils.send_notification import get_notifier

rider_delivery_bp = Blueprint(
    "rider_delivery_bp",
    __name__,
    url_prefix="/api/rider/delivery-tasks",
)
register_error_handlers(rider_delivery_bp)


def delivery_action_limit():
    return current_app.config.get("DELIVERY_ACTION_RATE_LIMIT", "30 per minute")


@rider_delivery_bp.route("", methods=["GET"])
def rider_task_board():
    rider_id = request.args.get("riderId")
    if not rider_id:
        return missing_fields("Rider ID is required")

    board = list_rider_tasks(session_scope, rider_id)
    return jsonify({"success": True, **board}), 200


@rider_delivery_bp.route("/accept", methods=["POST"])
@limiter.limit(delivery_action_limit)
def accept_delivery_task():
    data = request.get_json(silent=True) or {}
    task_id = data.get("deliveryTaskId")
    rider_id = data.get("riderId")

    if not task_id or not rider_id:
        return missing_fields("Delivery task ID and rider ID are required")

    coordinator = AssignmentCoordinator(session_scope, get_notifier())
    result = coordinator.accept_task(str(task_id), str(rider_id))
    task = result.task

    current_app.logger.info(
        "Delivery task %s accepted by rider %s (%d of %d stops claimed)",
        task["id"], rider_id, result.assigned_count, result.total_stops,
    )

    return jsonify({
        "success": True,
        "message": "Delivery task accepted successfully",
        "deliveryTask": {
            "id": task["id"],
            "orderId": task["order_id"],
            "status": task["status"],
            "riderId": task["rider_id"],
            "pickupSequence": task["pickup_sequence"],
            "totalStops": result.total_stops,
        },
    }), 200


@rider_delivery_bp.route("/update-status", methods=["POST"])
@limiter.limit(delivery_action_limit)
def update_delivery_task_status():
    data = request.get_json(silent=True) or {}
    task_id = data.get("deliveryTaskId")
    new_status = data.get("newStatus")
    rider_id = data.get("riderId")

    if not task_id or not new_status or not rider_id:
        return missing_fields("Delivery task ID, status, and rider ID are required")

    gate = StatusTransitionGate(session_scope, get_notifier())
    result = gate.update_status(str(task_id), str(rider_id), new_status)
    task = result.task

    current_app.logger.info(
        "Delivery task %s moved %s -> %s by rider %s",
        task["id"], result.previous_status, task["status"], rider_id,
    )

    return jsonify({
        "success": True,
        "message": f"Delivery task status updated to {new_status}",
        "deliveryTask": {
            "id": task["id"],
            "orderId": task["order_id"],
            "status": task["status"],
        },
    }), 200
