from flask import Blueprint, current_app, jsonify, request

from riderdesk.extensions import session_scope
from riderdesk.utils.delivery_tasks.creation import create_delivery_task
from riderdesk.utils.helpers.responses import missing_fields, register_error_handlers
from riderdesk.utils.websocket_utils.send_notification import get_notifier

vendor_delivery_bp = Blueprint(
    "vendor_delivery_bp",
    __name__,
    url_prefix="/api/vendor/delivery-tasks",
)
register_error_handlers(vendor_delivery_bp)


@vendor_delivery_bp.route("/create", methods=["POST"])
def create_vendor_delivery_task():
    data = request.get_json(silent=True) or {}
    order_id = data.get("orderId")
    vendor_id = data.get("vendorId")

    if not order_id or not vendor_id:
        return missing_fields("Order ID and vendor ID are required")

    task = create_delivery_task(session_scope, get_notifier(), str(order_id), str(vendor_id))

    current_app.logger.info(
        "Delivery task %s created for order %s (zone %s)",
        task["id"], task["order_id"], task["vendor_location"],
    )

    return jsonify({
        "success": True,
        "message": "Delivery task created successfully. Riders will be notified.",
        "deliveryTask": {
            "id": task["id"],
            "orderId": task["order_id"],
            "status": task["status"],
        },
    }), 200
