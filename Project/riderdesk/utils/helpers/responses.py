from flask import current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from riderdesk.utils.delivery_tasks.errors import DeliveryTaskError


def register_error_handlers(bp):
    """Answer delivery task failures raised inside ``bp`` with JSON bodies."""

    @bp.errorhandler(DeliveryTaskError)
    def handle_delivery_task_error(error):
        current_app.logger.warning(
            "%s %s rejected (%s): %s",
            request.method, request.path, type(error).__name__, error.message,
        )
        return jsonify(error.to_dict()), error.status_code

    @bp.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        current_app.logger.exception("Database error on %s %s", request.method, request.path)
        return jsonify({
            "success": False,
            "error": "Internal server error",
            "message": str(error),
        }), 500

    return bp


def missing_fields(message):
    return jsonify({"success": False, "error": message}), 400
