from flask import Flask
from riderdesk import extensions
from riderdesk.config import DevelopmentConfig
from riderdesk.extensions import init_db, init_redis, limiter, socketio, session_scope, emit_to_room


def create_app(config_object=None):
    app = Flask(__name__, instance_relative_config=False)

    if config_object is None:
        config_object = DevelopmentConfig
    app.config.from_object(config_object)

    init_redis(app)
    init_db(app)
    limiter.init_app(app)

    socketio.init_app(
        app,
        message_queue=app.config.get("SOCKETIO_MESSAGE_QUEUE"),
        async_mode=app.config.get("SOCKETIO_ASYNC_MODE"),
    )

    from riderdesk.utils.websocket_utils.send_notification import NOTIFIER_EXTENSION, NotificationDispatcher

    app.extensions[NOTIFIER_EXTENSION] = NotificationDispatcher(
        session_scope,
        emitter=emit_to_room,
        redis_conn=extensions.redis_client,
        channel=app.config.get("NOTIFICATIONS_CHANNEL", "notifications"),
    )

    from riderdesk.handlers.rider_delivery_tasks import rider_delivery_bp
    from riderdesk.handlers.vendor_delivery_tasks import vendor_delivery_bp

    app.register_blueprint(rider_delivery_bp)
    app.register_blueprint(vendor_delivery_bp)

    @app.teardown_appcontext
    def shutdown_session(exception=None):
        if extensions.SessionLocal is not None:
            extensions.SessionLocal.remove()

    return app, socketio
