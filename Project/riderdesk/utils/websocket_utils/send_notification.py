import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable

from flask import current_app

from riderdesk.Database.notifications import Notification

NOTIFIER_EXTENSION = "riderdesk.notifier"


@dataclass
class NotificationEvent:
    recipient_id: str
    type: str
    title: str
    message: str
    metadata: Dict[str, Any] = field(default_factory=dict)


def user_room(recipient_id) -> str:
    return f"user:{recipient_id}"


class NotificationDispatcher:
    """
    Writes a notification to the feed table, then pushes it to the
    recipient's Socket.IO room and the redis ``notifications`` channel.
    """

    def __init__(self, session_factory, emitter=None, redis_conn=None, channel="notifications"):
        self._session_scope = session_factory
        self._emit = emitter
        self._redis = redis_conn
        self._channel = channel

    def send(self, event: NotificationEvent) -> dict:
        with self._session_scope() as session:
            notif = Notification(
                recipient_id=event.recipient_id,
                type=event.type,
                title=event.title,
                message=event.message,
                payload=event.metadata,
            )
            session.add(notif)
            session.flush()
            notif_dict = notif.to_dict()

        if self._emit is not None:
            self._emit(user_room(event.recipient_id), "new_notification", notif_dict)

        if self._redis is not None:
            self._redis.publish(self._channel, json.dumps(notif_dict))

        return notif_dict


def get_notifier():
    return current_app.extensions[NOTIFIER_EXTENSION]


def send_notifications(notifier, events: Iterable[NotificationEvent]) -> int:
    """
    Deliver each event, logging and skipping the ones that fail.

    Returns how many were delivered.
    """
    delivered = 0
    for event in events:
        try:
            notifier.send(event)
            delivered += 1
        except Exception:
            current_app.logger.exception(
                "Failed to send %s notification to %s", event.type, event.recipient_id
            )
    return delivered
