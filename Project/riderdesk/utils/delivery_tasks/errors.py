"""
Failures raised by the delivery task services.

Each carries the HTTP status the handlers answer with and a message that can
be shown to the rider or vendor as is.
"""


class DeliveryTaskError(Exception):
    status_code = 400

    def __init__(self, message, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self):
        body = {"success": False, "error": self.message}
        body.update(self.extra)
        return body


class NotFound(DeliveryTaskError):
    status_code = 404


class RiderNotFound(NotFound):
    # unknown riders are refused rather than reported missing
    status_code = 403


class Forbidden(DeliveryTaskError):
    status_code = 403


class ZoneMismatch(DeliveryTaskError):
    status_code = 403


class InvalidRequest(DeliveryTaskError):
    pass


class InvalidStatus(DeliveryTaskError):
    pass


class InvalidTransition(DeliveryTaskError):
    pass


class NotAvailable(DeliveryTaskError):
    pass


class AlreadyAssigned(DeliveryTaskError):
    pass


class SequenceBlocked(DeliveryTaskError):
    pass


class DuplicateTask(DeliveryTaskError):
    pass
