"""
Domain errors raised by the service layer.

Routes let these propagate; the handlers in ``exception_handlers`` turn them
into the standard error envelope with the status code carried by the class.
"""


class ServiceError(Exception):
    status_code = 400
    code = "bad_request"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    """A referenced entity id does not resolve."""
    status_code = 404
    code = "not_found"


class InvalidArgumentError(ServiceError):
    """Missing field, non-positive quantity, malformed id or illegal status move."""
    status_code = 400
    code = "invalid_argument"


class ConflictError(ServiceError):
    """Uniqueness violation, unavailable resource, double booking or capacity shortfall."""
    status_code = 400
    code = "conflict"
