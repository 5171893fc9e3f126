"""Failure taxonomy shared by the services and the HTTP layer."""


class ServiceError(Exception):
    """Base class for failures surfaced to callers.

    Every subclass carries a stable ``kind`` and the HTTP status the
    boundary layer maps it to.
    """
    kind = 'error'
    status_code = 500
    default_message = 'Unexpected error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'status': 'error', 'kind': self.kind, 'message': self.message}


class ValidationError(ServiceError):
    kind = 'validation_error'
    status_code = 400
    default_message = 'Invalid input'


class NotFound(ServiceError):
    kind = 'not_found'
    status_code = 404
    default_message = 'Resource not found'


class Forbidden(ServiceError):
    kind = 'forbidden'
    status_code = 403
    default_message = 'You are not allowed to access this resource'


class InvalidState(ServiceError):
    kind = 'invalid_state'
    status_code = 409
    default_message = 'Operation not allowed in the current state'


class Conflict(ServiceError):
    kind = 'conflict'
    status_code = 409
    default_message = 'Resource already exists'


class Unavailable(ServiceError):
    kind = 'unavailable'
    status_code = 503
    default_message = 'Storage is unavailable'


class StoreTimeout(Unavailable):
    kind = 'timeout'
    status_code = 504
    default_message = 'Storage operation timed out'
