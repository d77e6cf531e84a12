class DJBookError(Exception):
    """Base for errors surfaced to callers; status_code is the HTTP mapping."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DJBookError):
    status_code = 404


class DateUnavailableError(DJBookError):
    status_code = 409

    def __init__(self, message: str = "The selected date is no longer available. Please choose another date."):
        super().__init__(message)


class ValidationError(DJBookError):
    status_code = 422


class InvalidStateError(DJBookError):
    status_code = 409


class EntryLockedError(DJBookError):
    status_code = 409


class AlreadyExistsError(DJBookError):
    status_code = 400


class AuthenticationError(DJBookError):
    status_code = 401


class LockTimeoutError(DJBookError):
    status_code = 503
