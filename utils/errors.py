class PortalError(Exception):
    """Base for failures reported straight back to the caller of an action."""
    status_code = 400
    default_message = "Request failed"

    def __init__(self, message=None, errors=None, **extra):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.errors = errors
        self.extra = extra


class ValidationError(PortalError):
    status_code = 400
    default_message = "Validation failed"


class PendingRequestError(ValidationError):
    status_code = 409
    default_message = "A pending request already exists. Wait for teacher approval before submitting another."


class RateLimitError(PortalError):
    status_code = 429
    default_message = "You can only update your profile once every 60 days."

    def __init__(self, message=None, retry_after_days=None):
        super().__init__(message, retry_after_days=retry_after_days)
        self.retry_after_days = retry_after_days


class NotFoundError(PortalError):
    status_code = 404
    default_message = "Not found"


class InvalidStateError(PortalError):
    status_code = 409
    default_message = "Request already processed"


class StoreError(PortalError):
    status_code = 503
    default_message = "Database error, please retry"


class AuthError(PortalError):
    status_code = 401
    default_message = "Invalid credentials"
