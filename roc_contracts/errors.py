"""Custom exceptions raised by the contracts client."""

# Stable, machine-readable error codes.
VALIDATION_ERROR = "VALIDATION_ERROR"
INVALID_TRANSITION = "INVALID_TRANSITION"
REMOTE_ERROR = "REMOTE_ERROR"
NOT_FOUND = "NOT_FOUND"
NETWORK_ERROR = "NETWORK_ERROR"


class ContractsError(Exception):
    """Base exception for every error surfaced by the contracts client."""

    code = REMOTE_ERROR
    retryable = False


class ContractValidationError(ContractsError):
    """Raised when client-side checks reject input before any request is sent.

    ``errors`` maps the offending field name to a human-readable message so a
    form can show each message next to its field.
    """

    code = VALIDATION_ERROR

    def __init__(self, errors: dict[str, str] | str, field: str = "__root__"):
        if isinstance(errors, str):
            errors = {field: errors}
        self.errors = errors
        super().__init__("; ".join(errors.values()))


class InvalidTransitionError(ContractsError):
    """Raised when a lifecycle action is attempted outside its source state."""

    code = INVALID_TRANSITION

    def __init__(self, message: str, *, status: str | None = None, action: str | None = None):
        self.status = status
        self.action = action
        super().__init__(message)


class RemoteError(ContractsError):
    """Raised for any non-2xx response from the contracts API."""

    def __init__(self, message: str, *, status_code: int, code: str | None = None):
        self.message = message
        self.status_code = status_code
        if code:
            self.code = code
        super().__init__(message)


class NotFoundError(RemoteError):
    """Raised when the API answers 404 for the requested resource."""

    code = NOT_FOUND


class RemoteInvalidTransitionError(RemoteError, InvalidTransitionError):
    """Raised when the server rejects a lifecycle action for the contract's state."""

    code = INVALID_TRANSITION

    def __init__(self, message: str, *, status_code: int, code: str | None = None, action: str | None = None):
        RemoteError.__init__(self, message, status_code=status_code, code=code)
        self.status = None
        self.action = action


class NetworkError(ContractsError):
    """Raised when a request never reached the server."""

    code = NETWORK_ERROR
    retryable = True
