from typing import Any, Mapping, Optional


class ServiceValidationError(Exception):
    """Raised when input data is invalid or a precondition for a service call is not met.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, validation info)
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers (400)
    """

    http_status = 400
    default_code: Optional[str] = None

    def __init__(self, message: str = "Invalid input", details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class NotFoundError(Exception):
    """Raised when a requested resource was not found.

    Attributes are similar to ServiceValidationError. http_status is 404.
    """

    http_status = 404
    default_code: Optional[str] = None

    def __init__(self, message: str = "Not found", details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class ConflictError(Exception):
    """Raised when a resource conflict occurs (e.g., overlapping periods).

    Attributes are similar to ServiceValidationError. http_status is 409.
    """

    http_status = 409
    default_code: Optional[str] = None

    def __init__(self, message: str = "Conflict", details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class UnauthorizedError(Exception):
    """Raised when authentication or authorization fails.

    Attributes are similar to ServiceValidationError. http_status is 401.
    """

    http_status = 401
    default_code: Optional[str] = None

    def __init__(self, message: str = "Unauthorized", details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Budget engine errors
# ---------------------------------------------------------------------------


class InvalidProfileInput(ServiceValidationError):
    """Malformed physical measurements (non-positive weight/height, future birth date)."""

    default_code = "INVALID_PROFILE_INPUT"


class InsufficientBaselineData(ServiceValidationError):
    """Fewer qualifying baseline days than required.

    The caller decides between waiting for more data and the declared-only
    estimate; the engine never substitutes one silently.
    """

    http_status = 422
    default_code = "INSUFFICIENT_BASELINE_DATA"


class UnsafeBudgetFloor(ServiceValidationError):
    """Synthesized daily target is below the safety floor. Budget creation is blocked."""

    http_status = 422
    default_code = "UNSAFE_BUDGET_FLOOR"


class MissingBaselineData(ServiceValidationError):
    """No prior period and no completed baseline to derive a first period from."""

    http_status = 422
    default_code = "MISSING_BASELINE_DATA"


class PeriodConflict(ConflictError):
    """A new weekly period would overlap an existing one or add a second active period."""

    default_code = "PERIOD_CONFLICT"
