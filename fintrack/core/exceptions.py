"""Exception classes raised by the API client."""


class ApiError(Exception):
    """Base class for every failure surfaced by the client."""

    def __init__(self, detail: str, status_code: int | None = None):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class UnauthorizedError(ApiError):
    """The session is gone; the caller must re-authenticate."""

    def __init__(self, detail: str = "Unauthorized. Please log in again."):
        super().__init__(detail, status_code=401)


class ConflictError(ApiError):
    """409: the record is still referenced by existing expenses."""

    def __init__(self, resource: str = "Resource", detail: str | None = None):
        super().__init__(
            detail or f"{resource} is used by existing expenses and cannot be deleted",
            status_code=409,
        )
        self.resource = resource


class RequestFailedError(ApiError):
    """Transport error or any non-2xx status without a dedicated kind."""

    def __init__(self, operation: str, status_code: int | None = None):
        super().__init__(f"Failed to {operation}", status_code=status_code)
        self.operation = operation


class NotFoundError(RequestFailedError):
    def __init__(self, operation: str, resource: str = "Resource"):
        super().__init__(operation, status_code=404)
        self.detail = f"{resource} not found"
        self.args = (self.detail,)


class MalformedResponseError(ApiError):
    def __init__(
        self,
        detail: str = "Unexpected data format from server",
        status_code: int | None = None,
    ):
        super().__init__(detail, status_code=status_code)


class AuthenticationError(ApiError):
    """Login or signup was rejected by the server."""
