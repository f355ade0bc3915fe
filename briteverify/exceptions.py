"""BriteVerify SDK Exceptions."""

from typing import Any, List, Optional


class BriteVerifyError(Exception):
    """Base exception for all BriteVerify SDK errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        status_code: int = 0,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details

    def __str__(self) -> str:
        return self.message


class ValidationError(BriteVerifyError):
    """Input was rejected before any request was sent."""

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message, "VALIDATION_ERROR", 0, details)


class HttpError(BriteVerifyError):
    """The API answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        body: Any = None,
        code: str = "HTTP_ERROR",
    ) -> None:
        super().__init__(message, code, status_code, body)
        self.body = body


class AuthenticationError(HttpError):
    """The API key was refused."""

    def __init__(self, message: str = "Invalid or unauthorized API key", body: Any = None) -> None:
        super().__init__(message, 401, body, "INVALID_API_KEY")


class NotFoundError(HttpError):
    """The referenced list or resource does not exist."""

    def __init__(
        self,
        message: str,
        body: Any = None,
        resource_id: Optional[str] = None,
        status_code: int = 404,
    ) -> None:
        super().__init__(message, status_code, body, "NOT_FOUND")
        self.resource_id = resource_id


class RateLimitError(HttpError):
    def __init__(self, message: str, retry_after: int = 0, body: Any = None) -> None:
        super().__init__(message, 429, body, "RATE_LIMITED")
        self.retry_after = retry_after


class StateError(BriteVerifyError):
    """A bulk job is not in the lifecycle state an operation needs."""

    def __init__(self, message: str, job_id: str, state: Any = None) -> None:
        super().__init__(message, "INVALID_STATE")
        self.job_id = job_id
        self.state = state


class RemoteJobError(BriteVerifyError):
    """A bulk job ended in an error state on the remote side."""

    def __init__(self, message: str, job: Any, errors: Optional[List[Any]] = None) -> None:
        super().__init__(message, "JOB_FAILED", 0, errors)
        self.job = job
        self.job_id = getattr(job, "id", None)
        self.errors = errors or []


class TimeoutError(BriteVerifyError):
    """Polling gave up before the bulk job reached a terminal state.

    The job keeps running remotely; ``job_id`` can be used to poll again.
    """

    def __init__(self, message: str, job_id: str, timeout: float = 0.0, job: Any = None) -> None:
        super().__init__(message, "TIMEOUT")
        self.job_id = job_id
        self.timeout = timeout
        self.job = job


class PollCancelledError(BriteVerifyError):
    def __init__(self, message: str, job_id: str) -> None:
        super().__init__(message, "CANCELLED")
        self.job_id = job_id


class TransportError(BriteVerifyError):
    """The request never produced a response (DNS, TLS, connection reset, ...).

    The underlying ``httpx`` exception is available as ``__cause__`` and ``original``.
    """

    def __init__(self, message: str, original: Optional[BaseException] = None) -> None:
        super().__init__(message, "NETWORK_ERROR", 0)
        self.original = original


class ResponseMismatchError(BriteVerifyError):
    """The response did not contain the section that was asked for."""

    def __init__(self, message: str, response: Any = None) -> None:
        super().__init__(message, "MISMATCHED_RESPONSE", 0, response)
        self.response = response
