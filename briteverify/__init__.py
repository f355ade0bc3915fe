"""BriteVerify Python SDK for email, phone and address verification."""

from .client import AsyncBriteVerify, BriteVerify
from .exceptions import (
    AuthenticationError,
    BriteVerifyError,
    HttpError,
    NotFoundError,
    PollCancelledError,
    RateLimitError,
    RemoteJobError,
    ResponseMismatchError,
    StateError,
    TimeoutError,
    TransportError,
    ValidationError,
)
from .hooks import LoggingObserver, RequestObserver
from .types import (
    AccountBalance,
    AddressVerification,
    BatchState,
    BulkJob,
    BulkJobError,
    BulkJobPage,
    BulkListDirective,
    BulkResultsPage,
    ContactRecord,
    EmailVerification,
    JobState,
    PhoneVerification,
    StreetAddress,
    VerificationError,
    VerificationResult,
    VerificationStatus,
)

__version__ = "0.1.0"

__all__ = [
    # Clients
    "BriteVerify",
    "AsyncBriteVerify",
    # Hooks
    "RequestObserver",
    "LoggingObserver",
    # Types
    "AccountBalance",
    "AddressVerification",
    "BatchState",
    "BulkJob",
    "BulkJobError",
    "BulkJobPage",
    "BulkListDirective",
    "BulkResultsPage",
    "ContactRecord",
    "EmailVerification",
    "JobState",
    "PhoneVerification",
    "StreetAddress",
    "VerificationError",
    "VerificationResult",
    "VerificationStatus",
    # Exceptions
    "BriteVerifyError",
    "ValidationError",
    "HttpError",
    "AuthenticationError",
    "NotFoundError",
    "RateLimitError",
    "StateError",
    "RemoteJobError",
    "TimeoutError",
    "PollCancelledError",
    "TransportError",
    "ResponseMismatchError",
]
