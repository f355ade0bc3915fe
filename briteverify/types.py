"""BriteVerify SDK Types."""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import ValidationError
from .utils import (
    empty_to_none,
    external_id_to_str,
    format_timestamp,
    normalise_token,
    parse_bool,
    parse_int,
    parse_timestamp,
)

# Digits with common separators, optionally followed by an "ext"/"x" extension.
PHONE_PATTERN = re.compile(r"\+?[\d\s().-]*\d[\d\s().-]*(\s*(ext\.?|x)\s*\d+)?", re.IGNORECASE)


class _RemoteEnum(str, Enum):
    """String enum that folds unrecognised remote values into ``UNKNOWN``."""

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {}

    @classmethod
    def _missing_(cls, value: Any) -> "_RemoteEnum":
        token = normalise_token(value)
        token = cls._aliases().get(token, token)
        for member in cls:
            if member.value == token:
                return member
        return cls("unknown")

    def __str__(self) -> str:
        return self.value


class VerificationStatus(_RemoteEnum):
    VALID = "valid"
    INVALID = "invalid"
    ACCEPT_ALL = "accept_all"
    UNKNOWN = "unknown"


class VerificationError(_RemoteEnum):
    DISPOSABLE = "disposable"
    PMB_REQUIRED = "pmb_required"
    ROLE_ADDRESS = "role_address"
    SUITE_INVALID = "suite_invalid"
    SUITE_MISSING = "suite_missing"
    INVALID_FORMAT = "invalid_format"
    INVALID_PREFIX = "invalid_prefix"
    MULTIPLE_MATCH = "multiple_match"
    UNKNOWN_STREET = "unknown_street"
    ZIP_CODE_INVALID = "zip_code_invalid"
    BLANK_PHONE_NUMBER = "blank_phone_number"
    BOX_NUMBER_INVALID = "box_number_invalid"
    BOX_NUMBER_MISSING = "box_number_missing"
    EMAIL_DOMAIN_INVALID = "email_domain_invalid"
    INVALID_PHONE_NUMBER = "invalid_phone_number"
    MAILBOX_FULL_INVALID = "mailbox_full_invalid"
    DIRECTIONALS_INVALID = "directionals_invalid"
    EMAIL_ACCOUNT_INVALID = "email_account_invalid"
    EMAIL_ADDRESS_INVALID = "email_address_invalid"
    STREET_NUMBER_INVALID = "street_number_invalid"
    STREET_NUMBER_MISSING = "street_number_missing"
    SUITE_INVALID_MISSING = "suite_invalid_missing"
    MISSING_MINIMUM_INPUTS = "missing_minimum_inputs"
    NON_DELIVERABLE_ADDRESS = "non_deliverable_address"
    UNKNOWN = "unknown"


class JobState(str, Enum):
    """Coarse lifecycle of a bulk job: queued -> processing -> complete | error."""

    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def rank(self) -> int:
        # Both terminal states share the last rank.
        return {"queued": 0, "processing": 1}.get(self.value, 2)

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.COMPLETE, JobState.ERROR)


class BatchState(_RemoteEnum):
    """Raw state/status value reported for a bulk verification list."""

    OPEN = "open"
    CLOSED = "closed"
    DELETED = "deleted"
    EXPIRED = "expired"
    PENDING = "pending"
    PREPPED = "prepped"
    SUCCESS = "success"
    COMPLETE = "complete"
    NOT_FOUND = "not_found"
    DELIVERED = "delivered"
    VERIFYING = "verifying"
    TERMINATED = "terminated"
    IMPORT_ERROR = "import_error"
    MISSING_DATA = "missing_data"
    EXCEEDS_LIMIT = "exceeds_limit"
    INVALID_STATE = "invalid_state"
    DUPLICATE_DATA = "duplicate_data"
    LIST_UPLOADS_INCOMPLETE = "list_uploads_incomplete"
    UNKNOWN = "unknown"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {
            "notfound": "not_found",
            "importerror": "import_error",
            "exceedslimit": "exceeds_limit",
            "invalidstate": "invalid_state",
            "duplicatedata": "duplicate_data",
            "missing": "missing_data",
            "missingdata": "missing_data",
            "incomplete": "list_uploads_incomplete",
            "upload_incomplete": "list_uploads_incomplete",
            "uploads_incomplete": "list_uploads_incomplete",
            "listuploadsincomplete": "list_uploads_incomplete",
        }

    @property
    def job_state(self) -> JobState:
        if self in (BatchState.OPEN, BatchState.PENDING, BatchState.PREPPED, BatchState.SUCCESS):
            return JobState.QUEUED
        if self in (BatchState.VERIFYING, BatchState.CLOSED, BatchState.UNKNOWN):
            return JobState.PROCESSING
        if self in (BatchState.COMPLETE, BatchState.DELIVERED):
            return JobState.COMPLETE
        return JobState.ERROR


class BulkListDirective(_RemoteEnum):
    START = "start"
    TERMINATE = "terminate"
    UNKNOWN = "unknown"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {"true": "start", "stop": "terminate"}


@dataclass
class StreetAddress:
    """A street address submitted for verification."""

    address1: str
    city: str
    state: str
    zip: str
    address2: Optional[str] = None

    def __post_init__(self) -> None:
        self.address2 = empty_to_none(self.address2)

    def is_complete(self) -> bool:
        return all(
            value is not None and str(value).strip()
            for value in (self.address1, self.city, self.state, self.zip)
        )

    def to_dict(self) -> Dict[str, str]:
        data = {"address1": self.address1}
        if self.address2 is not None:
            data["address2"] = self.address2
        data.update(city=self.city, state=self.state, zip=self.zip)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StreetAddress":
        return cls(
            address1=data.get("address1") or "",
            address2=data.get("address2"),
            city=data.get("city") or "",
            state=data.get("state") or "",
            zip=data.get("zip") or "",
        )


@dataclass
class ContactRecord:
    """An email, phone and/or street address to verify.

    ``external_id`` is a caller-side correlation key. It is copied onto the
    matching ``VerificationResult`` and is never sent over the wire.
    """

    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[StreetAddress] = None
    external_id: Optional[str] = None

    def is_empty(self) -> bool:
        return (
            empty_to_none(self.email) is None
            and empty_to_none(self.phone) is None
            and self.address is None
        )

    def validate(self) -> None:
        """Raise ``ValidationError`` unless at least one field is usable."""
        if self.is_empty():
            raise ValidationError(
                "A contact record needs at least one of: email, phone, address",
                details=self,
            )
        if self.address is not None and not self.address.is_complete():
            raise ValidationError(
                "Street addresses need address1, city, state and zip",
                details=self.address,
            )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if empty_to_none(self.email) is not None:
            data["email"] = self.email
        if empty_to_none(self.phone) is not None:
            data["phone"] = self.phone
        if self.address is not None:
            data["address"] = self.address.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], external_id: Optional[str] = None) -> "ContactRecord":
        address = data.get("address")
        return cls(
            email=empty_to_none(data.get("email")),
            phone=empty_to_none(data.get("phone")),
            address=StreetAddress.from_dict(address) if address else None,
            external_id=external_id,
        )

    @classmethod
    def from_value(cls, value: str, external_id: Optional[str] = None) -> "ContactRecord":
        """Build a record from a bare email address or phone number."""
        text = (value or "").strip()
        if not text:
            raise ValidationError("Cannot build a contact record from an empty value")
        if "@" in text:
            return cls(email=text, external_id=external_id)
        if PHONE_PATTERN.fullmatch(text):
            return cls(phone=text, external_id=external_id)
        raise ValidationError(f"Value is neither an email address nor a phone number: {value!r}")


@dataclass
class EmailVerification:
    """Email section of a verification result.

    The real-time API fills ``account``/``domain``/``disposable``/...; bulk
    exports only carry ``address``, ``status`` and ``secondary_status``.
    """

    address: str
    status: VerificationStatus
    account: Optional[str] = None
    domain: Optional[str] = None
    connected: Optional[Any] = None
    disposable: Optional[bool] = None
    role_address: Optional[bool] = None
    error_code: Optional[VerificationError] = None
    error: Optional[str] = None
    secondary_status: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EmailVerification":
        error_code = data.get("error_code")
        return cls(
            address=data.get("address") or data.get("email") or "",
            status=VerificationStatus(data.get("status")),
            account=data.get("account"),
            domain=data.get("domain"),
            connected=data.get("connected"),
            disposable=parse_bool(data["disposable"]) if "disposable" in data else None,
            role_address=parse_bool(data["role_address"]) if "role_address" in data else None,
            error_code=VerificationError(error_code) if error_code else None,
            error=data.get("error"),
            secondary_status=data.get("secondary_status"),
        )


@dataclass
class PhoneVerification:
    number: str
    status: VerificationStatus
    service_type: Optional[str] = None
    phone_location: Optional[Any] = None
    errors: List[Any] = field(default_factory=list)
    secondary_status: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PhoneVerification":
        return cls(
            number=data.get("number") or data.get("phone") or "",
            status=VerificationStatus(data.get("status")),
            service_type=data.get("service_type", data.get("phone_service_type")),
            phone_location=data.get("phone_location"),
            errors=list(data.get("errors") or []),
            secondary_status=data.get("secondary_status"),
        )


@dataclass
class AddressVerification:
    address1: str
    city: str
    state: str
    zip: str
    status: VerificationStatus
    address2: Optional[str] = None
    corrected: bool = False
    errors: List[Any] = field(default_factory=list)
    secondary_status: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AddressVerification":
        return cls(
            address1=data.get("address1") or "",
            address2=empty_to_none(data.get("address2")),
            city=data.get("city") or "",
            state=data.get("state") or "",
            zip=data.get("zip") or "",
            status=VerificationStatus(data.get("status")),
            corrected=parse_bool(data.get("corrected")),
            errors=list(data.get("errors") or []),
            secondary_status=data.get("secondary_status"),
        )

    @property
    def street_address(self) -> StreetAddress:
        """The (possibly corrected) address as a request element."""
        return StreetAddress(
            address1=self.address1,
            address2=self.address2,
            city=self.city,
            state=self.state,
            zip=self.zip,
        )


@dataclass
class VerificationResult:
    """Outcome of verifying one contact record."""

    email: Optional[EmailVerification] = None
    phone: Optional[PhoneVerification] = None
    address: Optional[AddressVerification] = None
    duration: Optional[float] = None
    external_id: Optional[str] = None

    @property
    def status(self) -> VerificationStatus:
        """Aggregate status across the populated sections."""
        statuses = [
            section.status
            for section in (self.email, self.phone, self.address)
            if section is not None
        ]
        if not statuses:
            return VerificationStatus.UNKNOWN
        if VerificationStatus.INVALID in statuses:
            return VerificationStatus.INVALID
        if all(status is VerificationStatus.VALID for status in statuses):
            return VerificationStatus.VALID
        if VerificationStatus.ACCEPT_ALL in statuses:
            return VerificationStatus.ACCEPT_ALL
        return VerificationStatus.UNKNOWN

    @classmethod
    def from_dict(cls, data: Dict[str, Any], external_id: Optional[str] = None) -> "VerificationResult":
        """Parse a real-time response or a bulk export record.

        Bulk exports for email-only lists hold bare email sections, e.g.
        ``{"email": "a@b.com", "status": "valid"}``.
        """
        if isinstance(data.get("email"), str):
            return cls(email=EmailVerification.from_dict(data), external_id=external_id)

        email, phone, address = data.get("email"), data.get("phone"), data.get("address")
        duration = data.get("duration")
        return cls(
            email=EmailVerification.from_dict(email) if email else None,
            phone=PhoneVerification.from_dict(phone) if phone else None,
            address=AddressVerification.from_dict(address) if address else None,
            duration=float(duration) if duration is not None else None,
            external_id=external_id,
        )


@dataclass
class BulkJobError:
    """An error entry reported for a bulk list."""

    code: BatchState
    message: Optional[str] = None
    list_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], list_id: Optional[str] = None) -> "BulkJobError":
        return cls(
            code=BatchState(data.get("status", data.get("code"))),
            message=empty_to_none(data.get("message")),
            list_id=empty_to_none(data.get("list_id")) or list_id,
        )


@dataclass
class BulkJob:
    """State of a bulk verification list."""

    id: str
    state: BatchState
    progress: int = 0
    total_verified: int = 0
    total_verified_emails: int = 0
    total_verified_phones: int = 0
    page_count: Optional[int] = None
    created_at: Optional[datetime] = None
    expiration_date: Optional[datetime] = None
    results_path: Optional[str] = None
    external_id: Optional[str] = None
    errors: List[BulkJobError] = field(default_factory=list)

    @property
    def job_state(self) -> JobState:
        return self.state.job_state

    @property
    def is_terminal(self) -> bool:
        return self.job_state.is_terminal

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BulkJob":
        job_id = data.get("id") or ""
        external_id = data.get("external_id", data.get("account_external_id"))
        return cls(
            id=job_id,
            state=BatchState(data.get("state")),
            progress=parse_int(data.get("progress")),
            total_verified=parse_int(data.get("total_verified")),
            total_verified_emails=parse_int(data.get("total_verified_emails")),
            total_verified_phones=parse_int(data.get("total_verified_phones")),
            page_count=parse_int(data.get("page_count"), default=None),
            created_at=parse_timestamp(data.get("created_at")),
            expiration_date=parse_timestamp(data.get("expiration_date")),
            results_path=empty_to_none(data.get("results_path")),
            external_id=external_id_to_str(external_id),
            errors=[BulkJobError.from_dict(item, job_id) for item in data.get("errors") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "state": self.state.value,
            "progress": self.progress,
            "total_verified": self.total_verified,
            "total_verified_emails": self.total_verified_emails,
            "total_verified_phones": self.total_verified_phones,
            "page_count": self.page_count,
            "created_at": format_timestamp(self.created_at),
            "expiration_date": format_timestamp(self.expiration_date),
            "results_path": self.results_path,
        }
        if self.external_id is not None:
            data["external_id"] = self.external_id
        if self.errors:
            data["errors"] = [
                {"code": error.code.value, "message": error.message} for error in self.errors
            ]
        return data


@dataclass
class BulkJobPage:
    """One page of bulk lists, as returned by the list-of-lists endpoint."""

    jobs: List[BulkJob]
    message: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BulkJobPage":
        return cls(
            jobs=[BulkJob.from_dict(item) for item in data.get("lists") or []],
            message=data.get("message"),
        )

    def _pages(self) -> Tuple[int, int]:
        # Messages follow the "Page X of Y" pattern; anything else means a single page.
        numbers = [int(token) for token in re.findall(r"\d+", self.message or "")]
        current = numbers[0] if numbers else 1
        total = numbers[1] if len(numbers) > 1 else 1
        return current, total

    @property
    def current_page(self) -> int:
        return self._pages()[0]

    @property
    def total_pages(self) -> int:
        return self._pages()[1]

    def ids(self) -> List[str]:
        return [job.id for job in self.jobs]

    def get(self, job_id: str) -> Optional[BulkJob]:
        for job in self.jobs:
            if job.id == str(job_id):
                return job
        return None

    def __iter__(self):
        return iter(self.jobs)

    def __len__(self) -> int:
        return len(self.jobs)


@dataclass
class BulkResultsPage:
    """One export page of bulk results."""

    status: BatchState
    page_count: int
    results: List[VerificationResult]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BulkResultsPage":
        return cls(
            status=BatchState(data.get("status")),
            page_count=parse_int(data.get("page_count", data.get("num_pages"))),
            results=[VerificationResult.from_dict(item) for item in data.get("results") or []],
        )


@dataclass
class AccountBalance:
    """Account credit balance snapshot."""

    credits: int
    credits_in_reserve: int
    recorded_on: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccountBalance":
        return cls(
            credits=parse_int(data.get("credits")),
            credits_in_reserve=parse_int(data.get("credits_in_reserve")),
            recorded_on=parse_timestamp(data.get("recorded_on")),
        )
