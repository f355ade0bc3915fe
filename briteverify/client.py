"""BriteVerify SDK Client."""

import asyncio
import dataclasses
import logging
import os
import threading
import time
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar, Union

import httpx

from .exceptions import (
    AuthenticationError,
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
from .hooks import RequestObserver
from .types import (
    AccountBalance,
    AddressVerification,
    BatchState,
    BulkJob,
    BulkJobPage,
    BulkListDirective,
    BulkResultsPage,
    ContactRecord,
    EmailVerification,
    JobState,
    PhoneVerification,
    StreetAddress,
    VerificationResult,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://bpi.briteverify.com/api/v1"
DEFAULT_BULK_BASE_URL = "https://bulk-api.briteverify.com/api/v3"
DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRIES = 1
DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_POLL_TIMEOUT = 600.0
DEFAULT_RETRY_AFTER = 60
API_KEY_ENV = "BV_API_KEY"
USER_AGENT = "briteverify-python/0.1.0"

Record = Union[ContactRecord, str]
JobRef = Union[BulkJob, str]
T = TypeVar("T")


def _authorization_header(api_key: str) -> str:
    key = (api_key or "").replace("ApiKey:", "", 1).strip()
    if not key:
        raise ValidationError("API key is required")
    if not key.isprintable():
        raise ValidationError("API key contains non-printable characters")
    return f"ApiKey: {key}"


def _as_record(value: Record) -> ContactRecord:
    if isinstance(value, ContactRecord):
        return value
    return ContactRecord.from_value(value)


def _validate_records(records: Iterable[Record]) -> List[ContactRecord]:
    contacts = [_as_record(record) for record in records or []]
    if not contacts:
        raise ValidationError("At least one contact record is required")
    for index, contact in enumerate(contacts):
        try:
            contact.validate()
        except ValidationError as e:
            raise ValidationError(f"Record {index}: {e.message}", details=contact) from e
    return contacts


def _error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


def _retry_after(response: httpx.Response) -> int:
    try:
        seconds = int(response.headers.get("Retry-After", DEFAULT_RETRY_AFTER))
    except ValueError:
        seconds = DEFAULT_RETRY_AFTER
    return seconds + 1


def _error_from_response(response: httpx.Response, resource_id: Optional[str] = None) -> HttpError:
    """Map a non-2xx response onto the exception hierarchy."""
    body = _error_body(response)
    message = response.reason_phrase or f"HTTP {response.status_code}"
    remote_status = None
    if isinstance(body, dict):
        message = body.get("message") or message
        remote_status = body.get("status", body.get("code"))

    status = response.status_code

    if status == 401:
        return AuthenticationError(body=body)

    if status == 404 or (remote_status and BatchState(remote_status) is BatchState.NOT_FOUND):
        return NotFoundError(message, body, resource_id, status)

    if status == 429:
        return RateLimitError(message, _retry_after(response), body)

    return HttpError(message, status, body, str(remote_status or "HTTP_ERROR"))


def _date_param(value: Union[date, str]) -> str:
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    return str(value)


def _advance(previous: Optional[BulkJob], current: BulkJob) -> BulkJob:
    """Keep job state monotonic across polls."""
    if previous is not None and current.job_state.rank < previous.job_state.rank:
        LOGGER.warning(
            "Bulk job %s reported %s after %s, ignoring the regression",
            current.id,
            current.state,
            previous.state,
        )
        return previous
    return current


def _ensure_complete(job: BulkJob) -> None:
    if not job.is_terminal:
        raise StateError(
            f"Bulk job {job.id} is {job.state} and has no results yet",
            job.id,
            job.state,
        )
    if job.job_state is JobState.ERROR:
        raise RemoteJobError(f"Bulk job {job.id} ended in state {job.state}", job, job.errors)


def _correlate(records: List[ContactRecord], results: List[VerificationResult]) -> List[VerificationResult]:
    """Copy each record's external id onto the result at the same position."""
    if len(records) != len(results):
        LOGGER.warning(
            "Got %d results for %d records, external ids were not attached",
            len(results),
            len(records),
        )
        return results
    return [
        dataclasses.replace(result, external_id=record.external_id)
        if record.external_id is not None
        else result
        for record, result in zip(records, results)
    ]


def _bulk_payload(
    records: Optional[List[ContactRecord]] = None,
    directive: Optional[BulkListDirective] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    if records:
        payload["contacts"] = [record.to_dict() for record in records]
    if directive is not None and directive is not BulkListDirective.UNKNOWN:
        payload["directive"] = directive.value
    return payload


def _parse(parser: Callable[..., T], data: Any, **kwargs: Any) -> T:
    """Run a model parser, reporting malformed payloads as ResponseMismatchError."""
    try:
        return parser(data, **kwargs)
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        raise ResponseMismatchError(f"Malformed response: {e}", data) from e


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise ResponseMismatchError(
            f"Response from {response.url} is not valid JSON",
            response.text,
        ) from e


def _job_from_crud(data: Any) -> BulkJob:
    if not isinstance(data, dict) or not isinstance(data.get("list"), dict):
        raise ResponseMismatchError("Bulk list response has no list details", data)
    return _parse(BulkJob.from_dict, data["list"])


class _BaseClient:
    """Configuration and URL building shared by both clients."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        bulk_base_url: str = DEFAULT_BULK_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
        observer: Optional[RequestObserver] = None,
    ) -> None:
        self._authorization = _authorization_header(api_key)
        self.base_url = base_url.rstrip("/")
        self.bulk_base_url = bulk_base_url.rstrip("/")
        self.timeout = timeout
        self.retries = max(1, retries)
        self.observer = observer

    @classmethod
    def from_env(cls, **kwargs: Any) -> Any:
        """Build a client from the ``BV_API_KEY`` environment variable."""
        api_key = os.environ.get(API_KEY_ENV)
        if not api_key:
            raise ValidationError(f"The {API_KEY_ENV} environment variable is not set")
        return cls(api_key, **kwargs)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r}, bulk_base_url={self.bulk_base_url!r})"

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": self._authorization,
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }

    def _lists_url(self, job_id: Optional[str] = None, account_external_id: Optional[str] = None) -> str:
        url = self.bulk_base_url
        if account_external_id is not None:
            url = f"{url}/accounts/{account_external_id}"
        url = f"{url}/lists"
        if job_id is not None:
            url = f"{url}/{job_id}"
        return url

    def _export_url(self, job: BulkJob, page: int) -> str:
        return f"{self._lists_url(job.id, job.external_id)}/export/{page}"

    def _list_params(
        self,
        page: Optional[int],
        date: Optional[Union[date, str]],
        state: Optional[Union[BatchState, str]],
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if page is not None:
            params["page"] = page
        if date is not None:
            params["date"] = _date_param(date)
        if state is not None:
            state = BatchState(state)
            if state is BatchState.UNKNOWN:
                LOGGER.warning("Declining to filter bulk lists by an unknown state")
            else:
                params["state"] = state.value
        return params

    def _start_observe(self, method: str, url: str) -> float:
        if self.observer is not None:
            self.observer.on_request_start(method, url)
        return time.perf_counter()

    def _end_observe(self, method: str, url: str, status_code: Optional[int], started: float) -> None:
        if self.observer is not None:
            self.observer.on_request_end(method, url, status_code, time.perf_counter() - started)

    @staticmethod
    def _check_poll_args(poll_interval: float, timeout: float) -> None:
        if poll_interval < 0:
            raise ValidationError("poll_interval must not be negative")
        if timeout < 0:
            raise ValidationError("timeout must not be negative")


class BriteVerify(_BaseClient):
    """BriteVerify API Client."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        bulk_base_url: str = DEFAULT_BULK_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
        observer: Optional[RequestObserver] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """Initialize the BriteVerify client.

        Args:
            api_key: Your BriteVerify API key.
            base_url: Real-time (v1) API base URL.
            bulk_base_url: Bulk (v3) API base URL.
            timeout: Request timeout in seconds (default: 30).
            retries: Attempts per request when rate limited (default: 1, no retry).
            observer: Optional hook notified around every request.
            transport: Optional ``httpx`` transport, mostly useful for testing.
        """
        super().__init__(api_key, base_url, bulk_base_url, timeout, retries, observer)
        self._client = httpx.Client(timeout=self.timeout, headers=self._headers, transport=transport)

    def __enter__(self) -> "BriteVerify":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def _request(
        self,
        method: str,
        url: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        attempt: int = 1,
        resource_id: Optional[str] = None,
    ) -> Any:
        """Make an HTTP request to the API."""
        started = self._start_observe(method, url)
        status_code = None
        try:
            response = self._client.request(method=method, url=url, json=json, params=params)
            status_code = response.status_code
        except httpx.RequestError as e:
            raise TransportError(f"Network error: {e}", e) from e
        finally:
            self._end_observe(method, url, status_code, started)

        LOGGER.debug("%s %s -> %s", method, url, response.status_code)

        if response.status_code == 429 and attempt < self.retries:
            delay = _retry_after(response)
            LOGGER.warning("Request to %s responded 429, waiting %d seconds before retry", url, delay)
            time.sleep(delay)
            return self._request(method, url, json, params, attempt + 1, resource_id)

        if response.status_code == 204:
            return None

        if response.is_success:
            return _decode(response)

        raise _error_from_response(response, resource_id)

    def get_account_balance(self) -> AccountBalance:
        """Get the account's current credit balance.

        Returns:
            AccountBalance snapshot.
        """
        data = self._request("GET", f"{self.bulk_base_url}/accounts/credits")
        return _parse(AccountBalance.from_dict, data)

    def current_credits(self) -> int:
        """Get the number of credits available to spend."""
        return self.get_account_balance().credits

    def current_credits_in_reserve(self) -> int:
        """Get the number of credits held for bulk lists in progress."""
        return self.get_account_balance().credits_in_reserve

    def verify_single(self, record: Record) -> VerificationResult:
        """Verify one contact record in real time.

        Args:
            record: The record to verify, or a bare email address / phone number.

        Returns:
            VerificationResult carrying the record's external id.

        Raises:
            ValidationError: If the record has no usable field.
        """
        record = _as_record(record)
        record.validate()

        data = self._request("POST", f"{self.base_url}/fullverify", json=record.to_dict())

        return _parse(VerificationResult.from_dict, data, external_id=record.external_id)

    def verify_contact(
        self,
        email: str,
        phone: str,
        address1: str,
        city: str,
        state: str,
        zip: str,
        address2: Optional[str] = None,
    ) -> VerificationResult:
        """Verify an email address, phone number and street address together."""
        address = StreetAddress(address1=address1, address2=address2, city=city, state=state, zip=zip)
        return self.verify_single(ContactRecord(email=email, phone=phone, address=address))

    def verify_email(self, email: str) -> EmailVerification:
        """Verify a single email address.

        Args:
            email: Email address to verify.

        Returns:
            EmailVerification for the address.

        Raises:
            ResponseMismatchError: If the response has no email section.
        """
        result = self.verify_single(ContactRecord(email=email))
        if result.email is None:
            raise ResponseMismatchError("Response has no email section", result)
        return result.email

    def verify_phone_number(self, phone: str) -> PhoneVerification:
        """Verify a single phone number.

        Args:
            phone: Phone number to verify.

        Returns:
            PhoneVerification for the number.
        """
        result = self.verify_single(ContactRecord(phone=phone))
        if result.phone is None:
            raise ResponseMismatchError("Response has no phone section", result)
        return result.phone

    def verify_street_address(
        self,
        address1: str,
        city: str,
        state: str,
        zip: str,
        address2: Optional[str] = None,
    ) -> AddressVerification:
        """Verify a single street address.

        Args:
            address1: Street line.
            city: City name.
            state: State or province code.
            zip: Postal code.
            address2: Optional suite or unit line.

        Returns:
            AddressVerification, possibly with a corrected address.
        """
        address = StreetAddress(address1=address1, address2=address2, city=city, state=state, zip=zip)
        result = self.verify_single(ContactRecord(address=address))
        if result.address is None:
            raise ResponseMismatchError("Response has no address section", result)
        return result.address

    def submit_bulk(
        self,
        records: Iterable[Record],
        auto_start: bool = True,
        account_external_id: Optional[str] = None,
    ) -> BulkJob:
        """Create a bulk verification list.

        Args:
            records: Contact records to verify (must not be empty).
            auto_start: Queue the list for processing immediately (default: True).
            account_external_id: Optional reseller/agency account id the list belongs to.

        Returns:
            BulkJob with the list's initial state.
        """
        contacts = _validate_records(records)
        directive = BulkListDirective.START if auto_start else None

        data = self._request(
            "POST",
            self._lists_url(account_external_id=account_external_id),
            json=_bulk_payload(contacts, directive),
        )

        job = _job_from_crud(data)
        LOGGER.info("Created bulk job %s with %d records (%s)", job.id, len(contacts), job.state)
        return job

    def append_to_bulk(self, job_id: str, records: Iterable[Record], auto_start: bool = False) -> BulkJob:
        """Add records to an open bulk list.

        Args:
            job_id: The list id.
            records: Contact records to add (must not be empty).
            auto_start: Queue the list for processing after adding (default: False).

        Returns:
            BulkJob with the list's updated state.
        """
        contacts = _validate_records(records)
        directive = BulkListDirective.START if auto_start else None
        data = self._request(
            "POST",
            self._lists_url(job_id),
            json=_bulk_payload(contacts, directive),
            resource_id=job_id,
        )
        return _job_from_crud(data)

    def start_bulk(self, job_id: str) -> BulkJob:
        """Queue an open bulk list for processing."""
        data = self._request(
            "POST",
            self._lists_url(job_id),
            json=_bulk_payload(directive=BulkListDirective.START),
            resource_id=job_id,
        )
        return _job_from_crud(data)

    def terminate_bulk(self, job_id: str) -> BulkJob:
        """Stop processing a bulk list."""
        data = self._request(
            "POST",
            self._lists_url(job_id),
            json=_bulk_payload(directive=BulkListDirective.TERMINATE),
            resource_id=job_id,
        )
        return _job_from_crud(data)

    def delete_bulk(self, job_id: str) -> Optional[BulkJob]:
        """Delete a bulk list.

        Returns:
            BulkJob reported by the API, or None for an empty response.
        """
        data = self._request("DELETE", self._lists_url(job_id), resource_id=job_id)
        return _job_from_crud(data) if data is not None else None

    def get_bulk_status(self, job_id: str, account_external_id: Optional[str] = None) -> BulkJob:
        """Get the current state of a bulk list.

        Raises:
            NotFoundError: If the API has no list with this id.
        """
        data = self._request(
            "GET",
            self._lists_url(job_id, account_external_id),
            resource_id=job_id,
        )
        return _parse(BulkJob.from_dict, data)

    def list_bulk_jobs(
        self,
        page: Optional[int] = None,
        date: Optional[Union[date, str]] = None,
        state: Optional[Union[BatchState, str]] = None,
        account_external_id: Optional[str] = None,
    ) -> BulkJobPage:
        """List bulk lists created within the last 7 days, optionally filtered."""
        params = self._list_params(page, date, state)
        data = self._request(
            "GET",
            self._lists_url(account_external_id=account_external_id),
            params=params or None,
        )
        return _parse(BulkJobPage.from_dict, data)

    def get_bulk_results(self, job: JobRef, account_external_id: Optional[str] = None) -> List[VerificationResult]:
        """Get every result of a completed bulk list.

        Args:
            job: A list id, or a BulkJob already fetched (skips the status call).

        Raises:
            StateError: If the list is still queued or processing.
            RemoteJobError: If the list ended in an error state.
        """
        if not isinstance(job, BulkJob):
            job = self.get_bulk_status(job, account_external_id)

        _ensure_complete(job)

        results: List[VerificationResult] = []
        for page in range(1, max(1, job.page_count or 0) + 1):
            data = self._request("GET", self._export_url(job, page), resource_id=job.id)
            results.extend(_parse(BulkResultsPage.from_dict, data).results)
        return results

    def wait_for_bulk_job(
        self,
        job_id: str,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float = DEFAULT_POLL_TIMEOUT,
        account_external_id: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BulkJob:
        """Poll a bulk list until it is complete or failed.

        Args:
            job_id: The list id.
            poll_interval: Time between polls in seconds (default: 5).
            timeout: Maximum wait time in seconds (default: 600).
            cancel_event: Optional event; setting it stops the polling.

        Returns:
            BulkJob in a terminal state.

        Raises:
            TimeoutError: If the list is not terminal within ``timeout``.
            PollCancelledError: If ``cancel_event`` was set.
        """
        self._check_poll_args(poll_interval, timeout)
        deadline = time.monotonic() + timeout
        job: Optional[BulkJob] = None

        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise PollCancelledError(f"Polling of bulk job {job_id} was cancelled", job_id)

            job = _advance(job, self.get_bulk_status(job_id, account_external_id))
            if job.is_terminal:
                return job

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TimeoutError(
                    f"Bulk job {job_id} did not complete within {timeout}s",
                    job_id,
                    timeout,
                    job,
                )

            delay = min(poll_interval, remaining)
            if cancel_event is not None:
                cancel_event.wait(delay)
            else:
                time.sleep(delay)

    def run_bulk_verification(
        self,
        records: Iterable[Record],
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float = DEFAULT_POLL_TIMEOUT,
        account_external_id: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[VerificationResult]:
        """Submit records, wait for the list to finish, and fetch its results.

        Results are returned in submission order and carry each record's
        external id.
        """
        contacts = _validate_records(records)
        self._check_poll_args(poll_interval, timeout)

        job = self.submit_bulk(contacts, auto_start=True, account_external_id=account_external_id)
        job = self.wait_for_bulk_job(
            job.id,
            poll_interval=poll_interval,
            timeout=timeout,
            account_external_id=account_external_id,
            cancel_event=cancel_event,
        )

        results = self.get_bulk_results(job)
        LOGGER.info("Bulk job %s finished with %d results", job.id, len(results))
        return _correlate(contacts, results)


class AsyncBriteVerify(_BaseClient):
    """Async BriteVerify API Client."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        bulk_base_url: str = DEFAULT_BULK_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
        observer: Optional[RequestObserver] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the async BriteVerify client."""
        super().__init__(api_key, base_url, bulk_base_url, timeout, retries, observer)
        self._client = httpx.AsyncClient(timeout=self.timeout, headers=self._headers, transport=transport)

    async def __aenter__(self) -> "AsyncBriteVerify":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        attempt: int = 1,
        resource_id: Optional[str] = None,
    ) -> Any:
        """Make an async HTTP request to the API."""
        started = self._start_observe(method, url)
        status_code = None
        try:
            response = await self._client.request(method=method, url=url, json=json, params=params)
            status_code = response.status_code
        except httpx.RequestError as e:
            raise TransportError(f"Network error: {e}", e) from e
        finally:
            self._end_observe(method, url, status_code, started)

        LOGGER.debug("%s %s -> %s", method, url, response.status_code)

        if response.status_code == 429 and attempt < self.retries:
            delay = _retry_after(response)
            LOGGER.warning("Request to %s responded 429, waiting %d seconds before retry", url, delay)
            await asyncio.sleep(delay)
            return await self._request(method, url, json, params, attempt + 1, resource_id)

        if response.status_code == 204:
            return None

        if response.is_success:
            return _decode(response)

        raise _error_from_response(response, resource_id)

    async def get_account_balance(self) -> AccountBalance:
        """Get the account's current credit balance."""
        data = await self._request("GET", f"{self.bulk_base_url}/accounts/credits")
        return _parse(AccountBalance.from_dict, data)

    async def current_credits(self) -> int:
        """Get the number of credits available to spend."""
        return (await self.get_account_balance()).credits

    async def current_credits_in_reserve(self) -> int:
        """Get the number of credits held for bulk lists in progress."""
        return (await self.get_account_balance()).credits_in_reserve

    async def verify_single(self, record: Record) -> VerificationResult:
        """Verify one contact record in real time."""
        record = _as_record(record)
        record.validate()

        data = await self._request("POST", f"{self.base_url}/fullverify", json=record.to_dict())

        return _parse(VerificationResult.from_dict, data, external_id=record.external_id)

    async def verify_contact(
        self,
        email: str,
        phone: str,
        address1: str,
        city: str,
        state: str,
        zip: str,
        address2: Optional[str] = None,
    ) -> VerificationResult:
        """Verify an email address, phone number and street address together."""
        address = StreetAddress(address1=address1, address2=address2, city=city, state=state, zip=zip)
        return await self.verify_single(ContactRecord(email=email, phone=phone, address=address))

    async def verify_email(self, email: str) -> EmailVerification:
        """Verify a single email address."""
        result = await self.verify_single(ContactRecord(email=email))
        if result.email is None:
            raise ResponseMismatchError("Response has no email section", result)
        return result.email

    async def verify_phone_number(self, phone: str) -> PhoneVerification:
        """Verify a single phone number."""
        result = await self.verify_single(ContactRecord(phone=phone))
        if result.phone is None:
            raise ResponseMismatchError("Response has no phone section", result)
        return result.phone

    async def verify_street_address(
        self,
        address1: str,
        city: str,
        state: str,
        zip: str,
        address2: Optional[str] = None,
    ) -> AddressVerification:
        """Verify a single street address."""
        address = StreetAddress(address1=address1, address2=address2, city=city, state=state, zip=zip)
        result = await self.verify_single(ContactRecord(address=address))
        if result.address is None:
            raise ResponseMismatchError("Response has no address section", result)
        return result.address

    async def submit_bulk(
        self,
        records: Iterable[Record],
        auto_start: bool = True,
        account_external_id: Optional[str] = None,
    ) -> BulkJob:
        """Create a bulk verification list."""
        contacts = _validate_records(records)
        directive = BulkListDirective.START if auto_start else None

        data = await self._request(
            "POST",
            self._lists_url(account_external_id=account_external_id),
            json=_bulk_payload(contacts, directive),
        )

        job = _job_from_crud(data)
        LOGGER.info("Created bulk job %s with %d records (%s)", job.id, len(contacts), job.state)
        return job

    async def append_to_bulk(self, job_id: str, records: Iterable[Record], auto_start: bool = False) -> BulkJob:
        """Add records to an open bulk list."""
        contacts = _validate_records(records)
        directive = BulkListDirective.START if auto_start else None
        data = await self._request(
            "POST",
            self._lists_url(job_id),
            json=_bulk_payload(contacts, directive),
            resource_id=job_id,
        )
        return _job_from_crud(data)

    async def start_bulk(self, job_id: str) -> BulkJob:
        """Queue an open bulk list for processing."""
        data = await self._request(
            "POST",
            self._lists_url(job_id),
            json=_bulk_payload(directive=BulkListDirective.START),
            resource_id=job_id,
        )
        return _job_from_crud(data)

    async def terminate_bulk(self, job_id: str) -> BulkJob:
        """Stop processing a bulk list."""
        data = await self._request(
            "POST",
            self._lists_url(job_id),
            json=_bulk_payload(directive=BulkListDirective.TERMINATE),
            resource_id=job_id,
        )
        return _job_from_crud(data)

    async def delete_bulk(self, job_id: str) -> Optional[BulkJob]:
        """Delete a bulk list."""
        data = await self._request("DELETE", self._lists_url(job_id), resource_id=job_id)
        return _job_from_crud(data) if data is not None else None

    async def get_bulk_status(self, job_id: str, account_external_id: Optional[str] = None) -> BulkJob:
        """Get the current state of a bulk list."""
        data = await self._request(
            "GET",
            self._lists_url(job_id, account_external_id),
            resource_id=job_id,
        )
        return _parse(BulkJob.from_dict, data)

    async def list_bulk_jobs(
        self,
        page: Optional[int] = None,
        date: Optional[Union[date, str]] = None,
        state: Optional[Union[BatchState, str]] = None,
        account_external_id: Optional[str] = None,
    ) -> BulkJobPage:
        """List bulk lists created within the last 7 days, optionally filtered."""
        params = self._list_params(page, date, state)
        data = await self._request(
            "GET",
            self._lists_url(account_external_id=account_external_id),
            params=params or None,
        )
        return _parse(BulkJobPage.from_dict, data)

    async def get_bulk_results(
        self, job: JobRef, account_external_id: Optional[str] = None
    ) -> List[VerificationResult]:
        """Get every result of a completed bulk list; pages are fetched concurrently."""
        if not isinstance(job, BulkJob):
            job = await self.get_bulk_status(job, account_external_id)

        _ensure_complete(job)

        pages = await asyncio.gather(
            *(
                self._request("GET", self._export_url(job, page), resource_id=job.id)
                for page in range(1, max(1, job.page_count or 0) + 1)
            )
        )
        return [result for data in pages for result in _parse(BulkResultsPage.from_dict, data).results]

    async def wait_for_bulk_job(
        self,
        job_id: str,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float = DEFAULT_POLL_TIMEOUT,
        account_external_id: Optional[str] = None,
    ) -> BulkJob:
        """Poll a bulk list until it is complete or failed.

        Cancelling the awaiting task stops polling; the remote list is left alone.
        """
        self._check_poll_args(poll_interval, timeout)
        deadline = time.monotonic() + timeout
        job: Optional[BulkJob] = None

        while True:
            job = _advance(job, await self.get_bulk_status(job_id, account_external_id))
            if job.is_terminal:
                return job

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TimeoutError(
                    f"Bulk job {job_id} did not complete within {timeout}s",
                    job_id,
                    timeout,
                    job,
                )

            await asyncio.sleep(min(poll_interval, remaining))

    async def run_bulk_verification(
        self,
        records: Iterable[Record],
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float = DEFAULT_POLL_TIMEOUT,
        account_external_id: Optional[str] = None,
    ) -> List[VerificationResult]:
        """Submit records, wait for the list to finish, and fetch its results."""
        contacts = _validate_records(records)
        self._check_poll_args(poll_interval, timeout)

        job = await self.submit_bulk(contacts, auto_start=True, account_external_id=account_external_id)
        job = await self.wait_for_bulk_job(
            job.id,
            poll_interval=poll_interval,
            timeout=timeout,
            account_external_id=account_external_id,
        )

        results = await self.get_bulk_results(job)
        LOGGER.info("Bulk job %s finished with %d results", job.id, len(results))
        return _correlate(contacts, results)
