"""Typed errors raised by the ClickUp API client.

Every failure surfaces as a single exception type, ``ClickUpApiError``, tagged
with an ``ErrorKind``. Callers branch on ``err.kind`` instead of catching a
hierarchy of subclasses:

    try:
        task = await tasks.get_task("abc")
    except ClickUpApiError as err:
        if err.kind is ErrorKind.NOT_FOUND:
            ...
"""

import json
import logging
from enum import Enum

import httpx

from .retry_after import parse_retry_after

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    REQUEST = "request"
    TRANSIENT = "transient"
    CIRCUIT_OPEN = "circuit_open"
    INVALID_RESPONSE = "invalid_response"


class ClickUpApiError(Exception):
    """A failed ClickUp API call (or a client that can't make one)."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        status_code: int | None = None,
        error_code: str | None = None,
        raw_body: str | None = None,
        retry_after: float | None = None,
        field_errors: dict[str, list[str]] | None = None,
        method: str | None = None,
        url: str | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.raw_body = raw_body
        self.retry_after = retry_after
        self.field_errors = field_errors or {}
        self.method = method
        self.url = url

    def __repr__(self) -> str:
        return (
            f"ClickUpApiError(kind={self.kind.value!r}, status_code={self.status_code!r}, "
            f"error_code={self.error_code!r}, message={self.message!r})"
        )


def configuration_error(message: str) -> ClickUpApiError:
    return ClickUpApiError(ErrorKind.CONFIGURATION, message)


def _parse_error_body(raw: str) -> dict:
    """Parse a ClickUp error body ({"err": ..., "ECODE": ...}), or {} if it isn't one."""
    if not raw or not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _parse_field_errors(body: dict) -> dict[str, list[str]]:
    errors = body.get("errors")
    if not isinstance(errors, dict):
        return {}
    parsed = {}
    for field, messages in errors.items():
        if isinstance(messages, list):
            parsed[field] = ["" if m is None else str(m) for m in messages]
    return parsed


def _kind_for_status(status: int) -> ErrorKind:
    if status in (401, 403):
        return ErrorKind.AUTHENTICATION
    if status == 404:
        return ErrorKind.NOT_FOUND
    if status == 429:
        return ErrorKind.RATE_LIMIT
    if status == 408 or status >= 500:
        return ErrorKind.TRANSIENT
    return ErrorKind.REQUEST


def classify_response(response: httpx.Response) -> ClickUpApiError:
    """Build the typed error for a non-2xx response."""
    raw = response.text
    body = _parse_error_body(raw)
    explain = body.get("err")
    ecode = body.get("ECODE")
    ecode = str(ecode) if ecode not in (None, "") else None

    message = f"API request failed with status code {response.status_code} ({response.reason_phrase})."
    if explain:
        message += f" ClickUp Error: {explain}"
    if ecode:
        message += f" (ECODE: {ecode})"

    field_errors = {}
    kind = _kind_for_status(response.status_code)
    if response.status_code in (400, 422):
        field_errors = _parse_field_errors(body)
        if field_errors:
            kind = ErrorKind.VALIDATION

    retry_after = None
    if kind is ErrorKind.RATE_LIMIT:
        retry_after = parse_retry_after(response.headers.get("retry-after"))

    try:
        request = response.request
    except RuntimeError:
        request = None
    logger.debug("Classified HTTP %s as %s", response.status_code, kind.value)
    return ClickUpApiError(
        kind,
        message,
        status_code=response.status_code,
        error_code=ecode,
        raw_body=raw,
        retry_after=retry_after,
        field_errors=field_errors,
        method=request.method if request is not None else None,
        url=str(request.url) if request is not None else None,
    )
