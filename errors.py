"""
Error hierarchy for reCAPTCHA verification and FastAPI exception handlers.

RecaptchaError is the base for all typed errors. VerificationError is the
single carrier for every verification failure; its ``kind`` says which one,
so callers branch on the enum instead of matching message text.

Transport-class kinds (request_error=True) mean the verdict is unknown.
Policy-class kinds mean Google answered and the answer was rejected.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class ErrorKind(str, Enum):
    # transport class
    REQUEST_FAILED = "request_failed"
    BODY_UNREADABLE = "body_unreadable"
    INVALID_RESPONSE = "invalid_response"
    # policy class
    ACTION_MISMATCH = "action_mismatch"
    SCORE_TOO_LOW = "score_too_low"
    REMOTE_ERROR_CODES = "remote_error_codes"
    INVALID_SOLUTION = "invalid_solution"
    HOSTNAME_MISMATCH = "hostname_mismatch"
    APK_PACKAGE_MISMATCH = "apk_package_mismatch"
    RESPONSE_TIME_EXCEEDED = "response_time_exceeded"

    @property
    def is_request_error(self) -> bool:
        return self in _REQUEST_ERROR_KINDS


_REQUEST_ERROR_KINDS = frozenset(
    {ErrorKind.REQUEST_FAILED, ErrorKind.BODY_UNREADABLE, ErrorKind.INVALID_RESPONSE}
)


class RecaptchaError(Exception):
    """Base error. All typed errors inherit from this."""

    status_code: int = 500
    error_code: str = "recaptcha_error"

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "code": self.error_code}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ConfigurationError(RecaptchaError):
    status_code = 500
    error_code = "configuration_error"


class VerificationError(RecaptchaError):
    """A challenge token could not be verified or was rejected.

    ``response_body`` holds the raw siteverify body whenever one was
    received; it is kept for diagnostics and never rendered by to_dict().
    """

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind,
        error_codes: Optional[list[str]] = None,
        response_body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.error_codes = error_codes
        self.response_body = response_body

    @property
    def request_error(self) -> bool:
        return self.kind.is_request_error

    @property
    def error_code(self) -> str:  # type: ignore[override]
        return self.kind.value

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return 502 if self.request_error else 400

    def to_dict(self) -> dict:
        payload = super().to_dict()
        if self.error_codes:
            payload["error_codes"] = list(self.error_codes)
        return payload


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers for RecaptchaError on a FastAPI app."""

    @app.exception_handler(RecaptchaError)
    async def recaptcha_error_handler(
        request: Request, exc: RecaptchaError
    ) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
