"""Unit tests for the RecaptchaError hierarchy and exception handlers."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from errors import (
    ConfigurationError,
    ErrorKind,
    RecaptchaError,
    VerificationError,
    register_error_handlers,
)

_TRANSPORT_KINDS = {
    ErrorKind.REQUEST_FAILED,
    ErrorKind.BODY_UNREADABLE,
    ErrorKind.INVALID_RESPONSE,
}


class TestErrorKind:
    @pytest.mark.parametrize("kind", list(ErrorKind), ids=lambda k: k.value)
    def test_request_error_flag(self, kind):
        err = VerificationError("x", kind=kind)
        assert err.request_error is (kind in _TRANSPORT_KINDS)
        assert err.status_code == (502 if kind in _TRANSPORT_KINDS else 400)
        assert err.error_code == kind.value


class TestErrors:
    def test_configuration_error(self):
        e = ConfigurationError("recaptcha secret cannot be blank")
        assert isinstance(e, RecaptchaError)
        assert e.status_code == 500
        assert e.error_code == "configuration_error"
        assert e.message == "recaptcha secret cannot be blank"

    def test_verification_error_fields(self):
        e = VerificationError(
            "remote error codes: ['invalid-input-secret']",
            kind=ErrorKind.REMOTE_ERROR_CODES,
            error_codes=["invalid-input-secret"],
            response_body='{"success": false}',
        )
        assert str(e) == "remote error codes: ['invalid-input-secret']"
        assert e.error_codes == ["invalid-input-secret"]
        assert e.response_body == '{"success": false}'

    def test_defaults(self):
        e = VerificationError("invalid challenge solution", kind=ErrorKind.INVALID_SOLUTION)
        assert e.error_codes is None
        assert e.response_body is None


class TestToDict:
    def test_basic(self):
        e = VerificationError("invalid challenge solution", kind=ErrorKind.INVALID_SOLUTION)
        assert e.to_dict() == {
            "error": "invalid challenge solution",
            "code": "invalid_solution",
        }

    def test_includes_error_codes(self):
        e = VerificationError(
            "remote error codes", kind=ErrorKind.REMOTE_ERROR_CODES, error_codes=["bad"]
        )
        assert e.to_dict()["error_codes"] == ["bad"]

    def test_never_includes_response_body(self):
        e = VerificationError(
            "invalid response body json", kind=ErrorKind.INVALID_RESPONSE, response_body="x"
        )
        assert "response_body" not in e.to_dict()

    def test_details(self):
        assert ConfigurationError("bad", details={"field": "secret"}).to_dict() == {
            "error": "bad",
            "code": "configuration_error",
            "details": {"field": "secret"},
        }


class TestExceptionHandler:
    def _client(self, exc: Exception) -> TestClient:
        app = FastAPI()
        register_error_handlers(app)

        @app.get("/boom")
        async def boom():
            raise exc

        return TestClient(app)

    @pytest.mark.parametrize(
        "exc, status",
        [
            (VerificationError("no", kind=ErrorKind.HOSTNAME_MISMATCH), 400),
            (VerificationError("down", kind=ErrorKind.REQUEST_FAILED), 502),
            (ConfigurationError("no secret"), 500),
        ],
        ids=["policy", "transport", "config"],
    )
    def test_status_and_body(self, exc, status):
        resp = self._client(exc).get("/boom")
        assert resp.status_code == status
        assert resp.json() == exc.to_dict()
