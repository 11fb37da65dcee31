"""Google reCAPTCHA implementation of CaptchaVerifier.

Verification is delegated to the siteverify endpoint; this module only builds
the form, reads and parses the answer, and applies the caller's acceptance
policy to it. Every failure leaves as a VerificationError whose ``kind``
identifies it.
"""

from __future__ import annotations

from datetime import timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

import httpx
from pydantic import ValidationError

from errors import ConfigurationError, ErrorKind, VerificationError
from infrastructure.http_client import HttpClient
from schemas.dto.requests.recaptcha import VerificationRequest, VerifyOptions
from schemas.dto.responses.recaptcha import VerificationResult
from shared.clock import SystemClock
from shared.logging import get_logger

if TYPE_CHECKING:
    from config import RecaptchaSettings
    from infrastructure.captcha.protocol import Clock, FormPoster

log = get_logger(__name__)

RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"

# Minimum V3 score when the caller does not pick one
DEFAULT_THRESHOLD = 0.5


class RecaptchaVersion(str, Enum):
    V2 = "v2"  # pass/fail only
    V3 = "v3"  # adds score and action


class ReCaptchaVerifier:
    """Verifies challenge tokens for one site key secret.

    Configuration is fixed at construction, so one instance can serve
    concurrent callers. Get the secret from https://www.google.com/recaptcha/admin.
    """

    def __init__(
        self,
        secret: str,
        version: RecaptchaVersion = RecaptchaVersion.V2,
        timeout: float = 10.0,
        *,
        verify_url: str = RECAPTCHA_VERIFY_URL,
        http_client: Optional[FormPoster] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        if not secret:
            raise ConfigurationError("recaptcha secret cannot be blank")
        self._secret = secret
        self._version = RecaptchaVersion(version)
        self._timeout = timeout
        self._verify_url = verify_url
        self._owns_http = http_client is None
        self._http: FormPoster = http_client or HttpClient(timeout=timeout)
        self._clock: Clock = clock or SystemClock()

    @classmethod
    def from_settings(
        cls, settings: RecaptchaSettings, **kwargs: Any
    ) -> "ReCaptchaVerifier":
        return cls(
            settings.recaptcha_secret,
            settings.recaptcha_version,
            settings.recaptcha_timeout_seconds,
            verify_url=settings.recaptcha_verify_url,
            **kwargs,
        )

    @property
    def secret(self) -> str:
        return self._secret

    @property
    def version(self) -> RecaptchaVersion:
        return self._version

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def verify_url(self) -> str:
        return self._verify_url

    async def verify(self, token: str) -> None:
        """Raise VerificationError unless the challenge was solved.

        Only the remote error codes and the success flag are checked.
        """
        await self.verify_with_options(token, VerifyOptions())

    async def verify_with_options(self, token: str, options: VerifyOptions) -> None:
        """Raise VerificationError unless the challenge was solved and ``options`` hold.

        ``score_threshold`` and ``action`` only apply to V3 keys.
        """
        request = VerificationRequest.build(self._secret, token, options)
        body = await self._fetch(request)
        result = self._parse(body)
        self.evaluate(result, options, response_body=body, remote_ip=request.remote_ip)

    async def _fetch(self, request: VerificationRequest) -> str:
        try:
            response = await self._http.post_form(self._verify_url, request.to_form())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            log.error(
                "recaptcha_request_failed", error=str(e), error_type=type(e).__name__
            )
            raise VerificationError(
                f"error posting to recaptcha endpoint: '{e}'",
                kind=ErrorKind.REQUEST_FAILED,
            ) from e

        try:
            raw = await response.aread()
        except httpx.HTTPError as e:
            log.error(
                "recaptcha_response_unreadable",
                status_code=response.status_code,
                error=str(e),
            )
            raise VerificationError(
                f"couldn't read response body: '{e}'",
                kind=ErrorKind.BODY_UNREADABLE,
            ) from e
        finally:
            await response.aclose()

        log.debug("recaptcha_response_received", status_code=response.status_code)
        return raw.decode("utf-8", errors="replace")

    def _parse(self, body: str) -> VerificationResult:
        try:
            return VerificationResult.model_validate_json(body)
        except ValidationError as e:
            log.warning(
                "recaptcha_response_invalid",
                error_count=e.error_count(),
                response_text=body[:200],
            )
            raise VerificationError(
                f"invalid response body json: '{e}'",
                kind=ErrorKind.INVALID_RESPONSE,
                response_body=body,
            ) from e

    def evaluate(
        self,
        result: VerificationResult,
        options: VerifyOptions,
        *,
        response_body: str = "",
        remote_ip: Optional[str] = None,
    ) -> None:
        """Apply the acceptance policy to a parsed siteverify result.

        Checks run in a fixed order and stop at the first failure:
        V3 action, V3 score, remote error codes, success flag, hostname,
        APK package name, response time.
        """
        try:
            self._check(result, options, response_body, remote_ip)
        except VerificationError as e:
            log.warning(
                "recaptcha_verification_rejected",
                kind=e.kind.value,
                reason=e.message,
            )
            raise
        log.debug(
            "recaptcha_verification_passed",
            version=self._version.value,
            hostname=result.hostname,
            score=result.score,
        )

    def _check(
        self,
        result: VerificationResult,
        options: VerifyOptions,
        body: str,
        remote_ip: Optional[str],
    ) -> None:
        if self._version == RecaptchaVersion.V3:
            if options.action and options.action != result.action:
                raise VerificationError(
                    f"invalid response action '{result.action}', "
                    f"while expecting '{options.action}'",
                    kind=ErrorKind.ACTION_MISMATCH,
                    response_body=body,
                )
            # 0 is indistinguishable from "not set" and falls back to the default
            threshold = options.score_threshold or DEFAULT_THRESHOLD
            if threshold > result.score:
                raise VerificationError(
                    f"received score '{result.score:f}', "
                    f"while expecting minimum '{threshold:f}'",
                    kind=ErrorKind.SCORE_TOO_LOW,
                    response_body=body,
                )

        if result.error_codes:
            raise VerificationError(
                f"remote error codes: {result.error_codes}",
                kind=ErrorKind.REMOTE_ERROR_CODES,
                error_codes=list(result.error_codes),
                response_body=body,
            )

        if not result.success:
            message = (
                "invalid challenge solution or remote IP"
                if remote_ip
                else "invalid challenge solution"
            )
            raise VerificationError(
                message, kind=ErrorKind.INVALID_SOLUTION, response_body=body
            )

        if options.hostname and options.hostname != result.hostname:
            raise VerificationError(
                f"invalid response hostname '{result.hostname}', "
                f"while expecting '{options.hostname}'",
                kind=ErrorKind.HOSTNAME_MISMATCH,
                response_body=body,
            )

        apk_package_name = options.apk_package_name
        if apk_package_name and apk_package_name != result.apk_package_name:
            raise VerificationError(
                f"invalid response ApkPackageName '{result.apk_package_name}', "
                f"while expecting '{apk_package_name}'",
                kind=ErrorKind.APK_PACKAGE_MISMATCH,
                response_body=body,
            )

        # any nonzero bound is checked; a negative one rejects every response
        if options.max_response_age != timedelta(0):
            if result.challenge_ts is None:
                raise VerificationError(
                    "response has no challenge timestamp, "
                    "cannot check time spent in resolving challenge",
                    kind=ErrorKind.RESPONSE_TIME_EXCEEDED,
                    response_body=body,
                )
            elapsed = self._clock.since(result.challenge_ts)
            if elapsed > options.max_response_age:
                raise VerificationError(
                    f"time spent in resolving challenge "
                    f"'{elapsed.total_seconds():f}s', while expecting maximum "
                    f"'{options.max_response_age.total_seconds():f}s'",
                    kind=ErrorKind.RESPONSE_TIME_EXCEEDED,
                    response_body=body,
                )

    async def aclose(self) -> None:
        """Close the HTTP client if this verifier created it."""
        if self._owns_http:
            await self._http.aclose()  # type: ignore[attr-defined]

    async def __aenter__(self) -> "ReCaptchaVerifier":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
