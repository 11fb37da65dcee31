"""Captcha protocols. Services depend on these, not the concrete implementations."""

from datetime import datetime, timedelta
from typing import Mapping, Protocol

import httpx

from schemas.dto.requests.recaptcha import VerifyOptions


class CaptchaVerifier(Protocol):
    async def verify(self, token: str) -> None: ...

    async def verify_with_options(self, token: str, options: VerifyOptions) -> None: ...


class FormPoster(Protocol):
    """Sends a form-encoded POST; the returned response body is still unread."""

    async def post_form(self, url: str, data: Mapping[str, str]) -> httpx.Response: ...


class Clock(Protocol):
    def since(self, moment: datetime) -> timedelta: ...
