"""
Request DTOs for reCAPTCHA siteverify calls.

VerifyOptions:       per-call acceptance policy supplied by the caller
VerificationRequest: the form posted to siteverify
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VerifyOptions(BaseModel):
    """Acceptance criteria for one verification.

    Every field left at its zero value disables that check, except
    ``score_threshold``: 0 means "use DEFAULT_THRESHOLD", so a threshold of
    exactly 0 cannot be requested. ``score_threshold`` and ``action`` are
    ignored for V2 keys.
    """

    model_config = ConfigDict(frozen=True)

    score_threshold: float = Field(default=0.0, ge=0.0, le=1.0)
    action: str = ""
    hostname: str = ""
    apk_package_name: str = ""
    max_response_age: timedelta = timedelta(0)
    remote_ip: str = ""


class VerificationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    secret: str
    response: str
    remote_ip: Optional[str] = None

    @classmethod
    def build(
        cls, secret: str, token: str, options: VerifyOptions
    ) -> "VerificationRequest":
        # the token is sent as-is, Google decides whether it is well formed
        return cls(secret=secret, response=token, remote_ip=options.remote_ip or None)

    def to_form(self) -> dict[str, str]:
        """Form fields for the POST body; ``remoteip`` only when an IP was given."""
        form = {"secret": self.secret, "response": self.response}
        if self.remote_ip:
            form["remoteip"] = self.remote_ip
        return form
