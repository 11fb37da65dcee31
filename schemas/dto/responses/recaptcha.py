"""
Response DTO for the reCAPTCHA siteverify endpoint.

Shape (fields beyond ``success`` are optional, unknown fields are ignored,
and an explicit ``null`` counts as absent)::

    {
      "success": true,
      "challenge_ts": "2018-03-06T03:41:29+00:00",
      "hostname": "example.com",
      "apk_package_name": "com.example.app",
      "action": "login",
      "score": 0.9,
      "error-codes": []
    }

A ``score`` outside [0, 1] fails validation, so such a body is reported as
an invalid response rather than passed to the score check.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from shared.datetime_utils import ensure_utc


class VerificationResult(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    success: bool
    challenge_ts: Optional[datetime] = None
    hostname: str = ""
    apk_package_name: str = ""
    action: str = ""
    score: float = Field(default=0.0, ge=0.0, le=1.0)
    error_codes: list[str] = Field(default_factory=list, alias="error-codes")

    @field_validator(
        "hostname", "apk_package_name", "action", "score", "error_codes", mode="before"
    )
    @classmethod
    def _null_means_default(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            field = cls.model_fields[info.field_name]
            return field.get_default(call_default_factory=True)
        return v

    @field_validator("challenge_ts")
    @classmethod
    def _normalise_challenge_ts(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None
