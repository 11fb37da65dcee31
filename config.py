"""
Configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).
Settings objects are built once at startup and passed explicitly; nothing
here is a process-wide singleton.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from infrastructure.captcha.recaptcha import RECAPTCHA_VERIFY_URL, RecaptchaVersion


class RecaptchaSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Empty is allowed here; ReCaptchaVerifier refuses to start without one
    recaptcha_secret: str = ""
    recaptcha_version: RecaptchaVersion = RecaptchaVersion.V2
    recaptcha_timeout_seconds: float = 10.0
    recaptcha_verify_url: str = RECAPTCHA_VERIFY_URL


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production
