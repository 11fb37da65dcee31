"""
FastAPI dependency providers.

Applications build one ReCaptchaVerifier at startup, store it on
``app.state.recaptcha`` and inject it into routes with Depends().
"""

from __future__ import annotations

from fastapi import Request

from infrastructure.captcha.protocol import CaptchaVerifier


def get_recaptcha_verifier(request: Request) -> CaptchaVerifier:
    """Return the ReCaptchaVerifier stored on app.state."""
    return request.app.state.recaptcha
