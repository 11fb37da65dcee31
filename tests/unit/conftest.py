"""
Unit test configuration.

Patches dotenv so pydantic-settings never reads the project's real .env file
during unit tests. Tests control config exclusively through monkeypatch.setenv().
"""

from datetime import datetime, timedelta
from typing import Mapping, Optional

import httpx
import pytest


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all unit tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


class FixedClock:
    """Clock whose elapsed time is set by the test."""

    def __init__(self, elapsed: timedelta = timedelta(0)) -> None:
        self.elapsed = elapsed
        self.moments: list[datetime] = []

    def since(self, moment: datetime) -> timedelta:
        self.moments.append(moment)
        return self.elapsed


class ScriptedPoster:
    """FormPoster that returns one canned response or raises one error."""

    def __init__(
        self,
        response: Optional[httpx.Response] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.response = response
        self.error = error
        self.calls: list[tuple[str, dict[str, str]]] = []

    async def post_form(self, url: str, data: Mapping[str, str]) -> httpx.Response:
        self.calls.append((url, dict(data)))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fixed_clock():
    return FixedClock()


@pytest.fixture
def make_poster():
    """Factory for ScriptedPoster, so tests need not import from conftest."""
    return ScriptedPoster
