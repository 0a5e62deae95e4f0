"""E2E test fixtures for Playwright.

The pytest-playwright plugin provides ``page``, ``context`` and
``browser``.  Point the suite at a running server with --base-url:

    pytest -m e2e --base-url http://localhost:8000
"""

from __future__ import annotations

import subprocess
import sys
from typing import Generator
from uuid import uuid4

import pytest
from playwright.sync_api import APIRequestContext, Playwright


@pytest.fixture(scope="session")
def base_url(request) -> str:
    return request.config.getoption("base_url") or "http://localhost:8000"


@pytest.fixture(autouse=True)
def _use_db() -> None:
    """E2E tests talk to the server over HTTP; no pytest-django database."""


@pytest.fixture(autouse=True)
def _clear_cache() -> None:
    """The server owns its cache; nothing to reset from here."""


@pytest.fixture(scope="session")
def api_request_context(
    playwright: Playwright, base_url: str
) -> Generator[APIRequestContext, None, None]:
    context = playwright.request.new_context(base_url=base_url)
    yield context
    context.dispose()


def _django_shell(command: str) -> None:
    subprocess.run(
        [sys.executable, "src/manage.py", "shell", "-c", command],
        check=True,
        capture_output=True,
        text=True,
    )


@pytest.fixture()
def auth_credentials() -> Generator[tuple[str, str], None, None]:
    """A throwaway user on the target server; removed (with its products) after."""
    username = f"e2euser_{uuid4().hex[:8]}"
    password = "testpass123"
    _django_shell(
        "from django.contrib.auth import get_user_model; "
        f"get_user_model().objects.create_user(username={username!r}, password={password!r})"
    )
    try:
        yield username, password
    finally:
        _django_shell(
            "from django.contrib.auth import get_user_model; "
            f"get_user_model().objects.filter(username={username!r}).delete()"
        )


@pytest.fixture()
def auth_token(api_request_context, auth_credentials) -> str:
    username, password = auth_credentials
    response = api_request_context.post(
        "/api/v1/auth/token/",
        data={"username": username, "password": password},
    )
    assert response.status == 200
    return response.json()["access"]
