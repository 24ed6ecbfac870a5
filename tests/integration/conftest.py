"""Shared fixtures for integration tests.

These tests use the real config loader, caches and upstream clients with
HTTP mocked via respx.
"""

from __future__ import annotations

import os

import pytest
import respx

_ENV_NAMES = (
    "PORT",
    "LOG_TO_FILE",
    "JACKETT_URL",
    "JACKETT_API_KEY",
    "OMDB_URL",
    "OMDB_API_KEY",
    "REAL_DEBRID_API_KEY",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unset every variable the config loader reads.

    Each name is registered with monkeypatch, so values written by
    ``load_dotenv`` during a test are removed again afterwards.
    """
    for name in list(os.environ):
        if name.upper().startswith("DEBRIDIFY_"):
            monkeypatch.delenv(name)
    for name in _ENV_NAMES:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture()
def respx_mock() -> respx.MockRouter:
    """Explicit respx mock router for request interception."""
    with respx.mock(assert_all_called=False) as router:
        yield router
