"""
tests/conftest.py

Shared fixtures for the intake test suite.

Settings are read from the environment, so the JWT secret and uploads root
are set before any intake module is imported. Each test gets its own
uploads root under ``tmp_path``.
"""

from __future__ import annotations

import os
import tempfile

import pytest

from tests.helpers import CALLER_CLAIMS, TEST_JWT_SECRET, FakeReferenceService

os.environ.setdefault("INTAKE_JWT_SECRET", TEST_JWT_SECRET)
os.environ.setdefault("INTAKE_UPLOADS_ROOT", tempfile.mkdtemp(prefix="intake-tests-"))
os.environ.setdefault("LOG_LEVEL", "WARNING")


@pytest.fixture
def settings(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Fresh settings with an isolated uploads root."""
    from intake.settings import get_settings

    monkeypatch.setenv("INTAKE_JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setenv("INTAKE_UPLOADS_ROOT", str(tmp_path / "public"))
    monkeypatch.setenv("INTAKE_REFERENCE_SERVICE_URL", "http://dedup.test")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def caller():
    from intake.auth.models import CallerIdentity

    return CallerIdentity(
        providerId=CALLER_CLAIMS["providerId"],
        team=CALLER_CLAIMS["team"],
        teamId=str(CALLER_CLAIMS["teamId"]),
        locationId=CALLER_CLAIMS["locationId"],
    )


@pytest.fixture
def reference_service() -> FakeReferenceService:
    """Reference service knowing CTC100 only; tests may reassign attributes."""
    return FakeReferenceService(["CTC100"])


@pytest.fixture
def fetcher(settings, reference_service):
    from intake.uploads.reference_gateway import ReferenceSetFetcher

    return ReferenceSetFetcher.from_settings(settings, transport=reference_service.transport)


@pytest.fixture
def client(settings, fetcher):
    """API client whose reference lookup is served by ``reference_service``."""
    from fastapi.testclient import TestClient

    from intake.main import create_app
    from intake.uploads.dependencies import get_reference_fetcher

    app = create_app()
    app.dependency_overrides[get_reference_fetcher] = lambda: fetcher
    with TestClient(app) as test_client:
        yield test_client
