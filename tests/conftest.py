"""
Pytest fixtures for Backend RWA tests.

Fake reference-service clients (no network), local audit storage under
tmp_path, and a temporary SQLite database for the record store and API.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from backend_rwa.analytics.context import ValidationContext
from backend_rwa.analytics.models import Project
from backend_rwa.clients import PhishingLookup, SanctionsHit
from backend_rwa.storage import LocalFileStorage


@dataclass
class FakePhishing:
    """lookup_domain answers from listed; None simulates an unavailable service."""

    listed: dict[str, str] = field(default_factory=dict)
    available: bool = True
    calls: list[str] = field(default_factory=list)

    def lookup_domain(self, domain: str) -> PhishingLookup | None:
        self.calls.append(domain)
        if not self.available:
            return None
        if domain in self.listed:
            return PhishingLookup(listed=True, phish_id=self.listed[domain], verified=True)
        return PhishingLookup(listed=False)


@dataclass
class FakeSafeBrowsing:
    threats: dict[str, list[str]] = field(default_factory=dict)
    available: bool = True
    calls: list[str] = field(default_factory=list)

    def find_threats(self, url: str) -> list[str] | None:
        self.calls.append(url)
        if not self.available:
            return None
        return list(self.threats.get(url, []))


@dataclass
class FakeSanctions:
    names: dict[str, SanctionsHit] = field(default_factory=dict)
    addresses: dict[str, SanctionsHit] = field(default_factory=dict)
    available: bool = True

    def search_name(self, name: str) -> list[SanctionsHit] | None:
        if not self.available:
            return None
        hit = self.names.get(name.lower())
        return [hit] if hit else []

    def search_address(self, address: str) -> list[SanctionsHit] | None:
        if not self.available:
            return None
        hit = self.addresses.get(address)
        return [hit] if hit else []


@dataclass
class FakeProbe:
    reachable: bool | None = True
    calls: list[str] = field(default_factory=list)

    def is_reachable(self, url: str) -> bool | None:
        self.calls.append(url)
        return self.reachable


@pytest.fixture(autouse=True)
def _no_reference_extensions(monkeypatch):
    """Reference lists come from built-in defaults only."""
    for name in ("SCAM_KEYWORDS_PATH", "SANCTIONED_TERMS_PATH", "AUDIT_FIRMS_PATH"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def audit_storage(tmp_path):
    return LocalFileStorage(tmp_path / "storage")


@pytest.fixture
def fake_context(audit_storage):
    """All services available and clean; audit storage on local disk."""
    return ValidationContext(
        phishing=FakePhishing(),
        safe_browsing=FakeSafeBrowsing(),
        sanctions=FakeSanctions(),
        storage=audit_storage,
        url_probe=FakeProbe(),
    )


@pytest.fixture
def clean_project():
    return Project(
        id="proj-berlin",
        name="Berlin Residential Real Estate Fund",
        description="Tokenized shares of residential apartments in Berlin with quarterly rental distributions.",
        website="https://example-reit.com",
        roi=8,
        audit_url="https://certik.com/projects/example-reit",
    )


@pytest.fixture
def rwa_db(tmp_path, monkeypatch):
    """
    Point the database at a temporary SQLite file and create tables.
    Resets the cached Database so each test gets a fresh one.
    """
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("RWA_DB_URL", f"sqlite:///{tmp_path / 'rwa_validation.db'}")

    from backend_rwa.database import get_database, reset_database_for_test

    reset_database_for_test()
    db = get_database()
    yield db
    reset_database_for_test()


@pytest.fixture
def client(rwa_db, fake_context):
    """FastAPI TestClient with the temp database and fake reference services."""
    from fastapi.testclient import TestClient

    from backend_rwa.api_server.server import app, get_db, get_validation_context

    app.dependency_overrides[get_db] = lambda: rwa_db
    app.dependency_overrides[get_validation_context] = lambda: fake_context
    yield TestClient(app)
    app.dependency_overrides.clear()
