"""Shared fixtures for salon-cms tests."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from salon_cms.app import create_app
from salon_cms.config import AppConfig, AuthConfig, ContentConfig, Settings
from salon_cms.models.content import ContentSnapshot, FaqItem, MenuItem
from salon_cms.storage.content_store import JsonContentStore

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

ADMIN_EMAIL = "owner@salon.test"
ADMIN_TOKEN = "let-me-in"


@pytest.fixture
def cut() -> MenuItem:
    return MenuItem(id="m-cut", category="Cut", name="Cut", price=5500, description="Shampoo included")


@pytest.fixture
def color() -> MenuItem:
    return MenuItem(id="m-color", category="Color", name="Color", price=7000)


@pytest.fixture
def snapshot(cut: MenuItem, color: MenuItem) -> ContentSnapshot:
    return ContentSnapshot(
        menu=(cut, color),
        faq=(FaqItem(id="f-1", question="Parking?", answer="Two spaces behind the salon."),),
        site_info={"name": "Salon Hana", "phone": "03-0000-0000"},
    )


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def store(data_dir: Path) -> JsonContentStore:
    return JsonContentStore(data_dir)


@pytest.fixture
def seeded_store(data_dir: Path, snapshot: ContentSnapshot) -> JsonContentStore:
    for section, document in snapshot.to_document().items():
        filename = "site-info.json" if section == "siteInfo" else f"{section}.json"
        (data_dir / filename).write_text(json.dumps(document), encoding="utf-8")
    return JsonContentStore(data_dir)


@pytest.fixture
def settings(tmp_path: Path, data_dir: Path) -> Settings:
    return Settings(
        content=ContentConfig(data_dir=data_dir, images_dir=tmp_path / "images", images_url_prefix="/images/"),
        auth=AuthConfig(admin_token=ADMIN_TOKEN, allowed_emails=(ADMIN_EMAIL,), skip_auth=False, admin_path="/admin"),
        app=AppConfig(env="development", log_level="INFO", secret_key="test-secret", slow_request_ms=800),
    )


@pytest.fixture
def client(settings: Settings, seeded_store: JsonContentStore) -> Iterator[TestClient]:
    """Unauthenticated client over a seeded data directory."""
    with patch("salon_cms.app.configure_logging"):
        app = create_app(settings)
        with TestClient(app) as test_client:
            yield test_client


@pytest.fixture
def admin_credentials() -> dict[str, str]:
    return {"email": ADMIN_EMAIL, "token": ADMIN_TOKEN}


@pytest.fixture
def admin_client(client: TestClient, admin_credentials: dict[str, str]) -> TestClient:
    """Client signed in as the allowed admin."""
    response = client.post("/admin/login", data=admin_credentials)
    assert response.status_code == 200
    return client
