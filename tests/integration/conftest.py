"""Pytest configuration and fixtures for integration tests."""

import pytest
from fastapi.testclient import TestClient

from src.main import create_app
from src.services.custody_store import KeyCustodyStore


@pytest.fixture
def client(store: KeyCustodyStore) -> TestClient:
    """HTTP client bound to a seeded store."""
    return TestClient(create_app(store))
