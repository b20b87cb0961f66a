"""
Global pytest fixtures for the shortlink test suite.

Responsibilities:
    - Provide a fresh FastAPI TestClient via the app factory for integration tests
    - Provide an isolated in-memory Storage for direct testing
    - Provide a LinkManager and RedirectResolver wired to that Storage

Why an app factory?
    Using `create_app()` ensures each test gets fresh in-memory state,
    eliminating cross-test flakiness.
"""

import random

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shortlink.manager.codegen import CodeGenerator
from shortlink.manager.link_manager import LinkManager
from shortlink.manager.resolver import RedirectResolver
from shortlink.storage.storage import Storage


@pytest.fixture
def storage() -> Storage:
    """Provide a fresh in-memory Storage backend."""
    return Storage()


@pytest.fixture
def app(storage: Storage):
    """A new app instance bound to the `storage` fixture."""
    return create_app(storage=storage)


@pytest.fixture
def client(app) -> TestClient:
    """
    Provide a TestClient for a fresh app.

    Notes:
        - Redirects are not followed by default in tests that pass
          `follow_redirects=False`; the app answers 302 itself.
    """
    return TestClient(app)


@pytest.fixture
def generator() -> CodeGenerator:
    """Seeded generator so allocation tests are reproducible."""
    return CodeGenerator(rng=random.Random(1234))


@pytest.fixture
def manager(storage: Storage, generator: CodeGenerator) -> LinkManager:
    """Provide a LinkManager wired to the storage fixture."""
    return LinkManager(storage=storage, generator=generator)


@pytest.fixture
def resolver(storage: Storage) -> RedirectResolver:
    return RedirectResolver(storage=storage)
