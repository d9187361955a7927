"""
tests/api/conftest.py

Shared fixtures for API route tests.

The engine keeps no connections or per-process state, so the `client`
fixture runs the real application (lifespan included) with no patches.
Tests that exercise the global exception handler build their own client
with raise_server_exceptions=False.
"""
from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from causalcast.main import app


@pytest.fixture()
def client() -> Iterator[TestClient]:
    """Return a TestClient bound to the CausalCast app for one test."""
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c
