"""Pytest fixtures for SHR ATNA configuration tests."""

import pytest

from shratna.configuration import AtnaConfiguration
from shratna.services import InMemoryPropertyStore


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep tests away from ~/.shr-atna and the shared instance."""
    monkeypatch.setenv("SHR_ATNA_CONFIG", str(tmp_path / "no-config.yaml"))
    monkeypatch.delenv("SHR_ATNA_STORE_PROVIDER", raising=False)
    monkeypatch.delenv("SHR_ATNA_STORE_PATH", raising=False)
    monkeypatch.delenv("SHR_ATNA_STORE_TABLE", raising=False)
    AtnaConfiguration.reset_instance()
    yield
    AtnaConfiguration.reset_instance()


@pytest.fixture
def store():
    """Provide an empty in-memory property store."""
    return InMemoryPropertyStore()


@pytest.fixture
def config(store):
    """Provide a configuration backed by the in-memory store."""
    return AtnaConfiguration(store)
