"""Shared fixtures for onboarding tests."""

import pytest


@pytest.fixture
def store(tmp_path):
    """Seeded SQLite store (about_me and address on page 2, birthdate on page 3)."""
    from rvs_onboarding.store.sqlite import SQLiteStore

    store = SQLiteStore(tmp_path / "onboarding.db")
    store.initialize()
    yield store
    store.close()


@pytest.fixture
def remembered(tmp_path):
    from rvs_onboarding.session import RememberedIdentifier

    return RememberedIdentifier(tmp_path / "session.json")


@pytest.fixture
def engine(store, remembered):
    from rvs_onboarding.engine import StepEngine

    engine = StepEngine(store, remembered)
    engine.load()
    return engine
