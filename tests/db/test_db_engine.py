"""
Tests for module-level engine and session handling.
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.pool import StaticPool

from budget_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
from budget_kernel.models.catalog import VendorModel


@pytest.fixture
def memory_db():
    engine = init_engine_from_url("sqlite://")
    create_tables()
    yield engine
    reset_engine()


def _vendor_count() -> int:
    with get_session() as session:
        return session.scalar(select(func.count()).select_from(VendorModel))


class TestInitialisation:

    def test_uninitialised_engine_raises(self):
        reset_engine()
        with pytest.raises(RuntimeError):
            get_engine()
        with pytest.raises(RuntimeError):
            get_session()

    def test_in_memory_sqlite_shares_one_connection(self, memory_db):
        assert isinstance(memory_db.pool, StaticPool)
        assert get_engine() is memory_db

    def test_reinitialising_replaces_engine(self, memory_db):
        replacement = init_engine_from_url("sqlite://")
        assert get_engine() is replacement
        assert replacement is not memory_db


class TestSessionScope:

    def test_commits_on_success(self, memory_db):
        with session_scope() as session:
            session.add(VendorModel(name="Acme"))
        assert _vendor_count() == 1

    def test_rolls_back_and_reraises(self, memory_db):
        with pytest.raises(ValueError):
            with session_scope() as session:
                session.add(VendorModel(name="Acme"))
                session.flush()
                raise ValueError("abort")
        assert _vendor_count() == 0
