"""
Pytest fixtures for the marketing budget test suite.

Provides:
- Structured logging configured once per session, plus log capture
- An in-memory SQLite database per test (tables and listeners installed)
- A deterministic clock
- Plain and audited repositories sharing one session
- Small builders for services, line items and budgets
"""

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from io import StringIO
from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from budget_kernel.db.engine import create_tables
from budget_kernel.domain.clock import DeterministicClock
from budget_kernel.domain.types import (
    Budget,
    BudgetStatus,
    LineItem,
    PricingTier,
    PropertySize,
    Service,
    ServiceCategory,
    Variant,
    VariantSelector,
)
from budget_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from budget_kernel.services.audit_logger import SqlAuditLogger
from budget_kernel.services.sql_repository import SqlBudgetRepository
from budget_services.audited_repository import AuditedBudgetRepository


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def _configure_test_logging():
    """Configure structured logging once for the whole test session."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Ensure no LogContext leaks between tests."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture structured log output for the duration of one test.

    Returns a callable that parses everything captured so far into a list
    of JSON dicts.
    """
    buffer = StringIO()
    handler = logging.StreamHandler(buffer)
    handler.setFormatter(StructuredFormatter())
    handler.setLevel(logging.DEBUG)

    root = logging.getLogger("budget_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _records() -> list[dict]:
        return [
            json.loads(line)
            for line in buffer.getvalue().splitlines()
            if line.strip()
        ]

    yield _records
    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Time
# =============================================================================


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc))


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Fresh in-memory database with every table created."""
    eng = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    create_tables(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine) -> Generator[Session, None, None]:
    sess = Session(bind=engine, expire_on_commit=False)
    yield sess
    sess.close()


@pytest.fixture
def repo(session, clock) -> SqlBudgetRepository:
    return SqlBudgetRepository(session, clock=clock)


@pytest.fixture
def audit_logger(session) -> SqlAuditLogger:
    return SqlAuditLogger(session)


@pytest.fixture
def audited_repo(repo, audit_logger, clock) -> AuditedBudgetRepository:
    return AuditedBudgetRepository(
        inner=repo,
        audit_logger=audit_logger,
        user="tester",
        clock=clock,
    )


# =============================================================================
# Builders
# =============================================================================


def make_service(
    service_id: int = 1,
    name: str = "Photography",
    category: ServiceCategory = ServiceCategory.PHOTOGRAPHY,
    selector: VariantSelector | None = None,
    variants: tuple[Variant, ...] = (),
) -> Service:
    return Service(
        id=service_id,
        name=name,
        category=category,
        variant_selector=selector,
        variants=variants,
    )


def size_variants() -> tuple[Variant, ...]:
    return (
        Variant(id="s", name="Small", base_price=Decimal("200"), size_match=PropertySize.SMALL),
        Variant(id="m", name="Medium", base_price=Decimal("300"), size_match=PropertySize.MEDIUM),
        Variant(id="l", name="Large", base_price=Decimal("450"), size_match=PropertySize.LARGE),
    )


def tier_variants() -> tuple[Variant, ...]:
    return (
        Variant(id="a", name="Tier A", base_price=Decimal("1500"), tier_match=PricingTier.A),
        Variant(id="b", name="Tier B", base_price=Decimal("900"), tier_match=PricingTier.B),
    )


def make_item(
    service_id: int,
    price: str | None = None,
    selected: bool = True,
    override: str | None = None,
    **kwargs,
) -> LineItem:
    return LineItem(
        service_id=service_id,
        is_selected=selected,
        schedule_price=Decimal(price) if price is not None else None,
        override_price=Decimal(override) if override is not None else None,
        is_overridden=override is not None,
        **kwargs,
    )


def make_budget(
    address: str = "12 Smith St",
    items: tuple[LineItem, ...] = (),
    status: BudgetStatus = BudgetStatus.DRAFT,
    **kwargs,
) -> Budget:
    return Budget(property_address=address, line_items=items, status=status, **kwargs)
