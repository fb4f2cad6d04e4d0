"""
Config -> kernel and service bridges.

Functions that turn a ``BudgetAppConfig`` into runtime objects.  They live
here because the kernel must never import ``budget_config``.

Usage:
    from budget_config import get_active_config
    from budget_config.bridges import build_audited_repository, init_database, summarise_budget

    config = get_active_config()
    init_database(config)
    with session_scope() as session:
        repo = build_audited_repository(config, session)
        summary = summarise_budget(config, repo.require_budget(budget_id))
"""

from __future__ import annotations

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from budget_config.schema import BudgetAppConfig
from budget_engines.pricing import BudgetSummary, calculate_budget_summary
from budget_kernel.db.engine import create_tables, init_engine_from_url
from budget_kernel.domain.clock import Clock
from budget_kernel.domain.types import Budget
from budget_kernel.logging_config import configure_logging
from budget_kernel.services.audit_logger import SqlAuditLogger
from budget_kernel.services.sql_repository import SqlBudgetRepository
from budget_services.audited_repository import AuditedBudgetRepository


def init_database(config: BudgetAppConfig, echo: bool = False) -> Engine:
    """Configure logging, initialise the engine and create tables."""
    configure_logging(level=config.log_level.upper())
    engine = init_engine_from_url(config.database_url, echo=echo)
    create_tables(engine)
    return engine


def build_audited_repository(
    config: BudgetAppConfig,
    session: Session,
    clock: Clock | None = None,
) -> AuditedBudgetRepository:
    """SQL repository and SQL audit store on one session, wrapped for auditing."""
    return AuditedBudgetRepository(
        inner=SqlBudgetRepository(session, clock=clock),
        audit_logger=SqlAuditLogger(session),
        user=config.audit_user,
        clock=clock,
        failure_policy=config.audit_failure_policy,
        summary_max_fields=config.summary_max_fields,
    )


def summarise_budget(config: BudgetAppConfig, budget: Budget) -> BudgetSummary:
    """Budget summary with GST extracted at the configured rate."""
    return calculate_budget_summary(budget.line_items, gst_rate=config.gst_rate)
