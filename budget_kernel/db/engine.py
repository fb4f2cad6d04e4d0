"""
Process-wide database engine and session handling.

``init_engine_from_url`` builds one engine plus a session factory and keeps
them at module level; everything else in this module reads them back.
``create_tables`` imports the model modules so ``Base.metadata`` is
complete before ``create_all`` runs.

SQLite URLs get ``check_same_thread=False``, and in-memory SQLite a
``StaticPool`` so all sessions see the same database.  Any other backend
gets a pre-pinged ``QueuePool``.
"""

from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from budget_kernel.logging_config import get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None

_NOT_READY = "No database configured; call init_engine_from_url() first."


def _pool_options(url: URL, pool_size: int, max_overflow: int) -> dict[str, Any]:
    if url.get_backend_name() != "sqlite":
        return {
            "poolclass": QueuePool,
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_pre_ping": True,
        }
    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if not url.database or url.database == ":memory:":
        options["poolclass"] = StaticPool
    return options


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10,
) -> Engine:
    """
    Create the module engine for ``database_url``, replacing any earlier one.

    ``pool_size`` and ``max_overflow`` only apply to non-SQLite backends.
    """
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()

    url = make_url(database_url)
    _engine = create_engine(url, echo=echo, **_pool_options(url, pool_size, max_overflow))
    _session_factory = sessionmaker(bind=_engine, expire_on_commit=False)

    logger.info("engine_initialized", extra={"dialect": _engine.dialect.name, "echo": echo})
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError(_NOT_READY)
    return _engine


def get_session() -> Session:
    """New session from the module factory.  The caller closes it."""
    if _session_factory is None:
        raise RuntimeError(_NOT_READY)
    return _session_factory()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    Session that commits when the block finishes and rolls back if it raises.

        with session_scope() as session:
            SqlBudgetRepository(session).save_vendor(Vendor(name="Acme"))
    """
    with get_session() as session:
        try:
            yield session
        except Exception:
            session.rollback()
            logger.warning("transaction_rolled_back", exc_info=True)
            raise
        session.commit()


def create_tables(engine: Engine | None = None) -> None:
    """Create every table and install the audit-log write guards."""
    from budget_kernel.db.base import Base
    from budget_kernel.db.immutability import register_immutability_listeners
    import budget_kernel.models  # noqa: F401

    Base.metadata.create_all(engine or get_engine())
    register_immutability_listeners()
    logger.info("tables_created", extra={"table_count": len(Base.metadata.tables)})


def drop_tables(engine: Engine | None = None) -> None:
    from budget_kernel.db.base import Base
    import budget_kernel.models  # noqa: F401

    Base.metadata.drop_all(engine or get_engine())


def reset_engine() -> None:
    """Dispose the module engine and forget it."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None
