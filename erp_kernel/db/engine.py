"""
Engine and session lifecycle for the ERP read models.

The finance engine only reads operational data, so the database layer is
small: one process-wide engine, one session factory bound to it, and a
``session_scope`` for the seed scripts and tests that write.

Any SQLAlchemy URL works.  Production points at PostgreSQL through
psycopg; the tests use SQLite.  An in-memory SQLite database exists only
inside its connection, so it is served from a single shared connection
that every session and worker thread reuses.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from erp_kernel.logging_config import get_logger

logger = get_logger("db.engine")

_NOT_READY = "Engine not initialized. Call init_engine_from_url() first."

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def _connect_options(database_url: str, pool_size: int, max_overflow: int) -> dict[str, Any]:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return {"pool_size": pool_size, "max_overflow": max_overflow, "pool_pre_ping": True}

    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if url.database in (None, "", ":memory:"):
        options["poolclass"] = StaticPool
    return options


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 10,
    max_overflow: int = 10,
) -> Engine:
    """
    Create the engine and session factory for ``database_url``.

    Pool sizing only applies to server databases.  Calling this again
    replaces the previous engine without disposing it; tests call
    ``reset_engine()`` in between.
    """
    global _engine, _session_factory

    _engine = create_engine(
        database_url,
        echo=echo,
        **_connect_options(database_url, pool_size, max_overflow),
    )
    _session_factory = sessionmaker(bind=_engine, expire_on_commit=False)

    logger.info("engine_initialized", extra={"dialect": _engine.dialect.name, "echo": echo})
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError(_NOT_READY)
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """The factory data sources use to open one session per read."""
    if _session_factory is None:
        raise RuntimeError(_NOT_READY)
    return _session_factory


def get_session() -> Session:
    return get_session_factory()()


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Commit on success, roll back and re-raise on error, always close.

    Usage:
        with session_scope() as session:
            session.add(invoice)
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.warning("transaction_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def _metadata():
    from erp_kernel.db.base import Base
    import erp_kernel.models  # noqa: F401  (registers every table)

    return Base.metadata


def create_tables() -> None:
    _metadata().create_all(get_engine())


def drop_tables() -> None:
    """Drop every read-model table.  Tests only."""
    _metadata().drop_all(get_engine())


def reset_engine() -> None:
    """Dispose of the engine and forget the session factory."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None
