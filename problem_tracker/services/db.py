# problem_tracker/services/db.py
import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from problem_tracker.errors import SchemaError, StorageError

logger = logging.getLogger(__name__)

# ---- Single source of truth for Base (models must import from here)
Base = declarative_base()


def make_url(db_path) -> URL:
    return URL.create(drivername="sqlite", database=str(db_path))


def make_engine(db_path) -> Engine:
    url = make_url(db_path)
    logger.debug("[DB] Using %s", url)
    # SQL echo goes through the "sqlalchemy.engine" logger, see main.configure_logging
    return create_engine(url, future=True)


def make_sessionmaker(engine: Engine) -> sessionmaker:
    # rows handed back to the CLI must stay readable after the session closes
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)


@contextmanager
def get_session(factory: sessionmaker):
    """Yield a SQLAlchemy session as a context manager."""
    s = factory()
    try:
        yield s
    finally:
        s.close()


def _check_schema(engine: Engine) -> None:
    table = Base.metadata.tables["problems"]
    found = {c["name"] for c in inspect(engine).get_columns(table.name)}
    missing = sorted(set(table.columns.keys()) - found)
    if missing:
        raise SchemaError(
            f"Table '{table.name}' in {engine.url.database} is missing columns: {', '.join(missing)}"
        )


def init_db(db_path) -> Engine:
    """Open the database file, create the problems table if missing, verify its columns."""
    # import models INSIDE this function so the table is registered on Base
    import problem_tracker.models.problem  # noqa: F401

    if str(db_path) in ("", ":memory:"):
        raise StorageError(f"Database path must name a file (got {str(db_path)!r})")

    engine = make_engine(db_path)
    try:
        logger.debug("[DB] init_db: starting connection test…")
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.debug("[DB] init_db: connection OK, creating tables if missing…")
        Base.metadata.create_all(bind=engine)
        _check_schema(engine)
    except SchemaError:
        engine.dispose()
        raise
    except SQLAlchemyError as e:
        engine.dispose()
        raise StorageError(f"Cannot open database {db_path}: {getattr(e, 'orig', None) or e}") from e
    logger.debug("[DB] init_db: tables ensured.")
    return engine
