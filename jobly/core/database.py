import logging
import re
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Sequence

from sqlalchemy import create_engine, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from jobly.core.config import settings
from jobly.core.exceptions import BadRequestError

logger = logging.getLogger(__name__)


# Pool tuning only applies to server databases
engine_options: Dict[str, Any] = {"pool_pre_ping": True}
if not settings.DATABASE_URL.startswith("sqlite"):
    engine_options.update(pool_size=10, max_overflow=20)

# Create SQLAlchemy engine
engine = create_engine(settings.DATABASE_URL, **engine_options)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()

# PostgreSQL-style positional placeholder: $1, $2, ...
POSITIONAL_PARAM = re.compile(r"\$(\d+)")


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Initialize database.

    Imports the models so they register on Base.metadata, then creates any
    missing tables. Existing tables are left untouched.
    """
    from jobly.models import company, job, user, application  # noqa: F401
    Base.metadata.create_all(bind=engine)


def execute(db: Session, sql: str, values: Sequence[Any] = ()) -> List[Dict[str, Any]]:
    """
    Run a SQL statement written with positional parameters.

    Statements use PostgreSQL placeholders ($1, $2, ...) matching the order
    of `values`. They are rebound as named parameters so the same SQL runs
    through SQLAlchemy on any dialect.

    Args:
        db: Database session
        sql: SQL text with $n placeholders
        values: Parameter values, $1 first

    Returns:
        Result rows as dicts keyed by column label, or [] for statements
        that return no rows
    """
    params = {f"p{idx}": value for idx, value in enumerate(values, start=1)}
    statement = POSITIONAL_PARAM.sub(r":p\1", sql)

    result = db.execute(text(statement), params)
    if not result.returns_rows:
        return []
    return [dict(row) for row in result.mappings().all()]


@contextmanager
def constraint_violations_as_bad_request(db: Session, message: str) -> Iterator[None]:
    """
    Turn a write rejected by a table constraint into a 400.

    The session is rolled back before BadRequestError is raised, so it stays
    usable for the rest of the request.
    """
    try:
        yield
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"{message}: {e.orig}")
        raise BadRequestError(message) from e
