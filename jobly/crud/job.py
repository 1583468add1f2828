"""
CRUD operations for jobs.

Queries are hand-written SQL run through core.database.execute. Records
are plain dicts shaped like the API: {id, title, salary, equity, companyHandle}.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy.orm import Session

from jobly.core.database import constraint_violations_as_bad_request, execute
from jobly.core.exceptions import BadRequestError, NotFoundError
from jobly.core.sql import sql_for_partial_update

logger = logging.getLogger(__name__)

JOB_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'

# Fields an update may touch, mapped to their columns
MUTABLE_FIELDS = {
    "title": "title",
    "salary": "salary",
    "equity": "equity",
}
IMMUTABLE_FIELDS = ("id", "companyHandle")


def format_equity(equity: Any) -> Optional[str]:
    """Render a stored equity value as an exact decimal string."""
    if equity is None:
        return None
    if isinstance(equity, float):
        # Some drivers hand NUMERIC back as float; str() keeps the shortest repr
        equity = str(equity)
    return str(Decimal(equity))


def to_record(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Normalize numeric columns of a job row."""
    record = dict(row)
    if "salary" in record:
        record["salary"] = int(record["salary"]) if record["salary"] is not None else None
    if "equity" in record:
        record["equity"] = format_equity(record["equity"])
    return record


def build_job_filter(filters: Optional[Mapping[str, Any]] = None) -> Tuple[str, List[Any]]:
    """
    Build the WHERE clause for a job search.

    Args:
        filters: Optional {title, minSalary, hasEquity}
            - title: case-insensitive substring of the title
            - minSalary: lowest acceptable salary (0 is a real filter)
            - hasEquity: only True filters; False means no equity filter

    Returns:
        (" WHERE ...", values), or ("", []) when nothing filters
    """
    filters = filters or {}
    where_expressions: List[str] = []
    values: List[Any] = []

    title = filters.get("title")
    min_salary = filters.get("minSalary")
    has_equity = filters.get("hasEquity")

    if title:
        values.append(f"%{title}%")
        where_expressions.append(f"title ILIKE ${len(values)}")

    if min_salary is not None:
        values.append(min_salary)
        where_expressions.append(f"salary >= ${len(values)}")

    if has_equity is True:
        where_expressions.append("equity > 0")

    if not where_expressions:
        return "", values

    return " WHERE " + " AND ".join(where_expressions), values


def create(db: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a job for an existing company.

    Args:
        db: Database session
        data: {title, salary, equity, companyHandle}

    Returns:
        Created job record with its generated id

    Raises:
        BadRequestError: If companyHandle does not match a company, or a
            value breaks a table constraint
    """
    company_handle = data["companyHandle"]
    company_check = execute(
        db,
        "SELECT handle FROM companies WHERE handle = $1",
        [company_handle],
    )
    if not company_check:
        raise BadRequestError(f"Company not found: {company_handle}")

    with constraint_violations_as_bad_request(db, f"Invalid job data for {company_handle}"):
        rows = execute(
            db,
            f"""INSERT INTO jobs (title, salary, equity, company_handle)
                VALUES ($1, $2, $3, $4)
                RETURNING {JOB_COLUMNS}""",
            [data["title"], data.get("salary"), data.get("equity"), company_handle],
        )
        db.commit()

    job = to_record(rows[0])
    logger.info(f"Created job {job['id']}: {job['title']} ({company_handle})")
    return job


def find_all(db: Session, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    List jobs matching the optional filters, ordered by id.

    See build_job_filter for the accepted filters.
    """
    where_clause, values = build_job_filter(filters)
    rows = execute(
        db,
        f"SELECT {JOB_COLUMNS} FROM jobs{where_clause} ORDER BY id",
        values,
    )
    return [to_record(row) for row in rows]


def find_by_company(db: Session, company_handle: str) -> List[Dict[str, Any]]:
    """List a company's jobs ordered by id, without the company handle."""
    rows = execute(
        db,
        """SELECT id, title, salary, equity
           FROM jobs
           WHERE company_handle = $1
           ORDER BY id""",
        [company_handle],
    )
    return [to_record(row) for row in rows]


def get(db: Session, job_id: int) -> Dict[str, Any]:
    """
    Retrieve a job by its id.

    Raises:
        NotFoundError: If no job has this id
    """
    rows = execute(
        db,
        f"SELECT {JOB_COLUMNS} FROM jobs WHERE id = $1",
        [job_id],
    )
    if not rows:
        raise NotFoundError(f"No job: {job_id}")

    return to_record(rows[0])


def update(db: Session, job_id: int, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job.

    Only the supplied fields change. title, salary and equity are mutable;
    id and companyHandle are not.

    Args:
        db: Database session
        job_id: Job to update
        data: Subset of {title, salary, equity}

    Returns:
        Updated job record

    Raises:
        BadRequestError: If data is empty or names an immutable/unknown field,
            or a value breaks a table constraint
        NotFoundError: If no job has this id
    """
    if any(field in data for field in IMMUTABLE_FIELDS):
        raise BadRequestError("Not allowed to change id or companyHandle")

    unknown = [field for field in data if field not in MUTABLE_FIELDS]
    if unknown:
        raise BadRequestError(f"Cannot update job field(s): {', '.join(unknown)}")

    set_cols, values = sql_for_partial_update(data, MUTABLE_FIELDS)
    id_var_idx = f"${len(values) + 1}"

    with constraint_violations_as_bad_request(db, f"Invalid job data: {job_id}"):
        rows = execute(
            db,
            f"""UPDATE jobs
                SET {set_cols}
                WHERE id = {id_var_idx}
                RETURNING {JOB_COLUMNS}""",
            [*values, job_id],
        )
    if not rows:
        raise NotFoundError(f"No job: {job_id}")
    db.commit()

    logger.info(f"Updated job {job_id}: {', '.join(data)}")
    return to_record(rows[0])


def remove(db: Session, job_id: int) -> None:
    """
    Delete a job by id.

    Raises:
        NotFoundError: If no job has this id
    """
    rows = execute(
        db,
        "DELETE FROM jobs WHERE id = $1 RETURNING id",
        [job_id],
    )
    if not rows:
        raise NotFoundError(f"No job: {job_id}")
    db.commit()

    logger.info(f"Deleted job {job_id}")
