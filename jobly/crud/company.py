"""
CRUD operations for companies.

Records are dicts shaped like the API:
{handle, name, description, numEmployees, logoUrl}.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy.orm import Session

from jobly.core.database import constraint_violations_as_bad_request, execute
from jobly.core.exceptions import BadRequestError, NotFoundError
from jobly.core.sql import sql_for_partial_update
from jobly.crud import job as job_crud

logger = logging.getLogger(__name__)

COMPANY_COLUMNS = (
    'handle, name, description, num_employees AS "numEmployees", logo_url AS "logoUrl"'
)

MUTABLE_FIELDS = {
    "name": "name",
    "description": "description",
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}


def build_company_filter(filters: Optional[Mapping[str, Any]] = None) -> Tuple[str, List[Any]]:
    """
    Build the WHERE clause for a company search.

    Args:
        filters: Optional {nameLike, minEmployees, maxEmployees}

    Returns:
        (" WHERE ...", values), or ("", []) when nothing filters

    Raises:
        BadRequestError: If minEmployees is greater than maxEmployees
    """
    filters = filters or {}
    where_expressions: List[str] = []
    values: List[Any] = []

    name_like = filters.get("nameLike")
    min_employees = filters.get("minEmployees")
    max_employees = filters.get("maxEmployees")

    if min_employees is not None and max_employees is not None and min_employees > max_employees:
        raise BadRequestError("minEmployees cannot be greater than maxEmployees")

    if name_like:
        values.append(f"%{name_like}%")
        where_expressions.append(f"name ILIKE ${len(values)}")

    if min_employees is not None:
        values.append(min_employees)
        where_expressions.append(f"num_employees >= ${len(values)}")

    if max_employees is not None:
        values.append(max_employees)
        where_expressions.append(f"num_employees <= ${len(values)}")

    if not where_expressions:
        return "", values

    return " WHERE " + " AND ".join(where_expressions), values


def ensure_name_available(db: Session, name: str, exclude_handle: Optional[str] = None) -> None:
    """Raise BadRequestError if another company already uses this name."""
    rows = execute(db, "SELECT handle FROM companies WHERE name = $1", [name])
    if any(row["handle"] != exclude_handle for row in rows):
        raise BadRequestError(f"Duplicate company name: {name}")


def create(db: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a company.

    Args:
        db: Database session
        data: {handle, name, description, numEmployees, logoUrl}

    Raises:
        BadRequestError: If the handle or the name is already taken
    """
    handle = data["handle"]
    duplicate_check = execute(
        db,
        "SELECT handle FROM companies WHERE handle = $1",
        [handle],
    )
    if duplicate_check:
        raise BadRequestError(f"Duplicate company: {handle}")

    ensure_name_available(db, data["name"])

    with constraint_violations_as_bad_request(db, f"Invalid company data: {handle}"):
        rows = execute(
            db,
            f"""INSERT INTO companies (handle, name, description, num_employees, logo_url)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING {COMPANY_COLUMNS}""",
            [
                handle,
                data["name"],
                data["description"],
                data.get("numEmployees"),
                data.get("logoUrl"),
            ],
        )
        db.commit()

    logger.info(f"Created company {handle}")
    return rows[0]


def find_all(db: Session, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """List companies matching the optional filters, ordered by name."""
    where_clause, values = build_company_filter(filters)
    return execute(
        db,
        f"SELECT {COMPANY_COLUMNS} FROM companies{where_clause} ORDER BY name",
        values,
    )


def get(db: Session, handle: str) -> Dict[str, Any]:
    """
    Retrieve a company and its jobs.

    Returns:
        Company record plus jobs: [{id, title, salary, equity}, ...]

    Raises:
        NotFoundError: If no company has this handle
    """
    rows = execute(
        db,
        f"SELECT {COMPANY_COLUMNS} FROM companies WHERE handle = $1",
        [handle],
    )
    if not rows:
        raise NotFoundError(f"No company: {handle}")

    company = rows[0]
    company["jobs"] = job_crud.find_by_company(db, handle)
    return company


def update(db: Session, handle: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company; the handle cannot change.

    Raises:
        BadRequestError: If data is empty or names an immutable/unknown field,
            or the new name belongs to another company
        NotFoundError: If no company has this handle
    """
    if "handle" in data:
        raise BadRequestError("Not allowed to change handle")

    unknown = [field for field in data if field not in MUTABLE_FIELDS]
    if unknown:
        raise BadRequestError(f"Cannot update company field(s): {', '.join(unknown)}")

    set_cols, values = sql_for_partial_update(data, MUTABLE_FIELDS)
    handle_var_idx = f"${len(values) + 1}"

    if data.get("name") is not None:
        ensure_name_available(db, data["name"], exclude_handle=handle)

    with constraint_violations_as_bad_request(db, f"Invalid company data: {handle}"):
        rows = execute(
            db,
            f"""UPDATE companies
                SET {set_cols}
                WHERE handle = {handle_var_idx}
                RETURNING {COMPANY_COLUMNS}""",
            [*values, handle],
        )
    if not rows:
        raise NotFoundError(f"No company: {handle}")
    db.commit()

    logger.info(f"Updated company {handle}: {', '.join(data)}")
    return rows[0]


def remove(db: Session, handle: str) -> None:
    """
    Delete a company; its jobs are removed with it.

    Raises:
        NotFoundError: If no company has this handle
    """
    rows = execute(
        db,
        "DELETE FROM companies WHERE handle = $1 RETURNING handle",
        [handle],
    )
    if not rows:
        raise NotFoundError(f"No company: {handle}")
    db.commit()

    logger.info(f"Deleted company {handle}")
