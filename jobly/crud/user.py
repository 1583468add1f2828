"""
CRUD operations for users and their job applications.

Records are dicts shaped like the API:
{username, firstName, lastName, email, isAdmin}. Password hashes stay in
this module.
"""

import logging
from typing import Any, Dict, List, Mapping

from sqlalchemy.orm import Session

from jobly.core.database import constraint_violations_as_bad_request, execute
from jobly.core.exceptions import BadRequestError, NotFoundError, UnauthorizedError
from jobly.core.security import get_password_hash, verify_password
from jobly.core.sql import sql_for_partial_update

logger = logging.getLogger(__name__)

USER_COLUMNS = (
    'username, first_name AS "firstName", last_name AS "lastName", '
    'email, is_admin AS "isAdmin"'
)

MUTABLE_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "password": "password",
    "email": "email",
}


def to_record(row: Mapping[str, Any]) -> Dict[str, Any]:
    record = dict(row)
    record.pop("password", None)
    # SQLite hands booleans back as 0/1
    record["isAdmin"] = bool(record["isAdmin"])
    return record


def authenticate(db: Session, username: str, password: str) -> Dict[str, Any]:
    """
    Check a username/password pair.

    Returns:
        The user record

    Raises:
        UnauthorizedError: If the user is unknown or the password is wrong
    """
    rows = execute(
        db,
        f"SELECT {USER_COLUMNS}, password FROM users WHERE username = $1",
        [username],
    )
    if rows and verify_password(password, rows[0]["password"]):
        return to_record(rows[0])

    logger.warning(f"Failed login for {username}")
    raise UnauthorizedError("Invalid username/password")


def register(db: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a user with a hashed password.

    Args:
        db: Database session
        data: {username, password, firstName, lastName, email, isAdmin}

    Raises:
        BadRequestError: If the username is already taken
    """
    username = data["username"]
    duplicate_check = execute(
        db,
        "SELECT username FROM users WHERE username = $1",
        [username],
    )
    if duplicate_check:
        raise BadRequestError(f"Duplicate username: {username}")

    with constraint_violations_as_bad_request(db, f"Invalid user data: {username}"):
        rows = execute(
            db,
            f"""INSERT INTO users (username, password, first_name, last_name, email, is_admin)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING {USER_COLUMNS}""",
            [
                username,
                get_password_hash(data["password"]),
                data["firstName"],
                data["lastName"],
                data["email"],
                bool(data.get("isAdmin", False)),
            ],
        )
        db.commit()

    logger.info(f"Registered user {username}")
    return to_record(rows[0])


def find_all(db: Session) -> List[Dict[str, Any]]:
    """List all users ordered by username."""
    rows = execute(db, f"SELECT {USER_COLUMNS} FROM users ORDER BY username")
    return [to_record(row) for row in rows]


def get(db: Session, username: str) -> Dict[str, Any]:
    """
    Retrieve a user and the ids of the jobs they applied to.

    Raises:
        NotFoundError: If no user has this username
    """
    rows = execute(
        db,
        f"SELECT {USER_COLUMNS} FROM users WHERE username = $1",
        [username],
    )
    if not rows:
        raise NotFoundError(f"No user: {username}")

    user = to_record(rows[0])
    applications = execute(
        db,
        "SELECT job_id FROM applications WHERE username = $1 ORDER BY job_id",
        [username],
    )
    user["jobs"] = [row["job_id"] for row in applications]
    return user


def update(db: Session, username: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a user; a new password is hashed before storing.

    Raises:
        BadRequestError: If data is empty or names an immutable/unknown field
        NotFoundError: If no user has this username
    """
    if "username" in data:
        raise BadRequestError("Not allowed to change username")

    unknown = [field for field in data if field not in MUTABLE_FIELDS]
    if unknown:
        raise BadRequestError(f"Cannot update user field(s): {', '.join(unknown)}")

    data = dict(data)
    if data.get("password"):
        data["password"] = get_password_hash(data["password"])

    set_cols, values = sql_for_partial_update(data, MUTABLE_FIELDS)
    username_var_idx = f"${len(values) + 1}"

    with constraint_violations_as_bad_request(db, f"Invalid user data: {username}"):
        rows = execute(
            db,
            f"""UPDATE users
                SET {set_cols}
                WHERE username = {username_var_idx}
                RETURNING {USER_COLUMNS}""",
            [*values, username],
        )
    if not rows:
        raise NotFoundError(f"No user: {username}")
    db.commit()

    logger.info(f"Updated user {username}: {', '.join(data)}")
    return to_record(rows[0])


def remove(db: Session, username: str) -> None:
    """
    Delete a user; their applications are removed with them.

    Raises:
        NotFoundError: If no user has this username
    """
    rows = execute(
        db,
        "DELETE FROM users WHERE username = $1 RETURNING username",
        [username],
    )
    if not rows:
        raise NotFoundError(f"No user: {username}")
    db.commit()

    logger.info(f"Deleted user {username}")


def apply_to_job(db: Session, username: str, job_id: int) -> None:
    """
    Record that a user applied to a job.

    Raises:
        NotFoundError: If the job or the user does not exist
        BadRequestError: If the user already applied to this job
    """
    if not execute(db, "SELECT id FROM jobs WHERE id = $1", [job_id]):
        raise NotFoundError(f"No job: {job_id}")

    if not execute(db, "SELECT username FROM users WHERE username = $1", [username]):
        raise NotFoundError(f"No user: {username}")

    already_applied = execute(
        db,
        "SELECT job_id FROM applications WHERE username = $1 AND job_id = $2",
        [username, job_id],
    )
    if already_applied:
        raise BadRequestError(f"{username} already applied to job {job_id}")

    # A concurrent request can still insert the pair first; the primary key rejects ours
    with constraint_violations_as_bad_request(db, f"{username} already applied to job {job_id}"):
        execute(
            db,
            "INSERT INTO applications (username, job_id) VALUES ($1, $2)",
            [username, job_id],
        )
        db.commit()

    logger.info(f"{username} applied to job {job_id}")
