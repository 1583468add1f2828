"""
CRUD operations (Create, Read, Update, Delete) for the job board entities.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern. Errors are raised as core.exceptions types.
"""

from jobly.crud import company, job, user

__all__ = ["company", "job", "user"]
