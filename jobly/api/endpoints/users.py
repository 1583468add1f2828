"""
User management and job application endpoints.

- POST /users: admin creates a user (optionally an admin) and gets a token for it
- GET /users: admin lists users
- GET/PATCH/DELETE /users/{username}: the user themself or an admin
- POST /users/{username}/jobs/{job_id}: apply to a job (same user or admin)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import ensure_admin, ensure_correct_user_or_admin
from jobly.core.security import create_token
from jobly.crud import user as user_crud
from jobly.schemas.user import (
    ApplicationResponse,
    UserCreateRequest,
    UserCreatedResponse,
    UserDeletedResponse,
    UserDetailSingleResponse,
    UserListResponse,
    UserSingleResponse,
    UserUpdateRequest,
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", status_code=201, response_model=UserCreatedResponse, dependencies=[Depends(ensure_admin)])
def create_user(request: UserCreateRequest, db: Session = Depends(get_db)):
    """
    Add a new user. Unlike /auth/register this can create admins.

    Authorization required: admin
    """
    user = user_crud.register(db, request.model_dump(by_alias=True))
    return {"user": user, "token": create_token(user)}


@router.get("", response_model=UserListResponse, dependencies=[Depends(ensure_admin)])
def list_users(db: Session = Depends(get_db)):
    """
    List all users.

    Authorization required: admin
    """
    return {"users": user_crud.find_all(db)}


@router.get("/{username}", response_model=UserDetailSingleResponse, dependencies=[Depends(ensure_correct_user_or_admin)])
def get_user(username: str, db: Session = Depends(get_db)):
    """
    Retrieve a user and the ids of the jobs they applied to.

    Authorization required: same user or admin
    """
    return {"user": user_crud.get(db, username)}


@router.patch("/{username}", response_model=UserSingleResponse, dependencies=[Depends(ensure_correct_user_or_admin)])
def update_user(username: str, request: UserUpdateRequest, db: Session = Depends(get_db)):
    """
    Partially update a user: firstName, lastName, password, email.

    Authorization required: same user or admin
    """
    user = user_crud.update(db, username, request.model_dump(by_alias=True, exclude_unset=True))
    return {"user": user}


@router.delete("/{username}", response_model=UserDeletedResponse, dependencies=[Depends(ensure_correct_user_or_admin)])
def delete_user(username: str, db: Session = Depends(get_db)):
    """
    Delete a user.

    Authorization required: same user or admin
    """
    user_crud.remove(db, username)
    return {"deleted": username}


@router.post(
    "/{username}/jobs/{job_id}",
    response_model=ApplicationResponse,
    dependencies=[Depends(ensure_correct_user_or_admin)],
)
def apply_to_job(username: str, job_id: int, db: Session = Depends(get_db)):
    """
    Apply a user to a job. Applying twice to the same job is a 400.

    Authorization required: same user or admin
    """
    user_crud.apply_to_job(db, username, job_id)
    return {"applied": job_id}
