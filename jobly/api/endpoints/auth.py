"""
Authentication endpoints.

- POST /auth/token: exchange username/password for a JWT
- POST /auth/register: create a (non-admin) account and return a JWT
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.security import create_token
from jobly.crud import user as user_crud
from jobly.schemas.user import TokenResponse, UserAuthRequest, UserRegisterRequest

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/token", response_model=TokenResponse)
def login(request: UserAuthRequest, db: Session = Depends(get_db)):
    """
    Authenticate a user and return a token.

    Authorization required: none
    """
    user = user_crud.authenticate(db, request.username, request.password)
    logger.info(f"Issued token for {user['username']}")
    return TokenResponse(token=create_token(user))


@router.post("/register", status_code=201, response_model=TokenResponse)
def register(request: UserRegisterRequest, db: Session = Depends(get_db)):
    """
    Register a new user account and return a token for it.

    Self-registered users are never admins.

    Authorization required: none
    """
    user = user_crud.register(db, {**request.model_dump(by_alias=True), "isAdmin": False})
    return TokenResponse(token=create_token(user))
