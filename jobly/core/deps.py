"""
FastAPI dependencies for authentication and authorization.

get_current_user reads the bearer token when one is sent and never fails on
its own; the ensure_* dependencies build the three authorization levels on
top of it (logged in, admin, same user or admin).
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError

from jobly.core.exceptions import UnauthorizedError
from jobly.core.security import decode_token

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme (Authorization: Bearer <token>)
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """Identity carried by a valid token."""
    username: str
    is_admin: bool = False


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[CurrentUser]:
    """
    Extract the caller's identity from the JWT, if any.

    Returns None when no token is provided or the token is invalid;
    rejecting anonymous callers is left to the ensure_* dependencies.
    """
    if not credentials:
        return None

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        logger.warning("Rejected invalid bearer token")
        return None

    username = payload.get("username")
    if username is None:
        return None

    return CurrentUser(username=username, is_admin=bool(payload.get("isAdmin", False)))


async def ensure_logged_in(
    user: Optional[CurrentUser] = Depends(get_current_user),
) -> CurrentUser:
    """
    Require any valid token.

    Raises:
        UnauthorizedError: If no valid token was sent
    """
    if user is None:
        raise UnauthorizedError()
    return user


async def ensure_admin(
    user: CurrentUser = Depends(ensure_logged_in),
) -> CurrentUser:
    """
    Require a token with the admin flag.

    Raises:
        UnauthorizedError: If the caller is anonymous or not an admin
    """
    if not user.is_admin:
        raise UnauthorizedError()
    return user


async def ensure_correct_user_or_admin(
    username: str,
    user: CurrentUser = Depends(ensure_logged_in),
) -> CurrentUser:
    """
    Require the token's user to match the `username` path parameter,
    unless the caller is an admin.

    Raises:
        UnauthorizedError: If the caller is anonymous or another non-admin user
    """
    if not (user.is_admin or user.username == username):
        raise UnauthorizedError()
    return user
