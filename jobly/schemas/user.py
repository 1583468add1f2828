"""
Pydantic schemas for users, registration and authentication.
"""

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator
from typing import List, Optional


class UserRegisterRequest(BaseModel):
    """Request schema for self-registration (never admin)."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(
        ...,
        min_length=5,
        max_length=72,  # bcrypt limit
    )
    first_name: str = Field(..., alias="firstName", min_length=1, max_length=30)
    last_name: str = Field(..., alias="lastName", min_length=1, max_length=30)
    email: EmailStr

    class Config:
        extra = "forbid"
        populate_by_name = True


class UserCreateRequest(UserRegisterRequest):
    """Request schema for admin-created users; may grant admin."""
    is_admin: bool = Field(False, alias="isAdmin")


class UserAuthRequest(BaseModel):
    """Request schema for exchanging credentials for a token."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    class Config:
        extra = "forbid"


class UserUpdateRequest(BaseModel):
    """Partial update of a user's profile; username cannot change."""
    first_name: Optional[str] = Field(None, alias="firstName", min_length=1, max_length=30)
    last_name: Optional[str] = Field(None, alias="lastName", min_length=1, max_length=30)
    password: Optional[str] = Field(None, min_length=5, max_length=72)
    email: Optional[EmailStr] = None

    class Config:
        extra = "forbid"
        populate_by_name = True

    @field_validator("first_name", "last_name", "password", "email")
    @classmethod
    def fields_not_null(cls, v: Optional[str], info: ValidationInfo) -> str:
        """Every profile field may be left out, but none can be cleared."""
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class TokenResponse(BaseModel):
    """JWT token response."""
    token: str


class UserResponse(BaseModel):
    """User profile response (no password hash)."""
    username: str
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    email: str
    is_admin: bool = Field(..., alias="isAdmin")

    class Config:
        populate_by_name = True


class UserDetailResponse(UserResponse):
    """User profile plus the ids of the jobs applied to."""
    jobs: List[int] = []


class UserSingleResponse(BaseModel):
    user: UserResponse


class UserDetailSingleResponse(BaseModel):
    user: UserDetailResponse


class UserCreatedResponse(BaseModel):
    user: UserResponse
    token: str


class UserListResponse(BaseModel):
    users: List[UserResponse]


class UserDeletedResponse(BaseModel):
    deleted: str


class ApplicationResponse(BaseModel):
    applied: int
