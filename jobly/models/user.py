"""
User model for authentication and job applications.

Each User is identified by username; `is_admin` grants access to the
admin-only endpoints.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, String, Text, false
from jobly.core.database import Base


class User(Base):
    """
    User account.

    `password` holds the bcrypt hash, never the plain password.
    """
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("email LIKE '%@%'", name="ck_users_email_has_at"),
    )

    username = Column(String(25), primary_key=True)
    password = Column(Text, nullable=False)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    is_admin = Column(Boolean, server_default=false(), nullable=False)

    def __repr__(self):
        return f"<User(username='{self.username}', is_admin={self.is_admin})>"
