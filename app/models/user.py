# app/models/user.py
import uuid
from enum import Enum

from sqlmodel import SQLModel, Field


class Role(str, Enum):
    """
    Application role.

    "guest" is represented by the absence of a token, not by a role.
    """

    USER = "user"
    ADMIN = "admin"


class User(SQLModel, table=True):
    """
    Registered account.

    Only the bcrypt hash of the password is kept. The plaintext never
    reaches this model.
    """

    __tablename__ = "users"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True,
        max_length=36,
    )

    email: str = Field(
        description="Login email as entered",
    )

    email_lower: str = Field(
        unique=True,
        index=True,
        description="Lower-cased email; the database enforces uniqueness on it",
    )

    password_hash: str = Field(
        description="bcrypt hash of the password",
    )

    role: Role = Field(
        default=Role.USER,
        index=True,
        description="Application role: user | admin",
    )
