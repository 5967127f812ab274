# app/schemas/user.py
from pydantic import ConfigDict, EmailStr, field_validator
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel, Field

from app.models.user import Role

# bcrypt only looks at the first 72 bytes of a password.
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 72


class RegisterRequest(SQLModel):
    """
    Payload for account registration.

    Validation rules:
      - email must be a valid EmailStr
      - password 6..72 characters
      - role defaults to "user"
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(
        min_length=PASSWORD_MIN_LENGTH,
        max_length=PASSWORD_MAX_LENGTH,
    )
    role: Role = Role.USER

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > PASSWORD_MAX_LENGTH:
            raise ValueError("Password must be at most 72 bytes")
        return v


class LoginRequest(SQLModel):
    """
    Payload for login.

    No upper length bound: an oversized password simply fails to match.
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)


class UserRead(SQLModel):
    """Response schema returned to clients. Never carries the password hash."""

    id: str
    email: str
    role: Role


class AuthResponse(SQLModel):
    user: UserRead
    token: str


class TokenClaims(SQLModel):
    """
    Identity carried by a bearer token.

    Serialised as `{userId, email, role}` inside the JWT.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str
    email: str
    role: Role
