# app/services/auth_service.py
import logging

from fastapi import HTTPException, status

from app.core.security import (
    InvalidTokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from app.models.user import Role, User
from app.repositories.errors import DuplicateEmailError
from app.repositories.user_repo import UserRepository
from app.schemas.user import TokenClaims

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """
    Business logic for accounts and tokens.

    Responsibilities:
      - hash passwords before they reach the store
      - issue and verify bearer tokens
      - map store errors to HTTP errors
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def register(
        self,
        email: str,
        password: str,
        role: Role = Role.USER,
    ) -> tuple[User, str]:
        """
        Create an account and log it in.

        Raises:
            HTTPException(400): if the email is already registered.
        """
        if self.repo.get_by_email(email) is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered",
            )

        password_hash = hash_password(password)
        try:
            user = self.repo.create(email, password_hash, role)
        except DuplicateEmailError:
            # Lost a race with a concurrent registration
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered",
            )

        logger.info("Registered user %s with role %s", user.id, user.role.value)
        return user, create_access_token(user)

    def login(self, email: str, password: str) -> tuple[User, str]:
        """
        Check credentials and issue a fresh token.

        Unknown email and wrong password produce the same error so callers
        cannot tell which emails are registered.

        Raises:
            HTTPException(401): on bad credentials.
        """
        user = self.repo.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=INVALID_CREDENTIALS,
            )

        return user, create_access_token(user)

    def verify(self, token: str | None) -> TokenClaims:
        """
        Verify a raw token.

        Raises:
            HTTPException(401): if missing, malformed, badly signed or expired.
        """
        if not token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required",
            )
        try:
            return decode_access_token(token)
        except InvalidTokenError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired token",
            )

    def get_current_user(self, claims: TokenClaims) -> User:
        """
        Load the account behind a verified token.

        Raises:
            HTTPException(401): if the account no longer exists
            (e.g. the volatile store was restarted).
        """
        user = self.repo.get_by_id(claims.user_id)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Account no longer exists",
            )
        return user
