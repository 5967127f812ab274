# app/routers/auth.py
from fastapi import APIRouter, Depends, status

from app.core.auth import require_auth
from app.database import get_user_repo
from app.repositories.user_repo import UserRepository
from app.schemas.user import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    TokenClaims,
    UserRead,
)
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


def get_auth_service(repo: UserRepository = Depends(get_user_repo)) -> AuthService:
    return AuthService(repo)


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
):
    """
    Create an account and return it with a bearer token.

    - `role` defaults to "user".
    - 400 if the email is already registered (case-insensitive).
    """
    user, token = service.register(payload.email, payload.password, payload.role)
    return AuthResponse(user=UserRead.model_validate(user, from_attributes=True), token=token)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    """
    Exchange email + password for a bearer token.

    - 401 with the same message for unknown email and wrong password.
    """
    user, token = service.login(payload.email, payload.password)
    return AuthResponse(user=UserRead.model_validate(user, from_attributes=True), token=token)


@router.get("/me", response_model=UserRead)
def read_me(
    claims: TokenClaims = Depends(require_auth),
    service: AuthService = Depends(get_auth_service),
):
    """
    Return the authenticated user's account.

    Auth:
      - Requires a valid bearer token.
    """
    return service.get_current_user(claims)
