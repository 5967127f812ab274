# app/core/auth.py
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.security import InvalidTokenError, decode_access_token
from app.models.user import Role
from app.schemas.user import TokenClaims

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so we can answer 401 ourselves (FastAPI's default would be 403).
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenClaims | None:
    """
    Resolve the caller's identity from the bearer token.

    Flow:
      1. If no Authorization header => guest => return None.
      2. Verify signature + expiry and parse {userId, email, role}.

    Raises:
        HTTPException(401): if a token is present but invalid/expired.
    """
    if credentials is None:
        return None  # guest mode

    try:
        return decode_access_token(credentials.credentials)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_auth(claims: TokenClaims | None = Depends(get_current_claims)) -> TokenClaims:
    """
    Enforce authentication.

    Raises:
        HTTPException(401): if the caller is a guest.
    """
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims


def require_admin(claims: TokenClaims = Depends(require_auth)) -> TokenClaims:
    """
    Enforce admin role.

    Raises:
        HTTPException(403): if role is not admin.
    """
    match claims.role:
        case Role.ADMIN:
            return claims
        case Role.USER:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Admin access required",
            )
