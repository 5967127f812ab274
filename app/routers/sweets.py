# app/routers/sweets.py
import math

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.core.auth import require_admin, require_auth
from app.database import get_sweet_repo
from app.repositories.sweet_repo import SweetFilter, SweetRepository
from app.schemas.sweet import (
    MessageResponse,
    RestockRequest,
    SweetCreate,
    SweetRead,
    SweetUpdate,
)
from app.schemas.user import TokenClaims
from app.services.sweet_service import SweetService

router = APIRouter(prefix="/sweets", tags=["Sweets"])


def get_sweet_service(repo: SweetRepository = Depends(get_sweet_repo)) -> SweetService:
    return SweetService(repo)


def _parse_price(name: str, raw: str | None) -> float | None:
    """Blank means "no bound"; anything else must be a finite number."""
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        value = math.nan
    if not math.isfinite(value):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{name} must be a number",
        )
    return value


# -------- Public endpoints --------


@router.get("", response_model=list[SweetRead])
def list_sweets(service: SweetService = Depends(get_sweet_service)):
    """
    List every sweet, including out-of-stock ones.
    """
    return service.list_sweets()


@router.get("/search", response_model=list[SweetRead])
def search_sweets(
    name: str | None = None,
    category: str | None = None,
    min_price: str | None = Query(default=None, alias="minPrice"),
    max_price: str | None = Query(default=None, alias="maxPrice"),
    service: SweetService = Depends(get_sweet_service),
):
    """
    Filter sweets.

    - name: case-insensitive substring
    - category: exact match
    - minPrice / maxPrice: inclusive bounds
    """
    criteria = SweetFilter(
        name=name or None,
        category=category or None,
        min_price=_parse_price("minPrice", min_price),
        max_price=_parse_price("maxPrice", max_price),
    )
    return service.search_sweets(criteria)


@router.get("/{sweet_id}", response_model=SweetRead)
def get_sweet(
    sweet_id: str,
    service: SweetService = Depends(get_sweet_service),
):
    """
    Get a single sweet by id.
    """
    return service.get_sweet(sweet_id)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=SweetRead,
    status_code=status.HTTP_201_CREATED,
)
def create_sweet(
    payload: SweetCreate,
    admin: TokenClaims = Depends(require_admin),
    service: SweetService = Depends(get_sweet_service),
):
    """
    Create a new sweet owned by the calling admin.
    """
    return service.create_sweet(payload, admin_id=admin.user_id)


@router.put(
    "/{sweet_id}",
    response_model=SweetRead,
    dependencies=[Depends(require_admin)],
)
def update_sweet(
    sweet_id: str,
    payload: SweetUpdate,
    service: SweetService = Depends(get_sweet_service),
):
    """
    Partially update a sweet (admin only).

    `id` and `adminId` in the body are ignored.
    """
    return service.update_sweet(sweet_id, payload)


@router.delete(
    "/{sweet_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def delete_sweet(
    sweet_id: str,
    service: SweetService = Depends(get_sweet_service),
):
    """
    Delete a sweet (admin only).
    """
    service.delete_sweet(sweet_id)
    return MessageResponse(message="Sweet deleted successfully")


@router.post(
    "/{sweet_id}/restock",
    response_model=SweetRead,
    dependencies=[Depends(require_admin)],
)
def restock_sweet(
    sweet_id: str,
    payload: RestockRequest,
    service: SweetService = Depends(get_sweet_service),
):
    """
    Add units to a sweet's stock (admin only). `amount` must be a positive integer.
    """
    return service.restock_sweet(sweet_id, payload.amount)


# -------- Customer endpoints --------


@router.post(
    "/{sweet_id}/purchase",
    response_model=SweetRead,
    dependencies=[Depends(require_auth)],
)
def purchase_sweet(
    sweet_id: str,
    service: SweetService = Depends(get_sweet_service),
):
    """
    Buy one unit. Any authenticated role may purchase.
    """
    return service.purchase_sweet(sweet_id)
