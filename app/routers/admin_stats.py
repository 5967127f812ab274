# app/routers/admin_stats.py
from fastapi import APIRouter, Depends

from app.core.auth import require_admin
from app.database import get_sweet_repo, get_user_repo
from app.repositories.sweet_repo import SweetRepository
from app.repositories.user_repo import UserRepository
from app.schemas.stats import InventoryStats
from app.services.stats_service import StatsService

router = APIRouter(prefix="/admin/stats", tags=["Admin Stats"])


def get_stats_service(
    sweet_repo: SweetRepository = Depends(get_sweet_repo),
    user_repo: UserRepository = Depends(get_user_repo),
) -> StatsService:
    return StatsService(sweet_repo, user_repo)


@router.get(
    "",
    response_model=InventoryStats,
    dependencies=[Depends(require_admin)],
)
def get_inventory_stats(service: StatsService = Depends(get_stats_service)):
    """
    Aggregated inventory statistics for the admin dashboard.

    Only accessible to users with role='admin'.
    """
    return service.get_inventory_stats()
