# app/services/stats_service.py
from collections import defaultdict

from app.models.user import Role
from app.repositories.sweet_repo import SweetRepository
from app.repositories.user_repo import UserRepository
from app.schemas.stats import CategoryStats, InventoryStats

LOW_STOCK_THRESHOLD = 5


class StatsService:
    """
    Orchestrates aggregated admin dashboard statistics.
    """

    def __init__(self, sweet_repo: SweetRepository, user_repo: UserRepository):
        self.sweet_repo = sweet_repo
        self.user_repo = user_repo

    def get_inventory_stats(
        self,
        low_stock_threshold: int = LOW_STOCK_THRESHOLD,
    ) -> InventoryStats:
        sweets = self.sweet_repo.list_all()

        total_stock = sum(s.quantity for s in sweets)
        total_value = sum(s.price * s.quantity for s in sweets)
        low_stock = sum(1 for s in sweets if 0 < s.quantity <= low_stock_threshold)
        out_of_stock = sum(1 for s in sweets if s.quantity == 0)

        # Category breakdown, sorted by name for a stable payload
        counts: dict[str, int] = defaultdict(int)
        stock: dict[str, int] = defaultdict(int)
        for s in sweets:
            counts[s.category] += 1
            stock[s.category] += s.quantity

        categories = [
            CategoryStats(
                category=name,
                sweet_count=counts[name],
                total_stock=stock[name],
            )
            for name in sorted(counts)
        ]

        return InventoryStats(
            total_sweets=len(sweets),
            total_stock=total_stock,
            total_value=round(total_value, 2),
            low_stock=low_stock,
            out_of_stock=out_of_stock,
            total_customers=self.user_repo.count_by_role(Role.USER),
            categories=categories,
        )
