# app/services/sweet_service.py
import logging

from fastapi import HTTPException, status

from app.models.sweet import Sweet
from app.repositories.errors import OutOfStockError, StockLimitError
from app.repositories.sweet_repo import SweetFilter, SweetRepository
from app.schemas.sweet import SweetCreate, SweetUpdate

logger = logging.getLogger(__name__)


class SweetService:
    """
    Business logic for Sweet.

    Responsibilities:
      - not-found / out-of-stock mapping to HTTP errors
      - admin-only operations (enforced at router via require_admin)
      - payloads arrive already validated by the schemas
    """

    def __init__(self, repo: SweetRepository):
        self.repo = repo

    @staticmethod
    def _not_found() -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Sweet not found",
        )

    # ----- Public -----

    def list_sweets(self) -> list[Sweet]:
        return self.repo.list_all()

    def search_sweets(self, criteria: SweetFilter) -> list[Sweet]:
        return self.repo.search(criteria)

    def get_sweet(self, sweet_id: str) -> Sweet:
        sweet = self.repo.get_by_id(sweet_id)
        if sweet is None:
            raise self._not_found()
        return sweet

    # ----- Admin -----

    def create_sweet(self, payload: SweetCreate, admin_id: str) -> Sweet:
        sweet = self.repo.create(payload.model_dump(), admin_id)
        logger.info("Admin %s created sweet %s", admin_id, sweet.id)
        return sweet

    def update_sweet(self, sweet_id: str, payload: SweetUpdate) -> Sweet:
        """
        Partial update. Ownership (adminId) never changes.
        """
        sweet = self.repo.update(sweet_id, payload.changes())
        if sweet is None:
            raise self._not_found()
        return sweet

    def delete_sweet(self, sweet_id: str) -> None:
        if not self.repo.delete(sweet_id):
            raise self._not_found()
        logger.info("Deleted sweet %s", sweet_id)

    def restock_sweet(self, sweet_id: str, amount: int) -> Sweet:
        """
        Add `amount` units. The resulting quantity is capped at MAX_QUANTITY.
        """
        if amount <= 0:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid restock amount",
            )

        try:
            sweet = self.repo.restock(sweet_id, amount)
        except StockLimitError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Restock would exceed the maximum stock level",
            )

        if sweet is None:
            raise self._not_found()
        logger.info("Restocked sweet %s by %d", sweet_id, amount)
        return sweet

    # ----- Customers -----

    def purchase_sweet(self, sweet_id: str) -> Sweet:
        """
        Take exactly one unit.

        Raises:
            HTTPException(404): unknown id.
            HTTPException(400): quantity is 0.
        """
        try:
            sweet = self.repo.purchase(sweet_id)
        except OutOfStockError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Sweet is out of stock",
            )

        if sweet is None:
            raise self._not_found()
        return sweet
