# app/repositories/errors.py
"""
Store-level failures.

Repositories stay free of FastAPI; services translate these into HTTP errors.
"""


class DuplicateEmailError(Exception):
    """An account with this email (compared case-insensitively) already exists."""

    def __init__(self, email: str):
        super().__init__(f"Email already registered: {email}")
        self.email = email


class OutOfStockError(Exception):
    """Purchase refused because the sweet has no units left."""

    def __init__(self, sweet_id: str):
        super().__init__(f"Sweet {sweet_id} is out of stock")
        self.sweet_id = sweet_id


class StockLimitError(Exception):
    """Restock refused because the resulting quantity would exceed MAX_QUANTITY."""

    def __init__(self, sweet_id: str, amount: int):
        super().__init__(f"Restocking sweet {sweet_id} by {amount} exceeds the stock limit")
        self.sweet_id = sweet_id
        self.amount = amount
