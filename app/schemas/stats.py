# app/schemas/stats.py
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel


class _CamelModel(SQLModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CategoryStats(_CamelModel):
    """
    Per-category slice of the inventory.
    """

    category: str
    sweet_count: int
    total_stock: int


class InventoryStats(_CamelModel):
    """
    Full payload for admin dashboard.
    """

    total_sweets: int
    total_stock: int
    total_value: float
    low_stock: int
    out_of_stock: int
    total_customers: int
    categories: list[CategoryStats]
