# app/models/sweet.py
import uuid

from sqlmodel import SQLModel, Field

# Stock is stored in a 32-bit signed integer column.
MAX_QUANTITY = 2**31 - 1


class Sweet(SQLModel, table=True):
    """
    Inventory entry for the shop.

    `admin_id` points at the admin who created the record. It is a lookup
    reference only, there is no foreign key to users.
    """

    __tablename__ = "sweets"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True,
        max_length=36,
    )

    name: str = Field(
        max_length=100,
        index=True,
        description="Display name of the sweet",
    )

    category: str = Field(
        index=True,
        description="Free-form category (chocolate, candy, cake, ...)",
    )

    price: float = Field(
        gt=0,
        description="Unit price",
    )

    quantity: int = Field(
        default=0,
        ge=0,
        le=MAX_QUANTITY,
        description="Units currently in stock",
    )

    image_url: str | None = Field(
        default=None,
        description="Optional picture URL",
    )

    description: str | None = Field(
        default=None,
        max_length=500,
    )

    admin_id: str = Field(
        max_length=36,
        description="User id of the creating admin",
    )
